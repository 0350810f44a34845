## toyforth — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def run_cli(*cli_args: str | Path, stdin: str | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "toyforth", *(str(arg) for arg in cli_args)]
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(repo_root() / "src"), env.get("PYTHONPATH")) if p)
    return subprocess.run(args, input=stdin, capture_output=True, text=True, env=env)


def write_program(tmp_path: Path, source: str) -> Path:
    path = tmp_path / "program.tf"
    path.write_text(source, encoding="utf-8")
    return path


def test_cli_prints_output(tmp_path):
    result = run_cli("--plain", write_program(tmp_path, "1 2 + print\n[1 [2 3]] print\n"))
    assert result.returncode == 0
    assert result.stdout == "3\n[\n  1\n  [\n    2\n    3\n  ]\n]\n"


def test_cli_requires_exactly_one_file(tmp_path):
    result = run_cli()
    assert result.returncode == 1
    assert "Usage: toyforth <filename>" in result.stdout

    path = write_program(tmp_path, "1 print\n")
    result = run_cli(path, path)
    assert result.returncode == 1


def test_cli_missing_file_fails(tmp_path):
    result = run_cli("--plain", tmp_path / "missing.tf")
    assert result.returncode == 1
    assert "FILE ERROR." in result.stdout


def test_cli_undecodable_file_fails(tmp_path):
    path = tmp_path / "binary.tf"
    path.write_bytes(b"1 print \xff\n")
    result = run_cli("--plain", path)
    assert result.returncode == 1
    assert "FILE ERROR." in result.stdout
    assert "Traceback" not in result.stdout + result.stderr


def test_cli_malformed_token_is_skipped(tmp_path):
    result = run_cli("--plain", write_program(tmp_path, "1 12x 2 + print\n"))
    assert result.returncode == 0
    assert "SYNTAX WARNING." in result.stdout
    assert result.stdout.rstrip().endswith("3")


def test_cli_unclosed_list_is_syntax_error(tmp_path):
    result = run_cli("--plain", write_program(tmp_path, "1 [2 3\n"))
    assert result.returncode == 1
    assert "SYNTAX ERROR." in result.stdout
    assert "ToyIncompleteParse" in result.stdout


def test_cli_unknown_symbol_shows_source_line(tmp_path):
    result = run_cli("--plain", write_program(tmp_path, "1 2 +\n3 frob print\n"))
    assert result.returncode == 1
    assert "NAME ERROR." in result.stdout
    assert "line 2" in result.stdout
    assert "3 frob print" in result.stdout


def test_cli_stack_error_shows_stack(tmp_path):
    result = run_cli("--plain", write_program(tmp_path, "1 true +\n"))
    assert result.returncode == 1
    assert "STACK ERROR." in result.stdout
    assert "Stack content is" in result.stdout


def test_cli_stats(tmp_path):
    result = run_cli("--plain", "--stats", write_program(tmp_path, "1 2 +\n"))
    assert result.returncode == 0
    assert "STATISTICS." in result.stdout
    assert "step\t3" in result.stdout


def test_cli_repl_keeps_stack_between_lines():
    result = run_cli("--plain", "--repl", stdin="1 2\n[3\n4] drop +\nprint\n")
    assert result.returncode == 0
    assert ">>> 1 2" in result.stdout
    assert ">>> 3" in result.stdout
