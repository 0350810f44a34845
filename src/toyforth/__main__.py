## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# toyforth — A minimal Forth-like stack language, with lists as quotations.
#

import io
import sys
import time
import traceback
from dataclasses import dataclass

import click

from .errors import ToyError, ToyParseError, ToyIncompleteParse, ToyNameError, ToyStackError, ToyAssertionError
from .parser import format_parse_error_context, format_source_lines
from .loader import read_entire_file
from .formatting import write_without_ansi, show_stack
from .runtime import Runtime


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    stats: bool
    plain: bool


class ToyRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime()
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        if not is_repl: self.failure = True

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> bool:
        if isinstance(exc, ToyParseError):
            if is_repl and isinstance(exc, ToyIncompleteParse): return True
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token, source=source)
            context += f"\n\033[90m{str(exc)}\033[0m\n"
            self._fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, ToyNameError):
            detail = f"Symbol `\033[1;97m{exc.toy_token}\033[0m` from `\033[97m{filename}\033[0m` is not a known operation!"
            context = '\n' + format_source_lines(filename, source, exc.toy_meta, exc.toy_token)
            self._fatal_error("NAME ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, (ToyStackError, ToyAssertionError)):
            banner = "STACK ERROR." if isinstance(exc, ToyStackError) else "ASSERTION FAILED."
            detail = f"Operation \033[1;97m`{exc.toy_op}`\033[0m raised an error: {exc}"
            context = '\n' + format_source_lines(filename, source, exc.toy_meta, exc.toy_token)
            if (stack := getattr(exc, 'toy_stack', None)) is not None and stack.refcount > 0:
                context += '\033[1;33m  Stack content is\033[0;33m\n    '
                context += _capture(lambda f: show_stack(stack, width=None, file=f)) + '\033[0m'
            self._fatal_error(banner, detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, ToyError):
            detail = f"Operation \033[1;97m`{exc.toy_op}`\033[0m caused an error in execute: {exc}"
            context = '\n' + format_source_lines(filename, source, exc.toy_meta, exc.toy_token)
            self._fatal_error("RUNTIME ERROR.", detail, type(exc).__name__, context, is_repl)
        else:
            print(f'\033[30;43m INTERNAL ERROR. \033[0m Execution stopped! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            if not is_repl: self.failure = True
        return False

    def execute_file(self, filename: str) -> None:
        try:
            source = read_entire_file(filename)
        except OSError as exc:
            self._fatal_error("FILE ERROR.", f"Could not read `\033[97m{filename}\033[0m`: {exc.strerror}.")
            return
        except UnicodeDecodeError as exc:
            self._fatal_error("FILE ERROR.", f"Could not decode `\033[97m{filename}\033[0m` as UTF-8: {exc.reason} at byte {exc.start}.")
            return
        self._execute_script(source, filename)

    def _execute_script(self, source: str, filename: str) -> None:
        try:
            stack = self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
            stack.deref()
        except Exception as exc:
            self._handle_exception(exc, filename, source, is_repl=False)
        else:
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('toyforth - Forth-like stack language REPL; type Ctrl+C to exit.')
        source, stack = "", self.runtime.to_stack([])

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                source += line + "\n"

                try:
                    program = self.runtime.compile(source, filename='<REPL>')
                except Exception as exc:
                    if not self._handle_exception(exc, '<REPL>', source, is_repl=True):
                        source = ""
                    continue

                source_text, source = source, ""
                try:
                    self.runtime.execute(program, stack=stack, verbosity=self.verbose)
                    print("\033[90m>>>\033[0m ", end=''); show_stack(stack, width=None)
                except Exception as exc:
                    self._handle_exception(exc, '<REPL>', source_text, is_repl=True)
                    stack.deref()
                    stack = self.runtime.to_stack([])
                finally:
                    program.deref()

            except (KeyboardInterrupt, EOFError):
                print(""); break
        stack.deref()

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _capture(write_fn) -> str:
    buf = io.StringIO()
    write_fn(buf)
    return buf.getvalue()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--verbose', '-v', default=0, count=True, help='Trace execution; repeat for every step.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--repl', '-r', is_flag=True, help='Start an interactive session after any file.')
@click.argument('files', nargs=-1, type=click.Path(dir_okay=False))
@click.pass_context
def cli(ctx: click.Context, verbose: int, stats: bool, plain: bool, repl: bool, files: tuple[str, ...]) -> None:
    if len(files) != 1 and not (repl and not files):
        click.echo(f"Usage: {ctx.info_name} <filename>")
        ctx.exit(1)

    runner = ToyRunner(RuntimeConfig(verbose=verbose, stats=stats, plain=plain))
    for filename in files:
        runner.execute_file(filename)
    if repl:
        runner.repl()
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=argv, prog_name='toyforth')


if __name__ == "__main__":
    main()
