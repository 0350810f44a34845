## toyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable

from .types import Value, create_list
from .parser import compile as _compile, report_malformed_token
from .library import OperatorTable
from .builtins import load_builtins_table
from .formatting import to_python, from_python
from .interpreter import execute as _execute


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, table: OperatorTable | None = None):
        self.table = table or load_builtins_table()

    # Compilation ─────────────────────────────────────────────────────────────────────────────
    def compile(self, source: str, filename: str | None = None, on_error: Callable | None = report_malformed_token) -> Value:
        return _compile(source, self.table.names, filename=filename, on_error=on_error)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def execute(self, program: Value, stack: Value | None = None, verbosity: int = 0, stats: dict | None = None) -> Value:
        return _execute(program, self.table, stack=stack, verbosity=verbosity, stats=stats)

    def run(self, source: str, stack: Value | None = None, filename: str | None = None,
            verbosity: int = 0, stats: dict | None = None, on_error: Callable | None = report_malformed_token) -> Value:
        program = self.compile(source, filename=filename, on_error=on_error)
        try:
            return self.execute(program, stack=stack, verbosity=verbosity, stats=stats)
        finally:
            program.deref()

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable) -> None:
        self.table.add_function(name, func)

    def register_combinator(self, name: str, func: Callable) -> None:
        self.table.add_combinator(name, func)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def get_signature(self, name: str) -> dict:
        return self.table.functions[name].__toy_meta__

    def list_operations(self) -> dict[str, dict | None]:
        ops = {n: fn.__toy_meta__ for n, fn in self.table.functions.items()}
        ops.update({n: None for n in self.table.combinators})
        return ops

    def to_stack(self, values: list[Any]) -> Value:
        stack = create_list()
        for it in values:
            value = from_python(it)
            stack.append(value)
            value.deref()
        return stack

    def from_stack(self, stack: Value) -> list:
        """Stack contents bottom to top, as plain Python data."""
        return to_python(stack)
