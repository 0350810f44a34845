## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import bisect
import string
import sys
from typing import Callable

import lark

from .types import Value, create_integer, create_boolean, create_string, create_symbol, create_list
from .errors import ToyParseError, ToyMalformedToken, ToyIncompleteParse


WHITESPACE = frozenset(string.whitespace)
DELIMITERS = WHITESPACE | {'[', ']'}
DIGITS = frozenset(string.digits)
SYMBOL_START = frozenset(string.ascii_letters + string.digits + '_')
SYMBOL_CHARS = frozenset(string.ascii_letters + string.digits + string.punctuation) - {'[', ']'}
# Decimal chunk size that stays below the interpreter's int/str conversion limit.
DIGIT_CHUNK = 1000


class Parser:
    """Recursive-descent parser over the whole source text, with a single cursor `p`.

    Literals and symbols must end at whitespace, a bracket or the end of the text.  Tokens that
    don't are malformed: `parse_value()` raises `ToyMalformedToken` with the cursor reset to the
    token's start, and `compile()` reports them and skips ahead.  Unclosed lists or strings are
    structural errors and abort the whole parse.
    """

    def __init__(self, text: str, names: list[str], filename: str | None = None,
                 on_error: Callable[[ToyMalformedToken], None] | None = None):
        self.text = text
        self.start, self.end, self.p = 0, len(text), 0
        self.names = sorted(names, key=len, reverse=True)
        self.filename = filename
        self.on_error = on_error
        self.errors: list[ToyMalformedToken] = []
        self.line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == '\n']

    def _position(self, pos: int) -> tuple[int, int]:
        line = bisect.bisect_right(self.line_starts, pos)
        return line, pos - self.line_starts[line - 1] + 1

    def _token(self, type_: str, begin: int, end: int, value: str | None = None) -> lark.Token:
        line, column = self._position(begin)
        end_line, end_column = self._position(end)
        value = self.text[begin:end] if value is None else value
        return lark.Token(type_, value, start_pos=begin, line=line, column=column,
                          end_line=end_line, end_column=end_column, end_pos=end)

    def _error(self, cls, message: str, begin: int, end: int):
        line, column = self._position(begin)
        return cls(message, filename=self.filename, line=line, column=column, token=self.text[begin:end])

    def _at_delimiter(self) -> bool:
        return self.p >= self.end or self.text[self.p] in DELIMITERS

    def _token_end(self, pos: int) -> int:
        while pos < self.end and self.text[pos] not in DELIMITERS:
            pos += 1
        return pos

    def trim_leading(self) -> None:
        while self.p < self.end:
            ch = self.text[self.p]
            if ch in WHITESPACE:
                self.p += 1
            elif ch == '#':
                while self.p < self.end and self.text[self.p] != '\n':
                    self.p += 1
            else:
                break

    def parse_value(self) -> Value | None:
        """Parse one value at the cursor, or return `None` at the end of the text."""
        self.trim_leading()
        if self.p >= self.end: return None
        ch = self.text[self.p]

        if ch in DIGITS:
            return self._parse_integer()
        if ch == '[':
            return self._parse_list()
        if ch == '"':
            return self._parse_string()
        if (name := self._match_operator()) is not None:
            symbol = create_symbol(self._token('OPERATOR', self.p, self.p + len(name)))
            self.p += len(name)
            return symbol
        if ch in SYMBOL_START:
            return self._parse_symbol()
        raise self._error(ToyParseError, f"Unexpected character `{ch}` in input.", self.p, self.p + 1)

    def _parse_integer(self) -> Value:
        saved = self.p
        while self.p < self.end and self.text[self.p] in DIGITS:
            self.p += 1
        if not self._at_delimiter():
            self.p = saved
            raise self._error(ToyMalformedToken, "Not a valid number value.", saved, self._token_end(saved))
        return create_integer(_digits_to_int(self.text, saved, self.p))

    def _parse_list(self) -> Value:
        saved = self.p
        self.p += 1
        result = create_list()
        while True:
            self.trim_leading()
            if self.p >= self.end:
                result.deref()
                raise self._error(ToyIncompleteParse, "List is missing its closing `]`.", saved, self.end)
            if self.text[self.p] == ']':
                break
            if (value := self._parse_or_skip()) is not None:
                result.append(value)
                value.deref()
        self.p += 1
        return result

    def _parse_string(self) -> Value:
        saved = self.p
        close = self.text.find('"', self.p + 1, self.end)
        if close < 0:
            raise self._error(ToyIncompleteParse, "String is missing its closing quote.", saved, self.end)
        self.p = close + 1
        if not self._at_delimiter():
            self.p = saved
            raise self._error(ToyMalformedToken, "Not a valid string value.", saved, self._token_end(close + 1))
        return create_string(self._token('STRING', saved, self.p, self.text[saved+1:close]))

    def _match_operator(self) -> str | None:
        for name in self.names:
            if self.text.startswith(name, self.p, self.end):
                return name
        return None

    def _parse_symbol(self) -> Value:
        saved = self.p
        while self.p < self.end and self.text[self.p] in SYMBOL_CHARS:
            self.p += 1
        if not self._at_delimiter():
            self.p = saved
            raise self._error(ToyMalformedToken, "Not a valid symbol value.", saved, self._token_end(saved))

        match self.text[saved:self.p]:
            case 'true': return create_boolean(True)
            case 'false': return create_boolean(False)
        return create_symbol(self._token('SYMBOL', saved, self.p))

    def _parse_or_skip(self) -> Value | None:
        try:
            return self.parse_value()
        except ToyMalformedToken as exc:
            self.errors.append(exc)
            if self.on_error is not None:
                self.on_error(exc)
            self.p = self._token_end(self.p)
            return None

    def compile(self) -> Value:
        program = create_list()
        try:
            while self.p < self.end:
                if (value := self._parse_or_skip()) is not None:
                    program.append(value)
                    value.deref()
        except ToyParseError:
            program.deref()
            raise
        return program


def _digits_to_int(text: str, begin: int, end: int) -> int:
    """Decimal digits of any length, converted a chunk at a time."""
    number = 0
    for i in range(begin, end, DIGIT_CHUNK):
        chunk = text[i:min(i + DIGIT_CHUNK, end)]
        number = number * 10 ** len(chunk) + int(chunk)
    return number


def report_malformed_token(exc: ToyMalformedToken, file=None) -> None:
    where = f"{exc.filename or '<input>'}:{exc.line}:{exc.column}"
    print(f'\033[30;43m SYNTAX WARNING. \033[0m {exc} Skipping `\033[1;97m{exc.token}\033[0m` at {where}.',
          file=file or sys.stderr)


def compile(text: str, names: list[str] | None = None, filename: str | None = None,
            on_error: Callable[[ToyMalformedToken], None] | None = report_malformed_token) -> Value:
    """Parse the whole text into a program list; malformed tokens are reported and left out."""
    if names is None:
        from .builtins import load_builtins_table
        names = load_builtins_table().names
    return Parser(text, names, filename=filename, on_error=on_error).compile()


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source else open(filename, 'r').readlines()
    if not lines or line is None: return ''
    line = min(line, len(lines))
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    token_value = (token_value or '').split('\n', 1)[0]
    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column > 0 and column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'


def format_source_lines(filename: str | None, source: str | None, meta: dict | None, identifier: str) -> str:
    """Header plus highlighted source line for an operation that failed at runtime."""
    if not meta or meta.get('line') is None: return ''
    context = format_parse_error_context(filename, meta['line'], meta['column'], identifier, source=source) if source else ''
    return context or f"\033[97m  File \"{filename}\", line {meta['line']}, in {identifier}\033[0m\n"
