## toyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field

import lark

from . import buffer
from .errors import ToyAssertionError, ToyStackError


class Value:
    """Reference-counted tagged variant; every runtime object of the language is one of these.

    The count starts at 1 for the creator.  Lists hold exactly one count for each of their
    elements, and a value is released when its count drops from 1 to 0.
    """
    INTEGER = 1
    BOOLEAN = 2
    STRING = 3
    SYMBOL = 4
    LIST = 5

    TAG_NAMES = {INTEGER: 'Integer', BOOLEAN: 'Boolean', STRING: 'String', SYMBOL: 'Symbol', LIST: 'List'}

    __slots__ = ('tag', 'refcount', 'data')

    def __init__(self, tag: int, data):
        self.tag = tag
        self.refcount = 1
        self.data = data

    @property
    def type_name(self) -> str:
        return Value.TAG_NAMES.get(self.tag, f'<tag {self.tag}>')

    def _check_alive(self, action: str):
        if self.refcount <= 0:
            raise ToyAssertionError(f"Called {action} on an already freed {self.type_name} value.")

    def _check_list(self, action: str):
        self._check_alive(action)
        if self.tag != Value.LIST:
            raise ToyAssertionError(f"Called {action} on a {self.type_name} value, expected List.")

    # Reference counting ──────────────────────────────────────────────────────────────────────
    def incref(self) -> "Value":
        self._check_alive('incref')
        self.refcount += 1
        return self

    def deref(self) -> None:
        self._check_alive('deref')
        self.refcount -= 1
        if self.refcount == 0:
            self._free()

    def _free(self) -> None:
        if self.tag == Value.LIST and self.data is not None:
            for item in self.data:
                item.deref()
        # Strings and symbols only reference the source text, there is nothing to release.
        self.data = None

    # List access ─────────────────────────────────────────────────────────────────────────────
    def count(self) -> int:
        self._check_list('count')
        return 0 if self.data is None else self.data.count

    def append(self, value: "Value") -> None:
        """Store `value` at the tail; the list takes its own count on it."""
        self._check_list('append')
        self.data = buffer.append(self.data, value)
        value.incref()

    def get(self, index: int) -> "Value":
        """Return the element at `index` with one extra count that the caller must release."""
        self._check_list('get')
        count = self.count()
        if not 0 <= index < count:
            raise ToyStackError(f"Cannot get element {index} from a list of {count}.")
        return self.data[index].incref()

    def pop(self) -> "Value":
        """Remove the tail element, handing the count the list held over to the caller."""
        self._check_list('pop')
        if (count := self.count()) == 0:
            raise ToyStackError("Cannot pop from an empty list.")
        value = self.data[count - 1]
        self.data.set_count(count - 1)
        return value

    def peek(self, depth: int = 0) -> "Value":
        self._check_list('peek')
        return self.data[self.count() - 1 - depth]

    def items(self):
        self._check_list('items')
        return iter(()) if self.data is None else iter(self.data)

    def __repr__(self):
        if self.refcount <= 0:
            return f"<freed {self.type_name}>"
        if self.tag == Value.LIST:
            return "[" + " ".join(repr(v) for v in self.items()) + "]"
        if self.tag == Value.BOOLEAN:
            return "true" if self.data else "false"
        if self.tag == Value.STRING:
            return f'"{self.data}"'
        return str(self.data)


def create_integer(i: int) -> Value:
    return Value(Value.INTEGER, int(i))

def create_boolean(b: bool) -> Value:
    return Value(Value.BOOLEAN, 1 if b else 0)

def create_string(text: str | lark.Token) -> Value:
    return Value(Value.STRING, text)

def create_symbol(text: str | lark.Token) -> Value:
    symbol = create_string(text)
    symbol.tag = Value.SYMBOL
    return symbol

def create_list() -> Value:
    return Value(Value.LIST, None)


class Operation:
    FUNCTION = 1
    COMBINATOR = 2

    def __init__(self, type, ptr, name, meta=None):
        self.type = type
        self.ptr = ptr
        self.name = name
        self.meta = meta or {}

    def __repr__(self):
        return f"{self.name}"


@dataclass
class Context:
    stack: Value
    table: object                     # OperatorTable
    verbosity: int = 0
    stats: dict | None = None
    depth: int = field(default=0)     # nesting of evaluate_list, for traces
