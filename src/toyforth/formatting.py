## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys

from .types import Value, create_integer, create_boolean, create_string, create_list
from .errors import ToyAssertionError


def format_value(value: Value, indent: int = 0) -> str:
    """Render a value the way `print` writes it: one item per line, lists indented by two."""
    pad = ' ' * indent
    match value.tag:
        case Value.INTEGER | Value.BOOLEAN:
            return f"{pad}{value.data:d}\n"
        case Value.STRING | Value.SYMBOL:
            return f"{pad}{value.data}\n"
        case Value.LIST:
            inner = ''.join(format_value(v, indent + 2) for v in value.items())
            return f"{pad}[\n{inner}{pad}]\n"
    raise ToyAssertionError(f"Cannot print value with invalid tag {value.tag}.")

def print_value(value: Value, indent: int = 0, file=None) -> None:
    (file or sys.stdout).write(format_value(value, indent))


def to_python(value: Value):
    match value.tag:
        case Value.INTEGER: return value.data
        case Value.BOOLEAN: return bool(value.data)
        case Value.STRING | Value.SYMBOL: return str(value.data)
        case Value.LIST: return [to_python(v) for v in value.items()]
    raise ToyAssertionError(f"Cannot convert value with invalid tag {value.tag}.")

def from_python(obj) -> Value:
    """Build a new value, owned once by the caller, from plain Python data."""
    if isinstance(obj, bool): return create_boolean(obj)
    if isinstance(obj, int): return create_integer(obj)
    if isinstance(obj, str): return create_string(obj)
    if isinstance(obj, (list, tuple)):
        result = create_list()
        for it in obj:
            item = from_python(it)
            result.append(item)
            item.deref()
        return result
    raise TypeError(f"Cannot convert {type(obj).__name__} to a value.")


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def format_item(it: Value) -> str:
    if it.refcount <= 0: return '≪freed≫'
    if it.tag == Value.LIST:
        return '[' + ' '.join(format_item(i) for i in it.items()) + ']'
    return repr(it)

def show_stack(stack: Value, width=72, end='\n', file=None):
    stack_str = ' '.join(format_item(s) for s in stack.items()) if stack.count() else '∅'
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)

def show_program_and_stack(program: list, stack: Value, width=72):
    prog_str = ' '.join(format_item(p) for p in program) if program else '∅'
    if len(prog_str) > width:
        prog_str = prog_str[:+width-2] + ' …'
    show_stack(stack, end='')
    print(f" \033[36m <=> \033[0m {prog_str:<{width}}")
