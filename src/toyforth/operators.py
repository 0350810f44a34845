## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Value
from .errors import ToyZeroDivision
from .formatting import print_value


## ARITHMETIC
def op_add(b: int, a: int) -> int: return b + a
def op_sub(b: int, a: int) -> int: return b - a
def op_mul(b: int, a: int) -> int: return b * a
def op_div(b: int, a: int) -> int:
    if a == 0: raise ToyZeroDivision("`/` would divide by zero.", toy_token='/')
    # Truncate toward zero, like the integer division of most machines.
    q = abs(b) // abs(a)
    return q if (b < 0) == (a < 0) else -q
## COMPARISON
def op_lt(b: int, a: int) -> bool: return b < a
def op_gt(b: int, a: int) -> bool: return b > a
# STACK OPERATIONS
def op_dup(x: Value) -> tuple[Value, Value]: return (x, x)
def op_swap(b: Value, a: Value) -> tuple[Value, Value]: return (a, b)
def op_rot(c: Value, b: Value, a: Value) -> tuple[Value, Value, Value]: return (b, a, c)
def op_over(b: Value, a: Value) -> tuple[Value, Value, Value]: return (b, a, b)
def op_drop(_: Value) -> None: return None
# OUTPUT
def op_print(x: Value) -> None: print_value(x)
