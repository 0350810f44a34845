## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators as O
from . import combinators as C
from .library import OperatorTable


def load_builtins_table() -> OperatorTable:
    functions = {
        '+': O.op_add, '-': O.op_sub, '*': O.op_mul, '/': O.op_div,
        '<': O.op_lt, '>': O.op_gt,
        'dup': O.op_dup, 'swap': O.op_swap, 'rot': O.op_rot, 'over': O.op_over, 'drop': O.op_drop,
        'print': O.op_print,
    }
    combinators = {
        'if': C.comb_if,
    }

    table = OperatorTable(functions={}, combinators=combinators)
    for name, fn in functions.items():
        table.add_function(name, fn)

    table.ensure_consistent()
    return table
