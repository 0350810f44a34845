## toyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

import toyforth.api as J
from toyforth.runtime import Runtime
from toyforth.errors import ToyTypeMissing


def test_run_string_add():
    stack = J.run("2 3 +")
    assert J.from_stack(stack) == [5]


def test_register_operation_and_run():
    rt = Runtime()
    def inc(x: int) -> int: return x + 1
    rt.register_operation('inc', inc)
    stack = rt.run("4 inc inc")
    assert rt.from_stack(stack) == [6]


def test_registered_names_take_part_in_prefix_matching():
    rt = Runtime()
    def neg(x: int) -> int: return -x
    rt.register_operation('neg', neg)
    assert rt.from_stack(rt.run("3 neg")) == [-3]
    assert 'neg' in rt.table.names


def test_register_operation_without_annotations():
    def double(x): return x * 2
    with pytest.raises(ToyTypeMissing):
        Runtime().register_operation('double', double)


def test_register_combinator_reenters_evaluation():
    from toyforth.interpreter import evaluate_list

    def comb_i(this, ctx):
        quotation = ctx.stack.pop()
        evaluate_list(ctx, quotation)
        quotation.deref()

    rt = Runtime()
    rt.register_combinator('i', comb_i)
    assert rt.from_stack(rt.run("[1 2 +] i")) == [3]


def test_introspection_helpers():
    sig = J.get_signature('+')
    assert sig['arity'] == 2 and sig['valency'] == 1
    assert J.get_signature('rot')['valency'] == 3
    ops = J.list_operations()
    assert set(ops) == {'+', '-', '*', '/', '<', '>', 'if', 'dup', 'swap', 'rot', 'over', 'drop', 'print'}


def test_stack_conversion_helpers():
    s = J.to_stack([1, [True, "x"]])
    assert J.from_stack(s) == [1, [True, "x"]]
    stack = J.run("swap", stack=J.to_stack([1, 2]))
    assert J.from_stack(stack) == [2, 1]


def test_registered_operation_returning_new_list_is_released():
    from toyforth.formatting import from_python

    rt = Runtime()
    def box(x: int) -> list: return from_python([x])
    rt.register_operation('box', box)
    stack = rt.run("3 box")
    boxed = stack.peek()
    assert boxed.refcount == 1 and rt.from_stack(stack) == [[3]]
    stack.deref()
    assert boxed.refcount == 0


def test_registered_operation_passing_operand_through_keeps_it():
    rt = Runtime()
    def same(x: list) -> list: return x
    rt.register_operation('same', same)
    stack = rt.run("[1 2] same")
    assert stack.peek().refcount == 1 and rt.from_stack(stack) == [[1, 2]]
