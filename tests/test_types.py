## toyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from toyforth.types import Operation, Value, create_integer, create_boolean, create_string, create_symbol, create_list
from toyforth.errors import ToyAssertionError, ToyStackError
from toyforth.formatting import format_value, to_python, from_python


def test_constructors_start_with_one_reference():
    for value in (create_integer(3), create_boolean(True), create_string("hi"), create_symbol("dup"), create_list()):
        assert value.refcount == 1
    assert create_symbol("dup").tag == Value.SYMBOL
    assert create_boolean(False).data == 0


def test_append_takes_a_reference():
    lst, x = create_list(), create_integer(1)
    lst.append(x)
    assert x.refcount == 2
    x.deref()
    assert lst.count() == 1 and x.refcount == 1


def test_get_hands_out_an_extra_reference():
    lst, x = create_list(), create_integer(1)
    lst.append(x); x.deref()
    got = lst.get(0)
    assert got is x and x.refcount == 2
    got.deref()
    assert x.refcount == 1


def test_pop_transfers_ownership():
    lst, x = create_list(), create_integer(7)
    lst.append(x); x.deref()
    popped = lst.pop()
    assert popped is x and x.refcount == 1
    assert lst.count() == 0
    popped.deref()
    assert x.refcount == 0


def test_pop_empty_list_is_an_error():
    with pytest.raises(ToyStackError):
        create_list().pop()
    with pytest.raises(ToyStackError):
        create_list().get(0)


def test_get_out_of_range_is_an_error():
    lst, x = create_list(), create_integer(1)
    lst.append(x); x.deref()
    for index in (1, -1, 5):
        with pytest.raises(ToyStackError):
            lst.get(index)
    assert x.refcount == 1


def test_list_operations_on_scalars_are_rejected():
    with pytest.raises(ToyAssertionError):
        create_integer(1).append(create_integer(2))


def test_deref_list_releases_elements_recursively():
    outer, inner, x = create_list(), create_list(), create_integer(5)
    inner.append(x); x.deref()
    outer.append(inner); inner.deref()
    outer.deref()
    assert outer.refcount == inner.refcount == x.refcount == 0


def test_shared_element_survives_one_owner():
    a, b, x = create_list(), create_list(), create_integer(5)
    a.append(x); b.append(x); x.deref()
    a.deref()
    assert x.refcount == 1
    assert b.get(0).data == 5


def test_deref_freed_value_is_fatal():
    x = create_integer(1)
    x.deref()
    with pytest.raises(ToyAssertionError):
        x.deref()
    with pytest.raises(ToyAssertionError):
        x.incref()


def test_format_value_scalars():
    assert format_value(create_integer(42)) == "42\n"
    assert format_value(create_boolean(True)) == "1\n"
    assert format_value(create_symbol("foo")) == "foo\n"
    assert format_value(create_string("hi there"), indent=2) == "  hi there\n"


def test_format_value_nested_list():
    value = from_python([1, [2, 3], 4])
    assert format_value(value) == "[\n  1\n  [\n    2\n    3\n  ]\n  4\n]\n"


def test_format_value_invalid_tag():
    value = create_integer(1)
    value.tag = 99
    with pytest.raises(ToyAssertionError):
        format_value(value)


def test_python_conversion():
    value = from_python([1, True, "x", []])
    assert to_python(value) == [1, True, "x", []]


def test_operations_do_not_share_default_meta():
    a, b = Operation(Operation.FUNCTION, None, 'a'), Operation(Operation.FUNCTION, None, 'b')
    a.meta['line'] = 3
    assert b.meta == {}
