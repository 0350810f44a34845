## toyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from toyforth import buffer
from toyforth.loader import read_entire_file


def test_reserve_from_none_creates_initial_capacity():
    buf = buffer.reserve(None, 1)
    assert buf.count == 0
    assert buf.capacity == buffer.INITIAL_CAPACITY


def test_reserve_doubles_until_request_fits():
    buf = buffer.reserve(None, buffer.INITIAL_CAPACITY * 3)
    assert buf.capacity == buffer.INITIAL_CAPACITY * 4


def test_reserve_returns_same_buffer_when_capacity_suffices():
    buf = buffer.append(None, 'a')
    assert buffer.reserve(buf, 10) is buf
    assert buf.capacity == buffer.INITIAL_CAPACITY


def test_append_grows_and_preserves_order():
    buf = None
    for i in range(buffer.INITIAL_CAPACITY + 1):
        buf = buffer.append(buf, i)
    assert buf.count == buffer.INITIAL_CAPACITY + 1
    assert buf.capacity == buffer.INITIAL_CAPACITY * 2
    assert list(buf) == list(range(buffer.INITIAL_CAPACITY + 1))


def test_set_count_pops_without_shrinking():
    buf = buffer.concat(None, [1, 2, 3])
    buf.set_count(1)
    assert list(buf) == [1]
    assert buf.capacity == buffer.INITIAL_CAPACITY
    with pytest.raises(IndexError):
        buf[1]


def test_set_count_beyond_capacity_is_rejected():
    buf = buffer.append(None, 1)
    with pytest.raises(AssertionError):
        buf.set_count(buf.capacity + 1)


def test_byte_buffer_concat():
    buf = buffer.concat(None, b"hello ")
    buf = buffer.concat(buf, b"world")
    assert isinstance(buf, buffer.ByteBuffer)
    assert buf.to_bytes() == b"hello world"


def test_read_entire_file_across_chunks(tmp_path):
    path = tmp_path / "prog.tf"
    text = "1 2 + print\n" * 200
    path.write_text(text, encoding="utf-8")
    assert read_entire_file(str(path), chunk_size=64) == text


def test_read_entire_file_empty(tmp_path):
    path = tmp_path / "empty.tf"
    path.write_text("")
    assert read_entire_file(str(path)) == ""
