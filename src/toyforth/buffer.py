## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Iterable


INITIAL_CAPACITY = 256


class GrowableBuffer:
    """Resizable sequence with an explicit count and a capacity that only grows by doubling.

    A `None` buffer is the valid empty sentinel; `reserve()` creates the real one on first use.
    Shrinking only ever lowers `count`, the slots themselves are kept.
    """
    __slots__ = ('slots', 'count', 'capacity')

    def __init__(self, capacity: int = INITIAL_CAPACITY):
        self.slots = self._allocate(capacity)
        self.count = 0
        self.capacity = capacity

    def _allocate(self, size: int):
        return [None] * size

    def _grow(self, capacity: int) -> None:
        self.slots.extend(self._allocate(capacity - self.capacity))
        self.capacity = capacity

    def set_count(self, count: int) -> None:
        assert 0 <= count <= self.capacity, f"count {count} outside of capacity {self.capacity}"
        for i in range(count, self.count):
            self.slots[i] = None
        self.count = count

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index: int) -> Any:
        if not 0 <= index < self.count:
            raise IndexError(f"buffer index {index} out of range for count {self.count}")
        return self.slots[index]

    def __setitem__(self, index: int, item: Any) -> None:
        if not 0 <= index < self.count:
            raise IndexError(f"buffer index {index} out of range for count {self.count}")
        self.slots[index] = item

    def __iter__(self):
        for i in range(self.count):
            yield self.slots[i]

    def __repr__(self):
        return f"<{type(self).__name__} count={self.count} capacity={self.capacity}>"


class ByteBuffer(GrowableBuffer):
    """Byte specialisation, used to accumulate whole files before decoding."""
    __slots__ = ()

    def _allocate(self, size: int):
        return bytearray(size)

    def set_count(self, count: int) -> None:
        assert 0 <= count <= self.capacity, f"count {count} outside of capacity {self.capacity}"
        self.count = count

    def to_bytes(self) -> bytes:
        return bytes(self.slots[:self.count])


def reserve(buffer: GrowableBuffer | None, additional: int, *, factory=GrowableBuffer) -> GrowableBuffer:
    """Return a buffer able to hold `additional` more items than it currently counts."""
    needed = additional if buffer is None else buffer.count + additional
    capacity = INITIAL_CAPACITY if buffer is None else buffer.capacity
    if buffer is not None and capacity >= needed:
        return buffer

    while capacity < needed:
        capacity *= 2
    if buffer is None:
        return factory(capacity)
    buffer._grow(capacity)
    return buffer


def append(buffer: GrowableBuffer | None, item: Any) -> GrowableBuffer:
    buffer = reserve(buffer, 1)
    buffer.slots[buffer.count] = item
    buffer.count += 1
    return buffer


def concat(buffer: GrowableBuffer | None, items: Iterable | bytes, *, factory=None) -> GrowableBuffer:
    if factory is None:
        factory = ByteBuffer if isinstance(items, (bytes, bytearray)) else GrowableBuffer
    items = items if isinstance(items, (bytes, bytearray, list, tuple)) else list(items)
    buffer = reserve(buffer, len(items), factory=factory)
    buffer.slots[buffer.count:buffer.count + len(items)] = items
    buffer.count += len(items)
    return buffer
