"""Double-ended queue on a power-of-two ring buffer that grows by doubling."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

__all__ = ["QueueFullError", "RingQueue"]

T = TypeVar("T")

_INITIAL_CAPACITY = 8


class QueueFullError(Exception):
    """Raised when the queue would have to grow beyond its maximum capacity."""


class RingQueue(Generic[T]):
    """A deque kept in a ring buffer of power-of-two capacity.

    One slot of the buffer is always left free, so a buffer of capacity ``n``
    holds at most ``n - 1`` elements before it doubles. Growth stops once the
    capacity exceeds half of ``max_capacity``; adding to a full queue then
    raises :class:`QueueFullError` and leaves the queue unchanged.
    """

    def __init__(self, max_capacity: int | None = None) -> None:
        if max_capacity is not None and max_capacity < 1:
            raise ValueError("max_capacity must be a positive integer or None")
        self._max_capacity = max_capacity
        self._elems: list[T | None] = [None] * _INITIAL_CAPACITY
        self._first = 0
        self._last = 0

    @property
    def _mask(self) -> int:
        return len(self._elems) - 1

    def _expand(self) -> None:
        cap = len(self._elems)
        if (self._last + 1) & (cap - 1) != self._first:
            return
        if self._max_capacity is not None and cap > self._max_capacity // 2:
            raise QueueFullError(f"queue cannot grow beyond capacity {cap}")
        ordered = self._elems[self._first:] + self._elems[: self._first]
        self._elems = ordered + [None] * cap
        self._first = 0
        self._last = cap - 1

    def __len__(self) -> int:
        return (self._last - self._first) & self._mask

    def __iter__(self) -> Iterator[T]:
        for k in range(len(self)):
            yield self._elems[(self._first + k) & self._mask]  # type: ignore[misc]

    def __getitem__(self, index: int) -> T:
        size = len(self)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("queue index out of range")
        return self._elems[(self._first + index) & self._mask]  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"

    def add_last(self, elem: T) -> None:
        """Append ``elem`` at the tail."""
        self._expand()
        self._elems[self._last] = elem
        self._last = (self._last + 1) & self._mask

    def add_first(self, elem: T) -> None:
        """Prepend ``elem`` at the head."""
        self._expand()
        self._first = (self._first - 1) & self._mask
        self._elems[self._first] = elem

    def del_last(self) -> T:
        """Remove and return the tail element."""
        if self.empty():
            raise IndexError("del_last from an empty queue")
        self._last = (self._last - 1) & self._mask
        elem = self._elems[self._last]
        self._elems[self._last] = None
        return elem  # type: ignore[return-value]

    def del_first(self) -> T:
        """Remove and return the head element."""
        if self.empty():
            raise IndexError("del_first from an empty queue")
        elem = self._elems[self._first]
        self._elems[self._first] = None
        self._first = (self._first + 1) & self._mask
        return elem  # type: ignore[return-value]

    def peek_first(self) -> T:
        """Return the head element without removing it."""
        if self.empty():
            raise IndexError("peek_first on an empty queue")
        return self._elems[self._first]  # type: ignore[return-value]

    def peek_last(self) -> T:
        """Return the tail element without removing it."""
        if self.empty():
            raise IndexError("peek_last on an empty queue")
        return self._elems[(self._last - 1) & self._mask]  # type: ignore[return-value]

    def clear(self) -> None:
        """Remove all elements, keeping the allocated capacity."""
        self._elems = [None] * len(self._elems)
        self._first = 0
        self._last = 0

    def empty(self) -> bool:
        """Return True if the queue holds no elements."""
        return self._first == self._last