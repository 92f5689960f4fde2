"""A thread-safe, append-only bucket of values that can be snapshotted and cleared."""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, Iterator, Optional, Sequence, TypeVar

T = TypeVar("T")

BLOCK_SIZE = 64


class BlockFullError(Exception):
    """Raised when pushing into a block that has no free slots; carries the rejected value."""

    def __init__(self, value: Any) -> None:
        super().__init__("block is full")
        self.value = value


def _trailing_ones(bits: int) -> int:
    return ((~bits) & (bits + 1)).bit_length() - 1


class Block(Generic[T]):
    """A fixed-size chunk of values with a write index and a bitmap of completed writes."""

    __slots__ = ("_write", "_read", "_slots", "_lock", "next")

    def __init__(self) -> None:
        self._write = 0
        self._read = 0
        self._slots: list[Optional[T]] = [None] * BLOCK_SIZE
        self._lock = threading.Lock()
        # The block written before this one, if any.
        self.next: Optional[Block[T]] = None

    def len(self) -> int:
        """Number of leading slots that have been fully written."""
        return _trailing_ones(self._read)

    def _next_len(self) -> int:
        nxt = self.next
        return 0 if nxt is None else nxt.len()

    def is_quiesced(self) -> bool:
        """Whether no writes are in flight."""
        length = self.len()
        if length == BLOCK_SIZE:
            return True
        return min(self._write, BLOCK_SIZE) == length

    def data(self) -> list[T]:
        """The values written to this block, in write order."""
        return list(self._slots[: self.len()])  # type: ignore[arg-type]

    def push(self, value: T) -> None:
        """Write a value into the next free slot; raise ``BlockFullError`` if none is left."""
        with self._lock:
            index = self._write
            self._write += 1
            if index >= BLOCK_SIZE:
                raise BlockFullError(value)
            self._slots[index] = value
            self._read |= 1 << index

    def __repr__(self) -> str:
        return (
            f"Block(block_size={BLOCK_SIZE}, write={self._write}, read={self._read}, "
            f"len={self.len()}, has_next={self.next is not None})"
        )


class AtomicBucket(Generic[T]):
    """An unbounded bucket of values built from a chain of blocks.

    Iteration visits blocks newest first, while the values inside each block keep
    the order in which they were written.
    """

    def __init__(self) -> None:
        self._tail: Optional[Block[T]] = None
        self._lock = threading.Lock()

    def is_empty(self) -> bool:
        """Whether the bucket holds no values."""
        tail = self._tail
        if tail is None:
            return True
        return tail.len() == 0 and tail._next_len() == 0

    def push(self, value: T) -> None:
        """Append a value to the bucket."""
        with self._lock:
            tail = self._tail
            if tail is None:
                tail = Block()
                self._tail = tail
            try:
                tail.push(value)
            except BlockFullError:
                fresh: Block[T] = Block()
                fresh.next = tail
                self._tail = fresh
                fresh.push(value)

    def record(self, value: T) -> None:
        """Record a histogram sample; the same as ``push``."""
        self.push(value)

    def _blocks(self, start: Optional[Block[T]]) -> Iterator[Block[T]]:
        block = start
        while block is not None:
            while not block.is_quiesced():
                pass
            yield block
            block = block.next

    def data(self) -> list[T]:
        """All values in the bucket: newest block first, each block in write order."""
        values: list[T] = []
        self.data_with(values.extend)
        return values

    def data_with(self, f: Callable[[Sequence[T]], Any]) -> None:
        """Call ``f`` with the values of each block, newest block first."""
        with self._lock:
            tail = self._tail
        for block in self._blocks(tail):
            f(block.data())

    def clear(self) -> None:
        """Remove every value from the bucket."""
        self.clear_with(lambda _values: None)

    def clear_with(self, f: Callable[[Sequence[T]], Any]) -> None:
        """Remove every value, calling ``f`` with the values of each removed block."""
        with self._lock:
            tail = self._tail
            self._tail = None
        for block in self._blocks(tail):
            f(block.data())

    def __repr__(self) -> str:
        return f"AtomicBucket(tail={self._tail!r})"