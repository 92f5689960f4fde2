"""A sharded registry that maps keys to stored metrics."""

from __future__ import annotations

import os
import threading
from typing import Any, Callable, TypeVar

from .core import hashable
from .storage import AtomicStorage, Storage

V = TypeVar("V")


class _Shard:
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: dict[Any, Any] = {}


def _shard_count() -> int:
    cpus = max(1, os.cpu_count() or 1)
    return 1 << (cpus - 1).bit_length()


class _Table:
    """One metric kind's set of shards."""

    def __init__(self, shard_count: int) -> None:
        self._shards = [_Shard() for _ in range(shard_count)]
        self._mask = shard_count - 1

    def shard_for(self, key: Any) -> _Shard:
        return self._shards[hashable(key) & self._mask]

    def get_or_create(self, key: Any, create: Callable[[Any], Any]) -> Any:
        shard = self.shard_for(key)
        with shard.lock:
            value = shard.entries.get(key)
            if value is None:
                value = create(key)
                shard.entries[key] = value
            return value

    def delete(self, key: Any) -> bool:
        shard = self.shard_for(key)
        with shard.lock:
            return shard.entries.pop(key, None) is not None

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.entries.clear()

    def visit(self, collect: Callable[[Any, Any], Any]) -> None:
        for shard in self._shards:
            with shard.lock:
                items = list(shard.entries.items())
            for key, value in items:
                collect(key, value)

    def handles(self) -> dict[Any, Any]:
        result: dict[Any, Any] = {}
        self.visit(result.__setitem__)
        return result


class Registry:
    """A central map of metrics by key, with values created by a ``Storage``."""

    def __init__(self, storage: Storage) -> None:
        count = _shard_count()
        self._storage = storage
        self._counters = _Table(count)
        self._gauges = _Table(count)
        self._histograms = _Table(count)

    @classmethod
    def atomic(cls) -> "Registry":
        """A registry backed by ``AtomicStorage``."""
        return cls(AtomicStorage())

    def clear(self) -> None:
        """Remove all metrics, shard by shard."""
        self._counters.clear()
        self._gauges.clear()
        self._histograms.clear()

    def get_or_create_counter(self, key: Any, op: Callable[[Any], V]) -> V:
        """Call ``op`` with the counter for ``key``, creating it first if needed."""
        return op(self._counters.get_or_create(key, self._storage.counter))

    def get_or_create_gauge(self, key: Any, op: Callable[[Any], V]) -> V:
        """Call ``op`` with the gauge for ``key``, creating it first if needed."""
        return op(self._gauges.get_or_create(key, self._storage.gauge))

    def get_or_create_histogram(self, key: Any, op: Callable[[Any], V]) -> V:
        """Call ``op`` with the histogram for ``key``, creating it first if needed."""
        return op(self._histograms.get_or_create(key, self._storage.histogram))

    def delete_counter(self, key: Any) -> bool:
        """Remove a counter; return whether it existed."""
        return self._counters.delete(key)

    def delete_gauge(self, key: Any) -> bool:
        """Remove a gauge; return whether it existed."""
        return self._gauges.delete(key)

    def delete_histogram(self, key: Any) -> bool:
        """Remove a histogram; return whether it existed."""
        return self._histograms.delete(key)

    def visit_counters(self, collect: Callable[[Any, Any], Any]) -> None:
        """Call ``collect(key, counter)`` for every counter."""
        self._counters.visit(collect)

    def visit_gauges(self, collect: Callable[[Any, Any], Any]) -> None:
        """Call ``collect(key, gauge)`` for every gauge."""
        self._gauges.visit(collect)

    def visit_histograms(self, collect: Callable[[Any, Any], Any]) -> None:
        """Call ``collect(key, histogram)`` for every histogram."""
        self._histograms.visit(collect)

    def get_counter_handles(self) -> dict[Any, Any]:
        """A point-in-time map of all counters by key."""
        return self._counters.handles()

    def get_gauge_handles(self) -> dict[Any, Any]:
        """A point-in-time map of all gauges by key."""
        return self._gauges.handles()

    def get_histogram_handles(self) -> dict[Any, Any]:
        """A point-in-time map of all histograms by key."""
        return self._histograms.handles()