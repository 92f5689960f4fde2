"""Tracking of metric generations and removal of metrics that have gone idle."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .kind import MetricKind, MetricKindMask
from .registry import Registry
from .storage import AtomicStorage, Storage

T = TypeVar("T")
V = TypeVar("V")


@dataclass(frozen=True, order=True)
class Generation:
    """An opaque, monotonically increasing generation of a metric."""

    value: int


class _GenerationCounter:
    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def bump(self) -> None:
        with self._lock:
            self._value += 1

    def load(self) -> int:
        with self._lock:
            return self._value


class Generational(Generic[T]):
    """Wraps a metric value and counts every access that modifies it."""

    __slots__ = ("_inner", "_gen")

    def __init__(self, inner: T) -> None:
        self._inner = inner
        self._gen = _GenerationCounter()

    def get_inner(self) -> T:
        """The wrapped value."""
        return self._inner

    def get_generation(self) -> Generation:
        """The current generation."""
        return Generation(self._gen.load())

    def with_increment(self, f: Callable[[T], V]) -> V:
        """Call ``f`` with the wrapped value, then advance the generation."""
        result = f(self._inner)
        self._gen.bump()
        return result

    def increment(self, value: Any) -> None:
        """Increment the wrapped counter or gauge."""
        self.with_increment(lambda inner: inner.increment(value))

    def absolute(self, value: int) -> None:
        """Set the wrapped counter to an absolute value."""
        self.with_increment(lambda inner: inner.absolute(value))

    def decrement(self, value: float) -> None:
        """Decrement the wrapped gauge."""
        self.with_increment(lambda inner: inner.decrement(value))

    def set(self, value: float) -> None:
        """Set the wrapped gauge."""
        self.with_increment(lambda inner: inner.set(value))

    def record(self, value: float) -> None:
        """Record a sample into the wrapped histogram."""
        self.with_increment(lambda inner: inner.record(value))

    def __repr__(self) -> str:
        return f"Generational({self._inner!r}, generation={self._gen.load()})"


class GenerationalStorage(Storage):
    """Storage that wraps every metric of another storage in ``Generational``."""

    def __init__(self, storage: Storage) -> None:
        self._inner = storage

    @classmethod
    def atomic(cls) -> "GenerationalStorage":
        """Generational storage on top of ``AtomicStorage``."""
        return cls(AtomicStorage())

    def counter(self, key: Any) -> Generational:
        return Generational(self._inner.counter(key))

    def gauge(self, key: Any) -> Generational:
        return Generational(self._inner.gauge(key))

    def histogram(self, key: Any) -> Generational:
        return Generational(self._inner.histogram(key))


def _seconds(timeout: Union[None, float, timedelta]) -> Optional[float]:
    if timeout is None:
        return None
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


class Recency(Generic[T]):
    """Decides whether metrics are still fresh, deleting idle ones from a registry.

    ``clock`` is a callable returning the current time in seconds. With an
    ``idle_timeout`` of ``None`` nothing is ever considered idle; only metric
    kinds in ``mask`` are tracked.
    """

    def __init__(
        self,
        clock: Callable[[], float],
        mask: MetricKindMask,
        idle_timeout: Union[None, float, timedelta],
    ) -> None:
        self._clock = clock
        self._mask = mask
        self._idle_timeout = _seconds(idle_timeout)
        self._entries: dict[Any, tuple[Generation, float]] = {}
        self._lock = threading.Lock()

    def should_store_counter(self, key: Any, gen: Generation, registry: Registry) -> bool:
        """Whether the counter is still fresh; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, MetricKind.COUNTER, registry.delete_counter)

    def should_store_gauge(self, key: Any, gen: Generation, registry: Registry) -> bool:
        """Whether the gauge is still fresh; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, MetricKind.GAUGE, registry.delete_gauge)

    def should_store_histogram(self, key: Any, gen: Generation, registry: Registry) -> bool:
        """Whether the histogram is still fresh; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, MetricKind.HISTOGRAM, registry.delete_histogram)

    def _should_store(
        self,
        key: Any,
        gen: Generation,
        kind: MetricKind,
        delete: Callable[[Any], bool],
    ) -> bool:
        idle_timeout = self._idle_timeout
        if idle_timeout is None or not self._mask.matches(kind):
            return True

        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None:
                self._entries[key] = (gen, now)
                return True

            last_gen, last_update = entry
            if last_gen != gen:
                self._entries[key] = (gen, now)
                return True

            # A failed delete means the metric changed since this generation was read.
            if (now - last_update) > idle_timeout and delete(key):
                del self._entries[key]
                return False

        return True