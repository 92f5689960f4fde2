"""Metric storage: how counters, gauges and histograms are created and held."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any

from .bucket import AtomicBucket

_U64_MASK = (1 << 64) - 1


class AtomicCounter:
    """A thread-safe unsigned 64-bit counter that wraps on overflow."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: int = 0) -> None:
        self._value = value & _U64_MASK
        self._lock = threading.Lock()

    def increment(self, value: int) -> None:
        """Add ``value`` to the counter, wrapping at 2**64."""
        with self._lock:
            self._value = (self._value + value) & _U64_MASK

    def absolute(self, value: int) -> None:
        """Raise the counter to ``value`` if it is currently lower."""
        with self._lock:
            self._value = max(self._value, value & _U64_MASK)

    def load(self) -> int:
        """The current value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.load()})"


class AtomicGauge:
    """A thread-safe floating-point gauge."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: float = 0.0) -> None:
        self._value = float(value)
        self._lock = threading.Lock()

    def increment(self, value: float) -> None:
        """Add ``value`` to the gauge."""
        with self._lock:
            self._value += value

    def decrement(self, value: float) -> None:
        """Subtract ``value`` from the gauge."""
        with self._lock:
            self._value -= value

    def set(self, value: float) -> None:
        """Replace the gauge value."""
        with self._lock:
            self._value = float(value)

    def load(self) -> float:
        """The current value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicGauge({self.load()})"


class Storage(ABC):
    """Creates the objects that hold metric values."""

    @abstractmethod
    def counter(self, key: Any) -> Any:
        """Create an empty counter for ``key``."""

    @abstractmethod
    def gauge(self, key: Any) -> Any:
        """Create an empty gauge for ``key``."""

    @abstractmethod
    def histogram(self, key: Any) -> Any:
        """Create an empty histogram for ``key``."""


class AtomicStorage(Storage):
    """Storage backed by thread-safe atomics and an ``AtomicBucket`` for histograms."""

    def counter(self, key: Any) -> AtomicCounter:
        return AtomicCounter()

    def gauge(self, key: Any) -> AtomicGauge:
        return AtomicGauge()

    def histogram(self, key: Any) -> AtomicBucket:
        return AtomicBucket()