"""Core metric primitives: keys, labels, units, handles and recorders."""

from __future__ import annotations

import hashlib
import struct
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Union

_HASH_MASK = (1 << 64) - 1


@dataclass(frozen=True, order=True)
class Label:
    """A key/value pair attached to a metric key."""

    key: str
    value: str


class Unit(Enum):
    """Units a metric can be described with."""

    COUNT = "count"
    PERCENT = "percent"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"
    TEBIBYTES = "tebibytes"
    GIBIBYTES = "gibibytes"
    MEBIBYTES = "mebibytes"
    KIBIBYTES = "kibibytes"
    BYTES = "bytes"
    TERABITS_PER_SECOND = "terabits_per_second"
    GIGABITS_PER_SECOND = "gigabits_per_second"
    MEGABITS_PER_SECOND = "megabits_per_second"
    KILOBITS_PER_SECOND = "kilobits_per_second"
    BITS_PER_SECOND = "bits_per_second"
    COUNT_PER_SECOND = "count_per_second"


def _key_hash(name: str, labels: tuple[Label, ...]) -> int:
    digest = hashlib.blake2b(digest_size=8)
    parts = [name]
    for label in labels:
        parts.extend((label.key, label.value))
    for part in parts:
        data = part.encode("utf-8")
        digest.update(struct.pack("<Q", len(data)))
        digest.update(data)
    return int.from_bytes(digest.digest(), "little")


@dataclass(frozen=True, order=True)
class Key:
    """A metric name together with its labels; carries a precomputed stable hash."""

    name: str
    labels: tuple[Label, ...] = ()
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        labels = tuple(
            label if isinstance(label, Label) else Label(*label) for label in self.labels
        )
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "_hash", _key_hash(self.name, labels))

    @classmethod
    def from_name(cls, name: str) -> "Key":
        """Create a key with no labels."""
        return cls(name)

    def get_hash(self) -> int:
        """Return the precomputed 64-bit hash of this key."""
        return self._hash

    def hashable(self) -> int:
        """Return the 64-bit hash used for registry sharding."""
        return self._hash

    def __hash__(self) -> int:
        return self._hash


class Counter:
    """Handle to a counter; forwards operations to its backing object, if any."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Any = None) -> None:
        self._inner = inner

    @classmethod
    def noop(cls) -> "Counter":
        """A counter that discards every operation."""
        return cls()

    def increment(self, value: int) -> None:
        if self._inner is not None:
            self._inner.increment(value)

    def absolute(self, value: int) -> None:
        if self._inner is not None:
            self._inner.absolute(value)


class Gauge:
    """Handle to a gauge; forwards operations to its backing object, if any."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Any = None) -> None:
        self._inner = inner

    @classmethod
    def noop(cls) -> "Gauge":
        """A gauge that discards every operation."""
        return cls()

    def increment(self, value: float) -> None:
        if self._inner is not None:
            self._inner.increment(value)

    def decrement(self, value: float) -> None:
        if self._inner is not None:
            self._inner.decrement(value)

    def set(self, value: float) -> None:
        if self._inner is not None:
            self._inner.set(value)


class Histogram:
    """Handle to a histogram; forwards samples to its backing object, if any."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Any = None) -> None:
        self._inner = inner

    @classmethod
    def noop(cls) -> "Histogram":
        """A histogram that discards every sample."""
        return cls()

    def record(self, value: float) -> None:
        if self._inner is not None:
            self._inner.record(value)


class Recorder(ABC):
    """Receives metric descriptions and registrations."""

    @abstractmethod
    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describe a counter."""

    @abstractmethod
    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describe a gauge."""

    @abstractmethod
    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describe a histogram."""

    @abstractmethod
    def register_counter(self, key: Key) -> Counter:
        """Register a counter and return its handle."""

    @abstractmethod
    def register_gauge(self, key: Key) -> Gauge:
        """Register a gauge and return its handle."""

    @abstractmethod
    def register_histogram(self, key: Key) -> Histogram:
        """Register a histogram and return its handle."""


class NoopRecorder(Recorder):
    """A recorder that ignores everything."""

    def describe_counter(self, key_name, unit, description):
        return None

    def describe_gauge(self, key_name, unit, description):
        return None

    def describe_histogram(self, key_name, unit, description):
        return None

    def register_counter(self, key):
        return Counter.noop()

    def register_gauge(self, key):
        return Gauge.noop()

    def register_histogram(self, key):
        return Histogram.noop()


class SetRecorderError(RuntimeError):
    """Raised when a global recorder is already installed."""


class _GlobalSlot:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.recorder: Optional[Recorder] = None


_GLOBAL = _GlobalSlot()
_NOOP = NoopRecorder()


def set_recorder(recorder: Recorder) -> None:
    """Install the global recorder; fails if one is already installed."""
    with _GLOBAL.lock:
        if _GLOBAL.recorder is not None:
            raise SetRecorderError("a global recorder has already been installed")
        _GLOBAL.recorder = recorder


def clear_recorder() -> None:
    """Remove the global recorder, if any."""
    with _GLOBAL.lock:
        _GLOBAL.recorder = None


def recorder() -> Recorder:
    """Return the installed global recorder, or a no-op recorder."""
    with _GLOBAL.lock:
        installed = _GLOBAL.recorder
    return installed if installed is not None else _NOOP


@dataclass(frozen=True, order=True)
class DefaultHashable:
    """Wraps any hashable value to give it a 64-bit ``hashable()``."""

    value: Any

    def hashable(self) -> int:
        return hash(self.value) & _HASH_MASK


def hashable(obj: Union[Key, DefaultHashable, Any]) -> int:
    """Return the 64-bit hash of an object, using its own ``hashable`` when present."""
    method = getattr(obj, "hashable", None)
    if callable(method):
        return method()
    return hash(obj) & _HASH_MASK


def _labels(pairs: Iterable[tuple[str, str]]) -> tuple[Label, ...]:
    return tuple(Label(k, v) for k, v in pairs)