"""A recorder that keeps metrics in memory so they can be inspected.

Meant mostly for testing and debugging exporters and layers, though it can also
serve for simple in-process collection of metrics.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from .core import Counter, Gauge, Histogram, Key, Recorder, Unit, set_recorder
from .key import CompositeKey
from .kind import MetricKind
from .registry import Registry

_PER_THREAD = threading.local()


@dataclass(frozen=True)
class DebugValue:
    """A point-in-time raw value of a metric."""

    kind: MetricKind
    value: Union[int, float, tuple[float, ...]]

    @classmethod
    def counter(cls, value: int) -> "DebugValue":
        """A counter value."""
        return cls(MetricKind.COUNTER, int(value))

    @classmethod
    def gauge(cls, value: float) -> "DebugValue":
        """A gauge value."""
        return cls(MetricKind.GAUGE, float(value))

    @classmethod
    def histogram(cls, values: Iterable[float]) -> "DebugValue":
        """The samples of a histogram."""
        return cls(MetricKind.HISTOGRAM, tuple(float(v) for v in values))


SnapshotEntry = tuple[CompositeKey, Optional[Unit], Optional[str], DebugValue]


class Snapshot:
    """A point-in-time view of every metric held by a ``DebuggingRecorder``."""

    def __init__(self, entries: list[SnapshotEntry]) -> None:
        self._entries = entries

    def into_hashmap(
        self,
    ) -> dict[CompositeKey, tuple[Optional[Unit], Optional[str], DebugValue]]:
        """The metric data keyed by composite key."""
        return {ck: (unit, desc, value) for ck, unit, desc, value in self._entries}

    def into_vec(self) -> list[SnapshotEntry]:
        """The metric data as (key, unit, description, value) tuples, in first-seen order."""
        return list(self._entries)

    def __iter__(self) -> Iterator[SnapshotEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class _Inner:
    """A registry plus the order metrics were seen in and their descriptions."""

    def __init__(self) -> None:
        self.registry = Registry.atomic()
        self._lock = threading.Lock()
        self._seen: dict[CompositeKey, None] = {}
        self._metadata: dict[tuple[MetricKind, str], tuple[Optional[Unit], str]] = {}

    def describe(
        self, kind: MetricKind, name: str, unit: Optional[Unit], description: str
    ) -> None:
        with self._lock:
            current_unit, _ = self._metadata.get((kind, name), (None, description))
            if unit is not None:
                current_unit = unit
            self._metadata[(kind, name)] = (current_unit, description)

    def track(self, ckey: CompositeKey) -> None:
        with self._lock:
            self._seen.setdefault(ckey, None)

    def snapshot(self) -> Snapshot:
        counters = self.registry.get_counter_handles()
        gauges = self.registry.get_gauge_handles()
        histograms = self.registry.get_histogram_handles()

        with self._lock:
            seen = list(self._seen)
            metadata = dict(self._metadata)

        entries: list[SnapshotEntry] = []
        for ck in seen:
            value = self._value_of(ck, counters, gauges, histograms)
            # A metric that was only described, never registered, has no value.
            if value is None:
                continue
            meta = metadata.get((ck.kind, ck.key.name))
            unit, desc = (meta[0], meta[1]) if meta is not None else (None, None)
            entries.append((ck, unit, desc, value))
        return Snapshot(entries)

    @staticmethod
    def _value_of(ck, counters, gauges, histograms) -> Optional[DebugValue]:
        if ck.kind is MetricKind.COUNTER:
            handle = counters.get(ck.key)
            return None if handle is None else DebugValue.counter(handle.load())
        if ck.kind is MetricKind.GAUGE:
            handle = gauges.get(ck.key)
            return None if handle is None else DebugValue.gauge(handle.load())
        handle = histograms.get(ck.key)
        if handle is None:
            return None
        values: list[float] = []
        handle.clear_with(values.extend)
        return DebugValue.histogram(values)


def _thread_inner(create: bool) -> Optional[_Inner]:
    inner = getattr(_PER_THREAD, "inner", None)
    if inner is None and create:
        inner = _Inner()
        _PER_THREAD.inner = inner
    return inner


class Snapshotter:
    """Takes snapshots of a ``DebuggingRecorder``."""

    def __init__(self, inner: _Inner) -> None:
        self._inner = inner

    def snapshot(self) -> Snapshot:
        """Snapshot the recorder; histograms are drained by this."""
        return self._inner.snapshot()

    @classmethod
    def current_thread_snapshot(cls) -> Optional[Snapshot]:
        """Snapshot the per-thread registry of the calling thread, or ``None`` if it has none."""
        inner = _thread_inner(create=False)
        return None if inner is None else inner.snapshot()


class DebuggingRecorder(Recorder):
    """A simple recorder whose metrics can be snapshotted at any time."""

    def __init__(self) -> None:
        self._inner = _Inner()
        self._is_per_thread = False

    @classmethod
    def per_thread(cls) -> "DebuggingRecorder":
        """A recorder that keeps a separate registry for every thread that emits metrics."""
        recorder = cls()
        recorder._is_per_thread = True
        return recorder

    def snapshotter(self) -> Snapshotter:
        """A snapshotter attached to this recorder's shared registry."""
        return Snapshotter(self._inner)

    def install(self) -> None:
        """Install this recorder as the global recorder."""
        set_recorder(self)

    def _target(self) -> _Inner:
        if self._is_per_thread:
            inner = _thread_inner(create=True)
            assert inner is not None
            return inner
        return self._inner

    def describe_counter(self, key_name, unit, description):
        self._target().describe(MetricKind.COUNTER, str(key_name), unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._target().describe(MetricKind.GAUGE, str(key_name), unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._target().describe(MetricKind.HISTOGRAM, str(key_name), unit, description)

    def register_counter(self, key: Key) -> Counter:
        inner = self._target()
        inner.track(CompositeKey(MetricKind.COUNTER, key))
        return inner.registry.get_or_create_counter(key, Counter)

    def register_gauge(self, key: Key) -> Gauge:
        inner = self._target()
        inner.track(CompositeKey(MetricKind.GAUGE, key))
        return inner.registry.get_or_create_gauge(key, Gauge)

    def register_histogram(self, key: Key) -> Histogram:
        inner = self._target()
        inner.track(CompositeKey(MetricKind.HISTOGRAM, key))
        return inner.registry.get_or_create_histogram(key, Histogram)