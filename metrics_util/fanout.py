"""A recorder that sends every metric to several recorders."""

from __future__ import annotations

from typing import Any

from .core import Counter, Gauge, Histogram, Recorder


class _FanoutCounter:
    def __init__(self, counters: list[Counter]) -> None:
        self._counters = counters

    def increment(self, value: int) -> None:
        for counter in self._counters:
            counter.increment(value)

    def absolute(self, value: int) -> None:
        for counter in self._counters:
            counter.absolute(value)


class _FanoutGauge:
    def __init__(self, gauges: list[Gauge]) -> None:
        self._gauges = gauges

    def increment(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.increment(value)

    def decrement(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.decrement(value)

    def set(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.set(value)


class _FanoutHistogram:
    def __init__(self, histograms: list[Histogram]) -> None:
        self._histograms = histograms

    def record(self, value: float) -> None:
        for histogram in self._histograms:
            histogram.record(value)


class Fanout(Recorder):
    """Forwards every description and registration to each of its recorders."""

    def __init__(self, recorders: list[Any]) -> None:
        self._recorders = recorders

    def describe_counter(self, key_name, unit, description):
        for rec in self._recorders:
            rec.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        for rec in self._recorders:
            rec.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        for rec in self._recorders:
            rec.describe_histogram(key_name, unit, description)

    def register_counter(self, key):
        return Counter(_FanoutCounter([rec.register_counter(key) for rec in self._recorders]))

    def register_gauge(self, key):
        return Gauge(_FanoutGauge([rec.register_gauge(key) for rec in self._recorders]))

    def register_histogram(self, key):
        return Histogram(
            _FanoutHistogram([rec.register_histogram(key) for rec in self._recorders])
        )


class FanoutBuilder:
    """Collects recorders and builds a ``Fanout`` over them."""

    def __init__(self) -> None:
        self._recorders: list[Any] = []

    def add_recorder(self, recorder: Any) -> "FanoutBuilder":
        """Add a recorder to the fanout list."""
        self._recorders.append(recorder)
        return self

    def build(self) -> Fanout:
        """Build the ``Fanout``."""
        return Fanout(list(self._recorders))