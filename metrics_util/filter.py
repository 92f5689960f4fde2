"""A layer that discards metrics whose names contain certain patterns."""

from __future__ import annotations

import string
from typing import Any, Iterable

from .core import Counter, Gauge, Histogram, Recorder
from .layers import Layer

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _ascii_fold(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class Filter(Recorder):
    """Forwards to ``inner`` unless the metric name contains one of the patterns."""

    def __init__(self, inner: Any, patterns: Iterable[str], case_insensitive: bool = False) -> None:
        self._inner = inner
        self._case_insensitive = case_insensitive
        fold = _ascii_fold if case_insensitive else str
        self._patterns = tuple(fold(p) for p in patterns)

    def should_filter(self, key: str) -> bool:
        """Whether ``key`` contains any of the patterns."""
        haystack = _ascii_fold(key) if self._case_insensitive else key
        return any(pattern in haystack for pattern in self._patterns)

    def describe_counter(self, key_name, unit, description):
        if not self.should_filter(key_name):
            self._inner.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        if not self.should_filter(key_name):
            self._inner.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        if not self.should_filter(key_name):
            self._inner.describe_histogram(key_name, unit, description)

    def register_counter(self, key):
        if self.should_filter(key.name):
            return Counter.noop()
        return self._inner.register_counter(key)

    def register_gauge(self, key):
        if self.should_filter(key.name):
            return Gauge.noop()
        return self._inner.register_gauge(key)

    def register_histogram(self, key):
        if self.should_filter(key.name):
            return Histogram.noop()
        return self._inner.register_histogram(key)


class FilterLayer(Layer):
    """Builds ``Filter`` recorders; patterns match anywhere in a metric name."""

    def __init__(self) -> None:
        self._patterns: list[str] = []
        self._case_insensitive = False
        self._use_dfa = False

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "FilterLayer":
        """A layer with the given patterns, case sensitive."""
        layer = cls()
        layer._patterns = [str(p) for p in patterns]
        layer._use_dfa = True
        return layer

    def add_pattern(self, pattern: str) -> "FilterLayer":
        """Add a pattern to match."""
        self._patterns.append(str(pattern))
        return self

    def case_insensitive(self, case_insensitive: bool) -> "FilterLayer":
        """Set whether ASCII letters match regardless of case."""
        self._case_insensitive = bool(case_insensitive)
        return self

    def use_dfa(self, dfa: bool) -> "FilterLayer":
        """Set the automaton preference; matching results are the same either way."""
        self._use_dfa = bool(dfa)
        return self

    def layer(self, inner: Any) -> Filter:
        return Filter(inner, list(self._patterns), self._case_insensitive)