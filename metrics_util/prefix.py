"""A layer that prefixes every metric name."""

from __future__ import annotations

from typing import Any

from .core import Key, Recorder
from .layers import Layer


class Prefix(Recorder):
    """Forwards to ``inner`` with every key renamed to ``<prefix>.<name>``."""

    def __init__(self, prefix: str, inner: Any) -> None:
        self._prefix = prefix
        self._inner = inner

    def prefix_key(self, key: Key) -> Key:
        """Return ``key`` with a prefixed name and the same labels."""
        return Key(f"{self._prefix}.{key.name}", key.labels)

    def prefix_key_name(self, key_name: str) -> str:
        """Return the prefixed form of ``key_name``."""
        return f"{self._prefix}.{key_name}"

    def describe_counter(self, key_name, unit, description):
        self._inner.describe_counter(self.prefix_key_name(key_name), unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._inner.describe_gauge(self.prefix_key_name(key_name), unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._inner.describe_histogram(self.prefix_key_name(key_name), unit, description)

    def register_counter(self, key):
        return self._inner.register_counter(self.prefix_key(key))

    def register_gauge(self, key):
        return self._inner.register_gauge(self.prefix_key(key))

    def register_histogram(self, key):
        return self._inner.register_histogram(self.prefix_key(key))


class PrefixLayer(Layer):
    """Wraps a recorder in a ``Prefix`` using the given prefix."""

    def __init__(self, prefix: str) -> None:
        self._prefix = str(prefix)

    def layer(self, inner: Any) -> Prefix:
        return Prefix(self._prefix, inner)