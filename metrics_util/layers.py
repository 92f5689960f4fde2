"""Composable layers that wrap a recorder, and a stack to chain them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .core import Recorder, set_recorder


class Layer(ABC):
    """Wraps an inner object in another one."""

    @abstractmethod
    def layer(self, inner: Any) -> Any:
        """Return ``inner`` wrapped by this layer."""


class Stack(Recorder):
    """Composes layers around an inner recorder, innermost first."""

    def __init__(self, inner: Any) -> None:
        self._inner = inner

    def push(self, layer: Layer) -> "Stack":
        """Wrap the current stack contents with ``layer``."""
        return Stack(layer.layer(self._inner))

    def install(self) -> None:
        """Install this stack as the global recorder."""
        set_recorder(self)

    def describe_counter(self, key_name, unit, description):
        self._inner.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._inner.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._inner.describe_histogram(key_name, unit, description)

    def register_counter(self, key):
        return self._inner.register_counter(key)

    def register_gauge(self, key):
        return self._inner.register_gauge(key)

    def register_histogram(self, key):
        return self._inner.register_histogram(key)