"""Routing of metrics to different recorders by kind and name prefix."""

from __future__ import annotations

from typing import Any, Optional

from .core import Recorder
from .kind import MetricKind, MetricKindMask


class _Routes:
    """Maps name prefixes to target indexes; the longest matching prefix wins."""

    def __init__(self) -> None:
        self._routes: dict[str, int] = {}

    def insert(self, pattern: str, target: int) -> None:
        self._routes[pattern] = target

    def get_ancestor(self, key: str) -> Optional[int]:
        best = max(
            (pattern for pattern in self._routes if key.startswith(pattern)),
            key=len,
            default=None,
        )
        return None if best is None else self._routes[best]


class Router(Recorder):
    """Sends each metric to the recorder of its most specific route, or the default."""

    def __init__(
        self,
        default: Any,
        global_mask: MetricKindMask,
        targets: list[Any],
        routes: dict[MetricKind, _Routes],
    ) -> None:
        self._default = default
        self._global_mask = global_mask
        self._targets = targets
        self._routes = routes

    def _route(self, kind: MetricKind, name: str) -> Any:
        # The global mask records which kinds have any routes at all.
        if not self._global_mask.matches(kind):
            return self._default
        index = self._routes[kind].get_ancestor(name)
        return self._default if index is None else self._targets[index]

    def describe_counter(self, key_name, unit, description):
        self._route(MetricKind.COUNTER, key_name).describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name, unit, description):
        self._route(MetricKind.GAUGE, key_name).describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name, unit, description):
        self._route(MetricKind.HISTOGRAM, key_name).describe_histogram(
            key_name, unit, description
        )

    def register_counter(self, key):
        return self._route(MetricKind.COUNTER, key.name).register_counter(key)

    def register_gauge(self, key):
        return self._route(MetricKind.GAUGE, key.name).register_gauge(key)

    def register_histogram(self, key):
        return self._route(MetricKind.HISTOGRAM, key.name).register_histogram(key)


_MASK_KINDS = {
    MetricKindMask.ALL: (MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.HISTOGRAM),
    MetricKindMask.COUNTER: (MetricKind.COUNTER,),
    MetricKindMask.GAUGE: (MetricKind.GAUGE,),
    MetricKindMask.HISTOGRAM: (MetricKind.HISTOGRAM,),
}


class RouterBuilder:
    """Configures routes from name prefixes and kind masks to target recorders.

    A pattern such as ``"foo"`` matches ``"foo"`` and ``"foo.submetric"`` but not
    ``"something.foo"``. The default recorder handles anything without a route.
    """

    def __init__(self, recorder: Any) -> None:
        self._default = recorder
        self._global_mask = MetricKindMask.NONE
        self._targets: list[Any] = []
        self._routes = {kind: _Routes() for kind in MetricKind}

    @classmethod
    def from_recorder(cls, recorder: Any) -> "RouterBuilder":
        """Start a builder whose default route is ``recorder``."""
        return cls(recorder)

    def add_route(self, mask: MetricKindMask, pattern: str, recorder: Any) -> "RouterBuilder":
        """Route metrics of the kinds in ``mask`` whose names start with ``pattern``.

        ``mask`` must be a single kind or ``ALL``; an existing route for the same
        pattern and kind is replaced.
        """
        kinds = _MASK_KINDS.get(mask)
        if kinds is None:
            raise ValueError("cannot add route for unknown or empty metric kind mask")

        target = len(self._targets)
        self._targets.append(recorder)
        self._global_mask = self._global_mask | mask
        for kind in kinds:
            self._routes[kind].insert(str(pattern), target)
        return self

    def build(self) -> Router:
        """Build the configured router."""
        return Router(self._default, self._global_mask, list(self._targets), self._routes)