"""Keys that combine a metric kind with a metric key."""

from __future__ import annotations

from dataclasses import dataclass

from .core import Key
from .kind import MetricKind


@dataclass(frozen=True, order=True)
class CompositeKey:
    """A metric key together with its kind."""

    kind: MetricKind
    key: Key

    def into_parts(self) -> tuple[MetricKind, Key]:
        """Return the kind and key as a pair."""
        return self.kind, self.key