"""Metric kinds and masks over them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class MetricKind(Enum):
    """The kind of a metric."""

    COUNTER = 0
    GAUGE = 1
    HISTOGRAM = 2

    def __lt__(self, other):
        if not isinstance(other, MetricKind):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other):
        if not isinstance(other, MetricKind):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other):
        if not isinstance(other, MetricKind):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other):
        if not isinstance(other, MetricKind):
            return NotImplemented
        return self.value >= other.value


_KIND_BITS = {
    MetricKind.COUNTER: 1,
    MetricKind.GAUGE: 2,
    MetricKind.HISTOGRAM: 4,
}


@dataclass(frozen=True, order=True)
class MetricKindMask:
    """A bitmask of metric kinds; combine masks with ``|``."""

    value: int

    NONE: ClassVar[MetricKindMask]
    COUNTER: ClassVar[MetricKindMask]
    GAUGE: ClassVar[MetricKindMask]
    HISTOGRAM: ClassVar[MetricKindMask]
    ALL: ClassVar[MetricKindMask]

    def matches(self, kind: MetricKind) -> bool:
        """Whether this mask contains the given kind."""
        return self.value & _KIND_BITS[kind] != 0

    def __or__(self, other: MetricKindMask) -> MetricKindMask:
        if not isinstance(other, MetricKindMask):
            return NotImplemented
        return MetricKindMask(self.value | other.value)


MetricKindMask.NONE = MetricKindMask(0)
MetricKindMask.COUNTER = MetricKindMask(1)
MetricKindMask.GAUGE = MetricKindMask(2)
MetricKindMask.HISTOGRAM = MetricKindMask(4)
MetricKindMask.ALL = MetricKindMask(7)