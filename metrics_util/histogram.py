"""A histogram that counts samples into fixed, cumulative buckets."""

from __future__ import annotations

from itertools import accumulate
from typing import Iterable


class BucketedHistogram:
    """Counts samples into "less than or equal to" buckets with fixed bounds."""

    def __init__(self, bounds: Iterable[float]) -> None:
        bounds = [float(b) for b in bounds]
        if not bounds:
            raise ValueError("a bucketed histogram needs at least one bound")
        self._bounds = bounds
        self._buckets = [0] * len(bounds)
        self._sum = 0.0
        self._count = 0

    def sum(self) -> float:
        """Sum of all samples."""
        return self._sum

    def count(self) -> int:
        """Number of samples."""
        return self._count

    def buckets(self) -> list[tuple[float, int]]:
        """Pairs of (bound, count of samples at or below the bound)."""
        return list(zip(self._bounds, self._buckets))

    def record(self, sample: float) -> None:
        """Record a single sample."""
        self._sum += sample
        self._count += 1
        for idx, bound in enumerate(self._bounds):
            if sample <= bound:
                self._buckets[idx] += 1

    def record_many(self, samples: Iterable[float]) -> None:
        """Record many samples at once."""
        bucketed = [0] * len(self._buckets)
        total = 0.0
        count = 0
        for sample in samples:
            total += sample
            count += 1
            for idx, bound in enumerate(self._bounds):
                if sample <= bound:
                    bucketed[idx] += 1
                    break

        for idx, cumulative in enumerate(accumulate(bucketed)):
            self._buckets[idx] += cumulative
        self._sum += total
        self._count += count