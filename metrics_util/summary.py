"""A quantile sketch with relative-error guarantees."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

# Rough size of a summary object apart from its bins, in bytes.
_BASE_SIZE = 160
_BIN_SIZE = 8


class MergeError(Exception):
    """Raised when merging summaries that were created with different parameters."""

    def __init__(self) -> None:
        super().__init__("merge error")


@dataclass(frozen=True)
class _Config:
    alpha: float
    max_bins: int
    min_value: float
    gamma: float = field(init=False, compare=False)
    gamma_ln: float = field(init=False, compare=False)

    def __post_init__(self) -> None:
        ratio = (2.0 * self.alpha) / (1.0 - self.alpha)
        object.__setattr__(self, "gamma", 1.0 + ratio)
        object.__setattr__(self, "gamma_ln", math.log1p(ratio))

    def key(self, value: float) -> int:
        return math.ceil(math.log(value) / self.gamma_ln)

    def value(self, key: int) -> float:
        return math.exp(key * self.gamma_ln) * (2.0 / (1.0 + self.gamma))


class _Store:
    """Counts per logarithmic bin; the lowest bins collapse once ``max_bins`` is reached."""

    def __init__(self, max_bins: int) -> None:
        self._max_bins = max(1, max_bins)
        self._bins: dict[int, int] = {}
        self._count = 0
        self._min_key: Optional[int] = None
        self._max_key: Optional[int] = None

    def count(self) -> int:
        return self._count

    def length(self) -> int:
        if self._min_key is None or self._max_key is None:
            return 0
        return self._max_key - self._min_key + 1

    def add(self, key: int, count: int = 1) -> None:
        if self._max_key is None or self._min_key is None:
            self._min_key = self._max_key = key
        else:
            self._max_key = max(self._max_key, key)
            self._min_key = min(self._min_key, key)

        floor = self._max_key - self._max_bins + 1
        if self._min_key < floor:
            collapsed = 0
            for low in [k for k in self._bins if k < floor]:
                collapsed += self._bins.pop(low)
            if collapsed:
                self._bins[floor] = self._bins.get(floor, 0) + collapsed
            self._min_key = floor
        key = max(key, floor)

        self._bins[key] = self._bins.get(key, 0) + count
        self._count += count

    def key_at_rank(self, rank: int) -> int:
        seen = 0
        for key in sorted(self._bins):
            seen += self._bins[key]
            if seen > rank:
                return key
        assert self._max_key is not None
        return self._max_key

    def merge(self, other: "_Store") -> None:
        for key in sorted(other._bins):
            self.add(key, other._bins[key])


class Summary:
    """Quantiles over an arbitrary distribution of floats, within a relative error.

    ``alpha`` is the desired relative error, ``max_buckets`` bounds the number of
    bins per sign, and values whose magnitude is at most ``min_value`` count as zero.
    """

    def __init__(self, alpha: float, max_buckets: int, min_value: float) -> None:
        self._config = _Config(float(alpha), int(max_buckets), abs(float(min_value)))
        self._positive = _Store(self._config.max_bins)
        self._negative = _Store(self._config.max_bins)
        self._zero_count = 0
        self._min = math.inf
        self._max = -math.inf
        self._sum = 0.0

    @classmethod
    def with_defaults(cls) -> "Summary":
        """A summary with alpha 0.0001, 32,768 buckets and a minimum value of 1e-9."""
        return cls(0.0001, 32_768, 1.0e-9)

    def add(self, value: float) -> None:
        """Add a sample; infinities are ignored and tiny magnitudes count as zero."""
        value = float(value)
        if math.isinf(value):
            return

        limit = self._config.min_value
        if value > limit:
            self._positive.add(self._config.key(value))
        elif value < -limit:
            self._negative.add(self._config.key(-value))
        else:
            self._zero_count += 1

        if self._min > value:
            self._min = value
        if self._max < value:
            self._max = value
        self._sum += value

    def quantile(self, q: float) -> Optional[float]:
        """Estimated value at quantile ``q``; ``None`` if empty or ``q`` is outside [0, 1]."""
        if not 0.0 <= q <= 1.0 or self.count() == 0:
            return None
        if q == 0.0:
            return self._min
        if q == 1.0:
            return self._max

        rank = int(q * (self.count() - 1))
        negatives = self._negative.count()
        if rank < negatives:
            key = self._negative.key_at_rank(negatives - rank - 1)
            return -self._config.value(key)
        if rank < negatives + self._zero_count:
            return 0.0
        key = self._positive.key_at_rank(rank - self._zero_count - negatives)
        return self._config.value(key)

    def merge(self, other: "Summary") -> None:
        """Merge ``other`` into this summary; raise ``MergeError`` if parameters differ."""
        if self._config != other._config:
            raise MergeError()
        self._positive.merge(other._positive)
        self._negative.merge(other._negative)
        self._zero_count += other._zero_count
        self._sum += other._sum
        if other._min < self._min:
            self._min = other._min
        if other._max > self._max:
            self._max = other._max

    def min(self) -> float:
        """Smallest value seen, or positive infinity if empty."""
        return self._min if self.count() else math.inf

    def max(self) -> float:
        """Largest value seen, or negative infinity if empty."""
        return self._max if self.count() else -math.inf

    def is_empty(self) -> bool:
        """Whether no samples have been added."""
        return self.count() == 0

    def count(self) -> int:
        """Number of samples."""
        return self._positive.count() + self._negative.count() + self._zero_count

    def estimated_size(self) -> int:
        """Approximate size of this summary in bytes."""
        bins = self._positive.length() + self._negative.length()
        return _BASE_SIZE + bins * _BIN_SIZE