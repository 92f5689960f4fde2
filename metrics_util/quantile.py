"""Quantiles with human-friendly labels."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable


def _format_float(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


class Quantile:
    """A quantile value clamped to [0, 1] with a label such as ``p99``, ``min`` or ``max``."""

    __slots__ = ("_value", "_label")

    def __init__(self, quantile: float) -> None:
        quantile = float(quantile)
        clamped = 0.0 if math.isnan(quantile) else min(max(quantile, 0.0), 1.0)
        if clamped == 0.0:
            clamped = 0.0
            label = "min"
        elif clamped == 1.0:
            label = "max"
        else:
            label = ("p" + _format_float(clamped * 100.0)).replace(".", "")
        self._value = clamped
        self._label = label

    @property
    def label(self) -> str:
        """The display label."""
        return self._label

    @property
    def value(self) -> float:
        """The raw quantile value."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantile):
            return NotImplemented
        return self._value == other._value and self._label == other._label

    def __hash__(self) -> int:
        return hash((self._value, self._label))

    def __repr__(self) -> str:
        return f"Quantile({self._value!r}, {self._label!r})"


def parse_quantiles(quantiles: Iterable[float]) -> list[Quantile]:
    """Turn a sequence of floats into quantiles."""
    return [Quantile(q) for q in quantiles]