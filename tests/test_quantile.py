import pytest

from metrics_util.quantile import Quantile, parse_quantiles


@pytest.mark.parametrize(
    "raw,value,label",
    [
        (0.0, 0.0, "min"),
        (1.0, 1.0, "max"),
        (0.99, 0.99, "p99"),
        (0.999, 0.999, "p999"),
        (0.9999, 0.9999, "p9999"),
        (-1.0, 0.0, "min"),
        (1.2, 1.0, "max"),
    ],
)
def test_quantiles(raw, value, label):
    q = Quantile(raw)
    assert q.value == value
    assert q.label == label


def test_half_label():
    assert Quantile(0.5).label == "p50"


def test_nan_clamps_to_min():
    q = Quantile(float("nan"))
    assert q.value == 0.0
    assert q.label == "min"


def test_parse_quantiles_empty():
    assert parse_quantiles([]) == []


def test_parse_quantiles():
    normal = [0.0, 0.5, 0.99, 0.999, 1.0]
    result = parse_quantiles(normal)
    assert len(result) == 5
    assert result == [Quantile(q) for q in normal]


def test_equality_and_hash():
    assert Quantile(0.99) == Quantile(0.99)
    assert Quantile(0.99) != Quantile(0.999)
    assert len({Quantile(-3.0), Quantile(0.0)}) == 1