import pytest

from metrics_util.kind import MetricKind, MetricKindMask

ALL_KINDS = [MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.HISTOGRAM]


@pytest.mark.parametrize(
    "mask,expected",
    [
        (MetricKindMask.COUNTER, [True, False, False]),
        (MetricKindMask.GAUGE, [False, True, False]),
        (MetricKindMask.HISTOGRAM, [False, False, True]),
        (MetricKindMask.ALL, [True, True, True]),
        (MetricKindMask.NONE, [False, False, False]),
    ],
)
def test_matching(mask, expected):
    assert [mask.matches(kind) for kind in ALL_KINDS] == expected


def test_or_combines():
    mask = MetricKindMask.COUNTER | MetricKindMask.HISTOGRAM
    assert not MetricKindMask.matches(mask, MetricKind.GAUGE)
    assert MetricKindMask.matches(mask, MetricKind.COUNTER)
    assert MetricKindMask.matches(mask, MetricKind.HISTOGRAM)


def test_or_of_all_single_masks_is_all():
    combined = MetricKindMask.COUNTER | MetricKindMask.GAUGE | MetricKindMask.HISTOGRAM
    assert combined == MetricKindMask.ALL
    assert [MetricKindMask.matches(combined, kind) for kind in ALL_KINDS] == [True, True, True]


def test_or_with_none_is_identity():
    combined = MetricKindMask.GAUGE | MetricKindMask.NONE
    assert combined == MetricKindMask.GAUGE
    assert [MetricKindMask.matches(combined, kind) for kind in ALL_KINDS] == [
        False,
        True,
        False,
    ]


def test_kind_ordering():
    assert MetricKind.COUNTER < MetricKind.GAUGE < MetricKind.HISTOGRAM
    ordered = sorted(reversed(ALL_KINDS))
    assert ordered == list(MetricKind)
    assert [MetricKindMask.HISTOGRAM.matches(kind) for kind in ordered] == [
        False,
        False,
        True,
    ]