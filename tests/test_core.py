import pytest

from metrics_util.core import (
    Counter,
    DefaultHashable,
    Gauge,
    Histogram,
    Key,
    Label,
    NoopRecorder,
    Recorder,
    SetRecorderError,
    clear_recorder,
    hashable,
    recorder,
    set_recorder,
)


@pytest.fixture(autouse=True)
def _clean_global():
    clear_recorder()
    yield
    clear_recorder()


class _Recording:
    def __init__(self):
        self.calls = []

    def increment(self, value):
        self.calls.append(("increment", value))

    def absolute(self, value):
        self.calls.append(("absolute", value))

    def decrement(self, value):
        self.calls.append(("decrement", value))

    def set(self, value):
        self.calls.append(("set", value))

    def record(self, value):
        self.calls.append(("record", value))


def test_from_name_matches_constructor():
    assert Key.from_name("foobar") == Key("foobar")
    assert Key.from_name("foobar").labels == ()


def test_key_hash_is_stable_for_equal_keys():
    a = Key("name", [("a", "b")])
    b = Key("name", (Label("a", "b"),))
    assert a == b
    assert a.get_hash() == b.get_hash()
    assert a.hashable() == a.get_hash()
    assert hash(a) == hash(b)


def test_key_hash_differs_with_labels():
    plain = Key.from_name("name")
    labelled = Key("name", [("a", "b")])
    assert plain != labelled
    assert plain.get_hash() != labelled.get_hash()


def test_key_hash_fits_in_64_bits():
    key = Key("x", [("k", "v")])
    assert 0 <= key.get_hash() < 2**64


def test_label_ordering():
    labels = sorted([Label("b", "1"), Label("a", "2")])
    assert [label.key for label in labels] == ["a", "b"]


def test_counter_forwards():
    inner = _Recording()
    counter = Counter(inner)
    counter.increment(5)
    counter.absolute(7)
    assert inner.calls == [("increment", 5), ("absolute", 7)]


def test_gauge_forwards():
    inner = _Recording()
    gauge = Gauge(inner)
    gauge.increment(1.5)
    gauge.decrement(0.5)
    gauge.set(3.0)
    assert inner.calls == [("increment", 1.5), ("decrement", 0.5), ("set", 3.0)]


def test_histogram_forwards():
    inner = _Recording()
    Histogram(inner).record(2.5)
    assert inner.calls == [("record", 2.5)]


def test_recorder_is_abstract():
    with pytest.raises(TypeError):
        Recorder()


def test_global_recorder_install_and_clear():
    installed = NoopRecorder()
    set_recorder(installed)
    assert recorder() is installed
    with pytest.raises(SetRecorderError):
        set_recorder(NoopRecorder())
    clear_recorder()
    current = recorder()
    assert current is not installed
    assert isinstance(current, NoopRecorder)


def test_default_hashable_consistent():
    a = DefaultHashable(("x", 1))
    b = DefaultHashable(("x", 1))
    assert a == b
    assert a.hashable() == b.hashable()
    assert hashable(a) == a.hashable()


def test_hashable_uses_key_hash():
    key = Key("metric", [("a", "b")])
    assert hashable(key) == key.get_hash()


def test_hashable_plain_value_in_range():
    value = hashable("plain")
    assert 0 <= value < 2**64
    assert value == hashable("plain")