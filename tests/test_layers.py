import pytest

from metrics_util.core import (
    Counter,
    Gauge,
    Histogram,
    Key,
    Recorder,
    SetRecorderError,
    Unit,
    clear_recorder,
    recorder,
)
from metrics_util.layers import Layer, Stack


@pytest.fixture(autouse=True)
def _clean_global():
    clear_recorder()
    yield
    clear_recorder()


class _Capture(Recorder):
    def __init__(self):
        self.calls = []
        self.counter = Counter.noop()
        self.gauge = Gauge.noop()
        self.histogram = Histogram.noop()

    def describe_counter(self, key_name, unit, description):
        self.calls.append(("describe_counter", key_name, unit, description))

    def describe_gauge(self, key_name, unit, description):
        self.calls.append(("describe_gauge", key_name, unit, description))

    def describe_histogram(self, key_name, unit, description):
        self.calls.append(("describe_histogram", key_name, unit, description))

    def register_counter(self, key):
        self.calls.append(("register_counter", key))
        return self.counter

    def register_gauge(self, key):
        self.calls.append(("register_gauge", key))
        return self.gauge

    def register_histogram(self, key):
        self.calls.append(("register_histogram", key))
        return self.histogram


class _Suffixed(Recorder):
    def __init__(self, inner, suffix):
        self.inner = inner
        self.suffix = suffix

    def describe_counter(self, key_name, unit, description):
        self.inner.describe_counter(key_name + self.suffix, unit, description)

    def describe_gauge(self, key_name, unit, description):
        self.inner.describe_gauge(key_name + self.suffix, unit, description)

    def describe_histogram(self, key_name, unit, description):
        self.inner.describe_histogram(key_name + self.suffix, unit, description)

    def register_counter(self, key):
        return self.inner.register_counter(Key(key.name + self.suffix, key.labels))

    def register_gauge(self, key):
        return self.inner.register_gauge(Key(key.name + self.suffix, key.labels))

    def register_histogram(self, key):
        return self.inner.register_histogram(Key(key.name + self.suffix, key.labels))


class _SuffixLayer(Layer):
    def __init__(self, suffix):
        self.suffix = suffix

    def layer(self, inner):
        return _Suffixed(inner, self.suffix)


def test_layer_is_abstract():
    with pytest.raises(TypeError):
        Layer()


def test_stack_delegates_describes():
    base = _Capture()
    stack = Stack(base)
    stack.describe_counter("counter_key", Unit.COUNT, "counter desc")
    stack.describe_gauge("gauge_key", Unit.BYTES, "gauge desc")
    stack.describe_histogram("histogram_key", Unit.NANOSECONDS, "histogram desc")
    assert base.calls == [
        ("describe_counter", "counter_key", Unit.COUNT, "counter desc"),
        ("describe_gauge", "gauge_key", Unit.BYTES, "gauge desc"),
        ("describe_histogram", "histogram_key", Unit.NANOSECONDS, "histogram desc"),
    ]


def test_stack_delegates_registrations():
    base = _Capture()
    stack = Stack(base)
    key = Key.from_name("counter_key")
    assert stack.register_counter(key) is base.counter
    assert stack.register_gauge(key) is base.gauge
    assert stack.register_histogram(key) is base.histogram
    assert [call[1] for call in base.calls] == [key, key, key]


def test_push_wraps_outermost_last():
    base = _Capture()
    stack = Stack(base).push(_SuffixLayer(".a")).push(_SuffixLayer(".b"))
    stack.register_counter(Key.from_name("x"))
    assert base.calls == [("register_counter", Key.from_name("x.b.a"))]


def test_install_sets_global_once():
    stack = Stack(_Capture())
    stack.install()
    assert recorder() is stack
    with pytest.raises(SetRecorderError):
        Stack(_Capture()).install()