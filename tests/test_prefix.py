from metrics_util.core import Counter, Gauge, Histogram, Key, Label, Recorder, Unit
from metrics_util.layers import Stack
from metrics_util.prefix import Prefix, PrefixLayer


class RecordingRecorder(Recorder):
    def __init__(self):
        self.operations = []

    def describe_counter(self, key_name, unit, description):
        self.operations.append(("describe_counter", key_name, unit, description))

    def describe_gauge(self, key_name, unit, description):
        self.operations.append(("describe_gauge", key_name, unit, description))

    def describe_histogram(self, key_name, unit, description):
        self.operations.append(("describe_histogram", key_name, unit, description))

    def register_counter(self, key):
        self.operations.append(("register_counter", key))
        return Counter.noop()

    def register_gauge(self, key):
        self.operations.append(("register_gauge", key))
        return Gauge.noop()

    def register_histogram(self, key):
        self.operations.append(("register_histogram", key))
        return Histogram.noop()


def _apply(recorder):
    recorder.describe_counter("counter_key", Unit.COUNT, "counter desc")
    recorder.describe_gauge("gauge_key", Unit.BYTES, "gauge desc")
    recorder.describe_histogram("histogram_key", Unit.NANOSECONDS, "histogram desc")
    recorder.register_counter(Key.from_name("counter_key"))
    recorder.register_gauge(Key.from_name("gauge_key"))
    recorder.register_histogram(Key.from_name("histogram_key"))


EXPECTED = [
    ("describe_counter", "testing.counter_key", Unit.COUNT, "counter desc"),
    ("describe_gauge", "testing.gauge_key", Unit.BYTES, "gauge desc"),
    ("describe_histogram", "testing.histogram_key", Unit.NANOSECONDS, "histogram desc"),
    ("register_counter", Key.from_name("testing.counter_key")),
    ("register_gauge", Key.from_name("testing.gauge_key")),
    ("register_histogram", Key.from_name("testing.histogram_key")),
]


def test_basic_functionality():
    inner = RecordingRecorder()
    prefix = PrefixLayer("testing").layer(inner)
    _apply(prefix)
    assert inner.operations == EXPECTED


def test_key_vs_key_name():
    prefix = Prefix("foobar", None)
    key_name = "my_key"
    key = Key.from_name(key_name)
    prefixed_key = prefix.prefix_key(key)
    prefixed_key_name = prefix.prefix_key_name(key_name)
    assert prefixed_key.name == prefixed_key_name
    assert prefixed_key_name == "foobar.my_key"


def test_labels_are_preserved():
    inner = RecordingRecorder()
    recorder = PrefixLayer("prefix").layer(inner)
    key = Key("simple_key", (Label("foo", "bar"),))
    handle = recorder.register_counter(key)
    assert isinstance(handle, Counter)
    assert inner.operations == [
        ("register_counter", Key("prefix.simple_key", (Label("foo", "bar"),)))
    ]


def test_prefix_in_stack():
    inner = RecordingRecorder()
    stack = Stack(inner).push(PrefixLayer("testing"))
    _apply(stack)
    assert inner.operations == EXPECTED


def test_nested_prefixes_apply_outermost_first():
    inner = RecordingRecorder()
    stack = Stack(inner).push(PrefixLayer("inner")).push(PrefixLayer("outer"))
    stack.register_gauge(Key.from_name("name"))
    assert inner.operations == [("register_gauge", Key.from_name("inner.outer.name"))]