# metrics_util

Building blocks for collecting metrics inside a Python process and for
writing code that exports them. Everything is pure Python and uses only the
standard library.

## Modules

- `metrics_util.core`: `Key` (a name plus `Label`s, with a stable 64-bit
  hash), `Unit`, the handles `Counter`, `Gauge` and `Histogram` (each has a
  `noop()` constructor), the abstract `Recorder` and a `NoopRecorder`.
  A process-wide recorder is installed with `set_recorder` (which raises
  `SetRecorderError` if one is already installed), read with `recorder()`
  (a no-op recorder when none is installed) and removed with
  `clear_recorder()`. `DefaultHashable` and `hashable()` give any hashable
  value a 64-bit hash.
- `metrics_util.kind`: `MetricKind` (`COUNTER`, `GAUGE`, `HISTOGRAM`) and
  `MetricKindMask` (`NONE`, `COUNTER`, `GAUGE`, `HISTOGRAM`, `ALL`), which
  combine with `|` and are checked with `matches(kind)`.
- `metrics_util.key`: `CompositeKey`, a kind paired with a key.
- `metrics_util.quantile`: `Quantile` and `parse_quantiles`. Values are
  clamped to [0, 1]; `0.99` is labelled `p99`, `0.0` and `1.0` are labelled
  `min` and `max`.
- `metrics_util.histogram`: `BucketedHistogram`, which counts samples into
  cumulative "less than or equal to" buckets with fixed bounds. An empty list
  of bounds raises `ValueError`.
- `metrics_util.summary`: `Summary`, a quantile sketch with a relative-error
  guarantee. Infinite samples are ignored; `quantile(q)` returns `None` when
  the summary is empty or `q` is outside [0, 1]. Merging summaries built with
  different parameters raises `MergeError`.
- `metrics_util.bucket`: `AtomicBucket`, a thread-safe, unbounded bucket of
  values that is read (`data`, `data_with`) or drained (`clear`,
  `clear_with`) as a whole. Values come out newest block first, each block in
  write order. It is made of `Block`s of 64 slots; pushing into a full block
  raises `BlockFullError`.
- `metrics_util.storage`: `Storage`, with `AtomicStorage` creating an
  `AtomicCounter`, an `AtomicGauge` or an `AtomicBucket` for each metric.
- `metrics_util.registry`: `Registry`, a sharded, thread-safe map of metrics
  by key. `Registry.atomic()` uses `AtomicStorage`.
- `metrics_util.recency`: `Generational` values that count their changes,
  `GenerationalStorage` to create them, and `Recency`, which deletes metrics
  from a registry once they have gone unchanged for longer than an idle
  timeout.
- `metrics_util.debugging`: `DebuggingRecorder`, which records into memory,
  and `Snapshotter`, which produces `Snapshot`s of `DebugValue`s. In
  per-thread mode (`DebuggingRecorder.per_thread()`) each thread gets its own
  registry, read with `Snapshotter.current_thread_snapshot()`. Taking a
  snapshot drains histogram samples.
- `metrics_util.layers`: the `Layer` interface and `Stack`, which wraps a
  recorder in layers and can `install()` itself as the global recorder.
- Layers and combinators: `PrefixLayer` (`metrics_util.prefix`) renames
  metrics to `<prefix>.<name>`; `FilterLayer` (`metrics_util.filter`) drops
  metrics whose names contain any of its patterns, optionally ignoring ASCII
  case; `RouterBuilder` (`metrics_util.router`) sends metrics to recorders by
  kind and longest matching name prefix; `FanoutBuilder`
  (`metrics_util.fanout`) sends every metric to several recorders.

## Install

```
pip install .
```

## Examples

Quantile labels:

```python
from metrics_util.quantile import parse_quantiles

[q.label for q in parse_quantiles([0.0, 0.5, 0.99, 1.0])]
# ['min', 'p50', 'p99', 'max']
```

A bucketed histogram:

```python
from metrics_util.histogram import BucketedHistogram

hist = BucketedHistogram([10.0, 25.0, 100.0])
hist.record_many([3.0, 12.0, 56.0])
hist.buckets()   # [(10.0, 1), (25.0, 2), (100.0, 3)]
```

Recording through a layer into a debugging recorder:

```python
from metrics_util.core import Key
from metrics_util.debugging import DebuggingRecorder
from metrics_util.layers import Stack
from metrics_util.prefix import PrefixLayer

base = DebuggingRecorder()
snapshotter = base.snapshotter()

stack = Stack(base).push(PrefixLayer("app"))
stack.register_counter(Key.from_name("requests")).increment(3)

for composite_key, unit, description, value in snapshotter.snapshot().into_vec():
    print(composite_key.key.name, value.value)   # app.requests 3
```

Routing by name prefix:

```python
from metrics_util.core import Key, NoopRecorder
from metrics_util.debugging import DebuggingRecorder
from metrics_util.kind import MetricKindMask
from metrics_util.router import RouterBuilder

http = DebuggingRecorder()
builder = RouterBuilder.from_recorder(NoopRecorder())
builder.add_route(MetricKindMask.COUNTER, "http", http)
router = builder.build()

router.register_counter(Key.from_name("http.requests")).increment(1)  # goes to `http`
router.register_counter(Key.from_name("db.queries")).increment(1)     # goes to the no-op recorder
```

## What it does not do

The package has no exporters: nothing here serves, pushes or writes metrics
to a monitoring system, and there is no command-line program. It supplies the
recorder interface, storage and layers on which such an exporter would be
built. Metrics are recorded by calling a recorder's `register_*` methods
directly; there are no module-level shortcuts that emit through the global
recorder.

## Tests

```
pip install .[test]
pytest
```