# gremlinstore

Helpers for keeping dimensional datasets in a Gremlin-speaking graph
database. It imports observations in batches and streams filtered
observations back as CSV rows. It also reads code hierarchy nodes with
their children and breadcrumbs, and retries transient request failures.
It has no dependencies outside the standard library.

## Install

From a checkout of the project:

```
pip install .
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

## Modules

### `gremlinstore.retry`

- `do(doer, want_retry, max_attempts, retry_time, cancel=None)` calls
  `doer()` until it returns, making at most `max_attempts` attempts.
  - Between attempts it sleeps `sleep_time(attempt, retry_time)` seconds:
    `2 ** attempt * retry_time`, less 1–4 ms of random jitter.
  - If `want_retry(err)` is false for an error, that error is raised
    unchanged.
  - When every attempt fails, it raises `AttemptsExceededError`. The last
    error is kept in `.wrapped`, and the message is
    `number of attempts exceeded: <error>`.
  - If the optional `threading.Event` `cancel` is set before an attempt or
    during a sleep, it raises `CancelledError` (`context canceled`).

### `gremlinstore.filters`

- `Dimension(name, options)` and
  `DimensionFilters(dimensions, published)` are dataclasses.
- `DimensionFilters.is_empty()` is true when no dimension has both a name
  and at least one option.

### `gremlinstore.readers`

- `StreamRowReader` is the protocol for row sources. It has `read()`, which
  returns one row and raises `EOFError` when the rows run out, and
  `close()`.
- `CompositeRowReader(*readers)` reads each reader to its end in turn.
  After the last one it raises `EOFError`. `close()` closes every reader.
- `Reader(row_reader)` is an `io.RawIOBase` byte stream over a row reader.
  - `readinto(buffer)` copies the current row, UTF-8 encoded, into the
    buffer. A row longer than the buffer is handed out over several calls.
  - `total_bytes_read()` and `observations_count()` report the bytes and
    rows read so far.
  - `close()` also closes the row reader.
- The exceptions `NoDataReturnedError`, `UnrecognisedTypeError`,
  `NoInstanceFoundError` and `NoResultsFoundError` are defined here for
  callers to raise.

### `gremlinstore.queries`

This module holds the Gremlin statement templates, as `str.format` strings
with positional `{}` placeholders. They cover:

- code lists
- hierarchy cloning and reading
- instances
- dimensions
- observations

### `gremlinstore.utils`

- `process_in_batches(items, process_batch, batch_size)` splits a dict into
  batches and passes each one to `process_batch`. It returns the number of
  batches.
- `process_in_concurrent_batches(items, process_batch, batch_size, max_workers)`
  runs the batches on a thread pool. It returns a tuple of three things:
  - the merged result dicts of the batches that succeeded;
  - the number of batches;
  - the list of errors raised by the batches that failed.
- `unique(values)` returns the distinct values.
- `create_map_from_arrays(*arrays)` returns a dict that maps every distinct
  value to `""`.
- `statement_summary(statement)` shortens a statement for logging. It
  replaces a leading `g.V('…')` ID list with `g.V(...)` and a
  `within([…])` list with `within([...])`.

### `gremlinstore.db`

- `Vertex(id, label, properties)` holds properties as lists of values. It
  offers `get_property`, `get_property_int64` and `get_property_bool`.
  - A missing key raises `PropertyNotFoundError`.
  - A value of the wrong type raises `TypeError`.
- `Pool` is the protocol a connection must meet. Its methods are `get`,
  `get_string_list`, `get_edges`, `execute`, `get_count` and
  `open_stream_cursor`, and each takes a statement string.
- `NeptuneDB(pool, *, retries=5, retry_time=0.02, timeout=30, batch_size_reader=25000, batch_size_writer=150, max_workers=150, cancel=None)`
  runs statements through the pool. Each request is retried through
  `retry.do`. Zero values fall back to the defaults.
  - Its methods are `get_vertices`, `get_vertex`, `get_string_list`,
    `get_edges`, `execute` and `get_number`.
  - `get_vertex` raises `NotFoundError` when there is no result. It raises
    `ValueError` when there is more than one.
- `is_transient_error(err)` is false for errors whose text contains
  ` MALFORMED REQUEST ` or ` INVALID REQUEST ARGUMENTS `. Those errors are
  not retried.

### `gremlinstore.observations`

- `ObservationStore` extends `NeptuneDB`.
  - `stream_csv_rows(instance_id, filter_id, filters, limit=None)` returns a
    `CompositeRowReader`. It yields the instance header row first, then the
    values of the matching observations. A `None` filter raises
    `InvalidFilterError`.
  - `insert_observation_batch(attempt, instance_id, observations, dimension_node_ids=None)`
    drops any stored copies of the observations and their edges. It then
    creates the observation vertices and links each one to its dimension
    options with `isValueOf` edges. Single quotes in rows are escaped.
    Failures are raised as `RuntimeError`, with a message that names the
    failed step.
- `build_observations_query(instance_id, filters)` builds the traversal
  that selects observations.
- `create_dimension_id(option, instance_id)` builds the vertex ID of a
  dimension option.
- `escape_single_quotes(value)` escapes every single quote with a
  backslash.
- `Observation` and `DimensionOption` are the dataclasses for the input.

### `gremlinstore.hierarchy`

- `HierarchyStore` extends `NeptuneDB`.
  - `build_hierarchy_node(vertex, instance_id, dimension, want_breadcrumbs)`
    returns a `HierarchyResponse`. Children are ordered by their `order`
    property when any child has one, and alphabetically by label
    otherwise. Breadcrumbs are included when `want_breadcrumbs` is true.
  - `build_breadcrumbs(instance_id, dimension, code)` returns the ancestors
    of a node as `HierarchyElement`s.
- `convert_vertex_to_element(vertex)` and `get_optional_int64(vertex, key)`
  map vertex properties onto elements.

## Example

```python
from gremlinstore.filters import Dimension, DimensionFilters
from gremlinstore.observations import (
    DimensionOption,
    Observation,
    ObservationStore,
    build_observations_query,
)

filters = DimensionFilters(dimensions=[Dimension(name="age", options=["30"])])
print(build_observations_query("888", filters))
# g.V().hasId('_888_age_30').in('isValueOf')


class RecordingPool:
    """A stand-in connection that stores nothing and records statements."""

    def __init__(self):
        self.statements = []

    def get_string_list(self, query):
        return []

    def execute(self, query):
        self.statements.append(query)
        return []


pool = RecordingPool()
store = ObservationStore(pool)
store.insert_observation_batch(
    0,
    "inst",
    [Observation(row="1,a", row_index=1,
                 dimension_options=[DimensionOption("age", "30")])],
)
print(pool.statements[1])
# g.V('_inst_age_30').as('_inst_age_30').V('_inst_observation_1').addE('isValueOf').to('_inst_age_30')
```

## What it does not do

- **No database driver.** The package does not include a driver or
  connection pool. You supply any object that has the `Pool` methods.
- **No code-list or hierarchy-building operations.** The statement
  templates for code lists, instances, dimensions and hierarchy cloning are
  in `gremlinstore.queries`, but no functions run them. The only
  operations are:
  - observation import and streaming, in `ObservationStore`;
  - hierarchy reads, in `HierarchyStore`.
- **No command-line program.**