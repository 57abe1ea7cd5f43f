import pytest

from gremlinstore.db import (
    MultipleFoundError,
    NeptuneDB,
    NotFoundError,
    PropertyNotFoundError,
    Vertex,
    is_transient_error,
)
from gremlinstore.retry import AttemptsExceededError


class FakePool:
    def __init__(self, get=None, count=None, strings=None, execute=None):
        self.calls = []
        self._get = get
        self._count = count
        self._strings = strings
        self._execute = execute

    def _run(self, name, fn, query):
        self.calls.append((name, query))
        return fn(query)

    def get(self, query):
        return self._run("get", self._get, query)

    def get_count(self, query):
        return self._run("get_count", self._count, query)

    def get_string_list(self, query):
        return self._run("get_string_list", self._strings, query)

    def get_edges(self, query):
        return self._run("get_edges", self._get, query)

    def execute(self, query):
        return self._run("execute", self._execute, query)


def mock_db(pool):
    return NeptuneDB(pool, retries=4, retry_time=0.001)


def test_get_vertex_not_found():
    db = mock_db(FakePool(get=lambda q: []))
    with pytest.raises(NotFoundError):
        db.get_vertex("gremlin statement")


def test_get_vertex_more_than_one():
    db = mock_db(FakePool(get=lambda q: [Vertex(id="a"), Vertex(id="b")]))
    with pytest.raises(ValueError, match="expected only one vertex"):
        db.get_vertex("stmt")


def test_get_vertex_single():
    vertex = Vertex(id="a", label="l")
    db = mock_db(FakePool(get=lambda q: [vertex]))
    assert db.get_vertex("stmt") is vertex


def test_get_vertices_wrong_type():
    db = mock_db(FakePool(get=lambda q: "nope"))
    with pytest.raises(TypeError):
        db.get_vertices("stmt")


def test_get_number_returns_count_and_checks_type():
    db = mock_db(FakePool(count=lambda q: 7))
    assert db.get_number("stmt") == 7
    bad = mock_db(FakePool(count=lambda q: "7"))
    with pytest.raises(TypeError):
        bad.get_number("stmt")


def test_get_string_list_passes_statement():
    pool = FakePool(strings=lambda q: ["a", "b"])
    assert mock_db(pool).get_string_list("g.V()") == ["a", "b"]
    assert pool.calls == [("get_string_list", "g.V()")]


def test_transient_errors_are_retried_up_to_max_attempts():
    def fail(query):
        raise RuntimeError("execute failed")

    pool = FakePool(execute=fail)
    with pytest.raises(AttemptsExceededError) as info:
        mock_db(pool).execute("stmt")
    assert str(info.value) == "number of attempts exceeded: execute failed"
    assert len(pool.calls) == 5


def test_non_transient_error_raised_unchanged():
    def fail(query):
        raise RuntimeError(" MALFORMED REQUEST ")

    pool = FakePool(count=fail)
    with pytest.raises(RuntimeError) as info:
        mock_db(pool).get_number("stmt")
    assert str(info.value) == " MALFORMED REQUEST "
    assert len(pool.calls) == 1


@pytest.mark.parametrize(
    "message, expected",
    [
        (" MALFORMED REQUEST ", False),
        ("x INVALID REQUEST ARGUMENTS y", False),
        ("connection reset", True),
        ("MALFORMED REQUEST", True),
    ],
)
def test_is_transient_error(message, expected):
    assert is_transient_error(Exception(message)) is expected


def test_defaults():
    db = NeptuneDB(FakePool())
    assert db.max_attempts == 6
    assert db.retry_time == 0.02
    assert (db.timeout, db.batch_size_reader, db.batch_size_writer, db.max_workers) == (
        30,
        25000,
        150,
        150,
    )
    zeroed = NeptuneDB(FakePool(), retries=0, timeout=0, max_workers=0)
    assert zeroed.max_attempts == 6
    assert zeroed.timeout == 30
    assert zeroed.max_workers == 150


def test_vertex_properties():
    v = Vertex(
        properties={
            "code": ["c1"],
            "n": [3.0],
            "flag": [True],
            "many": ["a", "b"],
        }
    )
    assert v.get_property("code") == "c1"
    assert v.get_property_int64("n") == 3
    assert v.get_property_bool("flag") is True
    with pytest.raises(PropertyNotFoundError):
        v.get_property("missing")
    with pytest.raises(ValueError):
        v.get_property("many")
    with pytest.raises(TypeError):
        v.get_property_int64("code")
    with pytest.raises(TypeError):
        v.get_property_bool("n")


def test_multiple_found_error_message():
    assert str(MultipleFoundError()) == "multiple found"