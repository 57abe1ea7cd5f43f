"""Graph database access with retries on transient errors."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from . import retry
from .readers import StreamRowReader
from .utils import statement_summary

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """The requested item does not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class MultipleFoundError(Exception):
    """More than one item was found where one was expected."""

    def __init__(self, message: str = "multiple found") -> None:
        super().__init__(message)


class PropertyNotFoundError(Exception):
    """A vertex has no property with the requested key."""

    def __init__(self, message: str = "property not found") -> None:
        super().__init__(message)


@dataclass
class Vertex:
    """A graph vertex whose properties map each key to a list of values."""

    id: str = ""
    label: str = ""
    properties: Dict[str, List[Any]] = field(default_factory=dict)

    def _single(self, key: str) -> Any:
        values = self.properties.get(key)
        if not values:
            raise PropertyNotFoundError()
        if len(values) != 1:
            raise ValueError(
                f"expected a single value for property {key!r}, got {len(values)}"
            )
        return values[0]

    def get_property(self, key: str) -> str:
        """Return the single string value of ``key``."""
        value = self._single(key)
        if not isinstance(value, str):
            raise TypeError(f"property {key!r} is not a string")
        return value

    def get_property_int64(self, key: str) -> int:
        """Return the single integer value of ``key``."""
        value = self._single(key)
        if isinstance(value, bool):
            raise TypeError(f"property {key!r} is not a number")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise TypeError(f"property {key!r} is not an integer")

    def get_property_bool(self, key: str) -> bool:
        """Return the single boolean value of ``key``."""
        value = self._single(key)
        if not isinstance(value, bool):
            raise TypeError(f"property {key!r} is not a boolean")
        return value


class Pool(Protocol):
    """A connection pool that runs Gremlin statements."""

    def get(self, query: str) -> List[Vertex]:
        ...

    def get_string_list(self, query: str) -> List[str]:
        ...

    def get_edges(self, query: str) -> List[Any]:
        ...

    def execute(self, query: str) -> List[Any]:
        ...

    def get_count(self, query: str) -> int:
        ...

    def open_stream_cursor(self, query: str) -> StreamRowReader:
        ...


def is_transient_error(err: BaseException) -> bool:
    """False for malformed or invalid requests, which retrying cannot fix."""
    text = str(err)
    return " MALFORMED REQUEST " not in text and " INVALID REQUEST ARGUMENTS " not in text


class NeptuneDB:
    """Runs statements through a pool, retrying transient failures."""

    def __init__(
        self,
        pool: Pool,
        *,
        retries: int = 5,
        retry_time: float = 0.02,
        timeout: int = 30,
        batch_size_reader: int = 25000,
        batch_size_writer: int = 150,
        max_workers: int = 150,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        self.pool = pool
        self.max_attempts = 1 + (retries or 5)
        self.retry_time = retry_time or 0.02
        self.timeout = timeout or 30
        self.batch_size_reader = batch_size_reader or 25000
        self.batch_size_writer = batch_size_writer or 150
        self.max_workers = max_workers or 150
        self.cancel = cancel

    def _attempt(self, doer: Callable[[], Any], statement: str) -> Any:
        try:
            return retry.do(
                doer, is_transient_error, self.max_attempts, self.retry_time, self.cancel
            )
        except Exception:
            logger.error("request failed: %s", statement_summary(statement))
            raise

    def get_vertices(self, statement: str) -> List[Vertex]:
        """Return the vertices the statement yields."""
        result = self._attempt(lambda: self.pool.get(statement), statement)
        if not isinstance(result, list):
            raise TypeError("cannot cast Get results to a list of vertices")
        return result

    def get_string_list(self, statement: str) -> List[str]:
        """Return the strings the statement yields."""
        result = self._attempt(lambda: self.pool.get_string_list(statement), statement)
        if not isinstance(result, list):
            raise TypeError("cannot cast GetStringList results to a list of strings")
        return result

    def get_vertex(self, statement: str) -> Vertex:
        """Return the one vertex the statement yields."""
        vertices = self.get_vertices(statement)
        if not vertices:
            logger.error("vertex not found: %s", statement)
            raise NotFoundError()
        if len(vertices) != 1:
            raise ValueError("expected only one vertex")
        return vertices[0]

    def get_edges(self, statement: str) -> List[Any]:
        """Return the edges the statement yields."""
        result = self._attempt(lambda: self.pool.get_edges(statement), statement)
        if not isinstance(result, list):
            raise TypeError("cannot cast GetE results to a list of edges")
        return result

    def execute(self, statement: str) -> List[Any]:
        """Run the statement and return the raw responses."""
        result = self._attempt(lambda: self.pool.execute(statement), statement)
        if not isinstance(result, list):
            raise TypeError("cannot cast results to a list of responses")
        return result

    def get_number(self, statement: str) -> int:
        """Return the count the statement yields."""
        result = self._attempt(lambda: self.pool.get_count(statement), statement)
        if isinstance(result, bool) or not isinstance(result, int):
            raise TypeError("cannot cast count results to an integer")
        return result