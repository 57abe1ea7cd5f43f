"""Readers that stream CSV rows from the database as text lines or bytes."""

from __future__ import annotations

import io
from typing import Protocol


class StreamRowReader(Protocol):
    """Yields individual CSV rows; ``read`` raises EOFError when exhausted."""

    def read(self) -> str:
        ...

    def close(self) -> None:
        ...


class NoDataReturnedError(Exception):
    """No data was read."""

    def __init__(self, message: str = "no data returned in this row") -> None:
        super().__init__(message)


class UnrecognisedTypeError(Exception):
    """A row did not have the expected string value."""

    def __init__(self, message: str = "the value returned was not a string") -> None:
        super().__init__(message)


class NoInstanceFoundError(Exception):
    """No instance exists."""

    def __init__(self, message: str = "no instance found in datastore") -> None:
        super().__init__(message)


class NoResultsFoundError(Exception):
    """The selected filter options produced no results."""

    def __init__(self, message: str = "the filter options created no results") -> None:
        super().__init__(message)


class CompositeRowReader:
    """Reads from several row readers in turn, as if they were one."""

    def __init__(self, *readers: StreamRowReader) -> None:
        self._readers = list(readers)
        self._index = 0

    def read(self) -> str:
        """Return the next row, raising EOFError once every reader is exhausted."""
        while self._index < len(self._readers):
            try:
                return self._readers[self._index].read()
            except EOFError:
                self._index += 1
        raise EOFError()

    def close(self) -> None:
        """Close every reader in order; the first failure stops the rest."""
        for reader in self._readers:
            reader.close()


class Reader(io.RawIOBase):
    """A binary stream over the rows of a :class:`StreamRowReader`."""

    def __init__(self, row_reader: StreamRowReader) -> None:
        super().__init__()
        self._row_reader = row_reader
        self._buffer = b""
        self._eof = False
        self._total_bytes_read = 0
        self._observations_count = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        """Copy bytes of the current row into ``buffer``; returns 0 at the end."""
        if not self._buffer:
            try:
                row = self._row_reader.read()
            except EOFError:
                self._eof = True
                row = ""
            self._buffer = row.encode("utf-8")
            self._observations_count += 1

        view = memoryview(buffer).cast("B")
        copied = min(len(view), len(self._buffer))
        view[:copied] = self._buffer[:copied]
        self._total_bytes_read += copied

        if len(self._buffer) > len(view):
            self._buffer = self._buffer[copied:]
        else:
            self._buffer = b""
        return copied

    def close(self) -> None:
        """Close the underlying row reader and this stream."""
        if self.closed:
            return
        try:
            self._row_reader.close()
        finally:
            super().close()

    def total_bytes_read(self) -> int:
        """Total number of bytes read so far."""
        return self._total_bytes_read

    def observations_count(self) -> int:
        """Number of rows fetched from the row reader so far."""
        return self._observations_count