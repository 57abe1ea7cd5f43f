"""Retry a callable with exponential back-off and optional cancellation."""

from __future__ import annotations

import random
import threading
import time
from typing import Any, Callable, Optional

Doer = Callable[[], Any]
WantRetry = Callable[[BaseException], bool]


class AttemptsExceededError(Exception):
    """Raised when every permitted attempt has failed with a retriable error."""

    def __init__(self, wrapped: Optional[BaseException]) -> None:
        self.wrapped = wrapped
        super().__init__(f"number of attempts exceeded: {wrapped}")


class CancelledError(Exception):
    """Raised when the cancellation event is set before or between attempts."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


def sleep_time(attempt: int, retry_time: float) -> float:
    """Return the back-off in seconds for ``attempt``: 2**attempt * retry_time minus 1-4 ms of jitter."""
    jitter = random.randint(1, 4) / 1000.0
    return (2 ** attempt) * retry_time - jitter


def _sleep(attempt: int, retry_time: float, cancel: Optional[threading.Event]) -> None:
    duration = max(0.0, sleep_time(attempt, retry_time))
    if cancel is None:
        time.sleep(duration)
    elif cancel.wait(duration):
        raise CancelledError()


def do(
    doer: Doer,
    want_retry: WantRetry,
    max_attempts: int,
    retry_time: float,
    cancel: Optional[threading.Event] = None,
) -> Any:
    """Call ``doer`` until it succeeds, up to ``max_attempts`` times.

    ``retry_time`` is the initial back-off in seconds, doubled on every retry.
    An error for which ``want_retry`` returns False is raised unchanged.
    Setting ``cancel`` stops further attempts with :class:`CancelledError`.
    """
    last_error: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        if cancel is not None and cancel.is_set():
            raise CancelledError()
        if attempt > 1:
            _sleep(attempt, retry_time, cancel)
        try:
            return doer()
        except Exception as err:  # noqa: BLE001 - the caller decides what is retriable
            if not want_retry(err):
                raise
            last_error = err
    raise AttemptsExceededError(last_error) from last_error