"""Batch processing helpers and statement summaries for logging."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

Batch = Dict[str, str]
BatchProcessor = Callable[[Batch], Optional[Mapping[str, str]]]


def process_in_batches(
    items: Mapping[str, str],
    process_batch: Callable[[Batch], object],
    batch_size: int,
) -> int:
    """Split ``items`` into batches of ``batch_size`` and hand each to ``process_batch``.

    The last batch holds whatever remains. Returns the number of batches.
    """
    num_chunks = 0
    batch: Batch = {}
    for key, value in items.items():
        batch[key] = value
        if len(batch) == batch_size:
            num_chunks += 1
            process_batch(batch)
            batch = {}
    if batch:
        process_batch(batch)
        num_chunks += 1
    return num_chunks


def process_in_concurrent_batches(
    items: Mapping[str, str],
    process_batch: BatchProcessor,
    batch_size: int,
    max_workers: int,
) -> Tuple[Dict[str, str], int, List[Exception]]:
    """Process batches of ``items`` on up to ``max_workers`` threads.

    Returns the merged results of the successful batches, the number of
    batches and the errors raised by the failed ones. The order in which
    batches are processed is not defined.
    """
    result: Dict[str, str] = {}
    errors: List[Exception] = []
    lock = threading.Lock()

    def run(chunk: Batch) -> None:
        try:
            outcome = process_batch(chunk)
        except Exception as err:  # noqa: BLE001 - every failure is reported
            with lock:
                errors.append(err)
            return
        if outcome:
            with lock:
                result.update(outcome)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        num_chunks = process_in_batches(
            items, lambda chunk: executor.submit(run, chunk), batch_size
        )
    return result, num_chunks, errors


def unique(values: Iterable[str]) -> List[str]:
    """Return the distinct values, each once."""
    return list(create_map_from_arrays(values))


def create_map_from_arrays(*arrays: Iterable[str]) -> Dict[str, str]:
    """Return a dict whose keys are the distinct values of all arrays, mapped to ''."""
    return {value: "" for array in arrays for value in array}


def statement_summary(statement: str) -> str:
    """Shorten a statement for logging by hiding long lists of IDs or codes."""
    if statement.startswith("g.V('"):
        end = statement.find("')")
        if end != -1:
            return "g.V(...)" + statement[end + 2:]
    start = statement.find("within([")
    if start != -1:
        end = statement.find("])", start)
        if end != -1:
            return statement[:start] + "within([...])" + statement[end + 2:]
    return statement