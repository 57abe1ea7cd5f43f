"""Streaming and bulk insertion of observations."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from . import queries
from .db import NeptuneDB
from .filters import DimensionFilters
from .readers import CompositeRowReader

logger = logging.getLogger(__name__)


class InvalidFilterError(ValueError):
    """No filter was provided."""

    def __init__(self, message: str = "nil filter cannot be processed") -> None:
        super().__init__(message)


@dataclass
class DimensionOption:
    """A dimension option an observation is a value of."""

    dimension_name: str = ""
    name: str = ""


@dataclass
class Observation:
    """A CSV row to store, with the dimension options it belongs to."""

    row: str = ""
    row_index: int = 0
    instance_id: str = ""
    dimension_options: List[DimensionOption] = field(default_factory=list)


def escape_single_quotes(value: str) -> str:
    """Escape every single quote with a backslash."""
    return value.replace("'", "\\'")


def create_dimension_id(option: DimensionOption, instance_id: str) -> str:
    """Return the vertex ID of a dimension option within an instance."""
    return f"_{instance_id}_{option.dimension_name.lower()}_{option.name}"


def _quoted_list(ids: List[str]) -> str:
    return "'" + "','".join(ids) + "'"


def build_observations_query(instance_id: str, filters: DimensionFilters) -> str:
    """Return the statement prefix that selects the observations matching ``filters``."""
    if filters.is_empty():
        return queries.GET_ALL_OBSERVATIONS_PART.format(instance_id)

    statement = ""
    additional_dimensions = 0
    additional_options: List[str] = []

    for position, dim in enumerate(filters.dimensions or ()):
        if not dim.options:
            continue
        prefix = f"_{instance_id}_{dim.name}_"
        option_ids = [f"'{prefix}{opt}'" for opt in dim.options]

        # Filtering on the first dimension alone narrows the set to check first.
        if position == 0:
            statement = queries.GET_FIRST_DIMENSION_PART.format(",".join(option_ids))
            continue

        additional_dimensions += 1
        additional_options.extend(option_ids)

    if additional_dimensions > 0:
        statement += queries.GET_ADDITIONAL_DIMENSIONS_PART.format(
            ",".join(additional_options), additional_dimensions
        )
    return statement


class ObservationStore(NeptuneDB):
    """Observation reads and writes on top of :class:`NeptuneDB`."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._batch_count = 0
        self._first_batch_start: Optional[float] = None

    def stream_csv_rows(
        self,
        instance_id: str,
        filter_id: str,
        filters: Optional[DimensionFilters],
        limit: Optional[int] = None,
    ) -> CompositeRowReader:
        """Return a row reader yielding the instance header, then matching observations."""
        if filters is None:
            raise InvalidFilterError()

        header_reader = self.pool.open_stream_cursor(
            queries.GET_INSTANCE_HEADER_PART.format(instance_id)
        )

        statement = build_observations_query(instance_id, filters)
        statement += queries.GET_OBSERVATION_VALUES_PART
        if limit is not None:
            statement += queries.LIMIT_PART.format(limit)

        observation_reader = self.pool.open_stream_cursor(statement)
        return CompositeRowReader(header_reader, observation_reader)

    def insert_observation_batch(
        self,
        attempt: int,
        instance_id: str,
        observations: List[Observation],
        dimension_node_ids: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Replace any stored copies of ``observations`` and link them to their dimensions."""
        if not observations:
            logger.info("no observations in batch for instance %s", instance_id)
            return

        batch_id = self._batch_count
        self._batch_count += 1
        batch_start = time.monotonic()
        if self._first_batch_start is None:
            self._first_batch_start = batch_start
        else:
            logger.info("opening batch %d of size %d", batch_id, len(observations))

        obs_ids: List[str] = []
        obs_by_id: Dict[str, Observation] = {}
        dim_ids: Dict[str, None] = {}

        for obs in observations:
            obs.row = escape_single_quotes(obs.row)
            obs_id = f"_{instance_id}_observation_{obs.row_index}"
            obs_by_id[obs_id] = obs
            obs_ids.append(obs_id)
            for option in obs.dimension_options:
                dim_ids.setdefault(create_dimension_id(option, instance_id), None)

        try:
            self._remove_existing_observations(obs_ids)
        except Exception as err:
            raise RuntimeError(f"failed to remove existing observations: {err}") from err

        try:
            self._add_observation_nodes(obs_ids, obs_by_id, instance_id)
        except Exception as err:
            raise RuntimeError(f"failed to add observation nodes: {err}") from err

        try:
            self._add_observation_edges(list(dim_ids), obs_ids, obs_by_id, instance_id)
        except Exception as err:
            raise RuntimeError(f"failed to add observation edges: {err}") from err

        now = time.monotonic()
        logger.info(
            "batch %d complete: elapsed %.3fs, batch time %.3fs",
            batch_id,
            now - self._first_batch_start,
            now - batch_start,
        )

    def _add_observation_edges(
        self,
        dim_ids: List[str],
        obs_ids: List[str],
        obs_by_id: Mapping[str, Observation],
        instance_id: str,
    ) -> None:
        parts = ["g"]
        parts.extend(queries.DIMENSION_LOOKUP_PART.format(d, d) for d in dim_ids)
        for obs_id in obs_ids:
            for option in obs_by_id[obs_id].dimension_options:
                parts.append(
                    queries.ADD_OBSERVATION_EDGE_PART.format(
                        obs_id, create_dimension_id(option, instance_id)
                    )
                )
        self.execute("".join(parts))

    def _add_observation_nodes(
        self,
        obs_ids: List[str],
        obs_by_id: Mapping[str, Observation],
        instance_id: str,
    ) -> None:
        statement = "g" + "".join(
            queries.CREATE_OBSERVATION_PART.format(instance_id, obs_id, obs_by_id[obs_id].row)
            for obs_id in obs_ids
        )
        self.execute(statement)

    def _remove_existing_observations(self, obs_ids: List[str]) -> None:
        existing = self.get_string_list(queries.GET_OBSERVATIONS.format(_quoted_list(obs_ids)))
        if not existing:
            return

        existing_joined = _quoted_list(existing)
        edge_ids = self.get_string_list(queries.GET_OBSERVATIONS_EDGES.format(existing_joined))

        statement = ""
        if edge_ids:
            statement += queries.DROP_OBSERVATION_EDGES.format(_quoted_list(edge_ids))
        statement += queries.DROP_OBSERVATIONS.format(existing_joined)
        self.execute(statement)