"""Hierarchy nodes, their children and their breadcrumbs, read from the graph store."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from . import queries
from .db import NeptuneDB, PropertyNotFoundError, Vertex

logger = logging.getLogger(__name__)


@dataclass
class HierarchyElement:
    """A child or ancestor of a hierarchy node."""

    id: str = ""
    label: str = ""
    no_of_children: int = 0
    has_data: bool = False
    order: Optional[int] = None


@dataclass
class HierarchyResponse:
    """A hierarchy node with its children and, on request, its breadcrumbs."""

    id: str = ""
    label: str = ""
    children: List[HierarchyElement] = field(default_factory=list)
    no_of_children: int = 0
    has_data: bool = False
    breadcrumbs: Optional[List[HierarchyElement]] = None
    order: Optional[int] = None


def get_optional_int64(vertex: Vertex, key: str) -> Optional[int]:
    """Return the integer value of ``key``, or None if the vertex lacks it."""
    try:
        return vertex.get_property_int64(key)
    except PropertyNotFoundError:
        return None


def _read_common(vertex: Vertex, what: str) -> tuple:
    # The vertex's *code* property is used as the ID, since links are built from it.
    steps = (
        ("code", vertex.get_property),
        ("label", vertex.get_property),
        ("numberOfChildren", vertex.get_property_int64),
        ("hasData", vertex.get_property_bool),
        ("order", lambda key: get_optional_int64(vertex, key)),
    )
    values = []
    for key, getter in steps:
        try:
            values.append(getter(key))
        except Exception:
            logger.error("%s: bad %s property", what, key)
            raise
    return tuple(values)


def convert_vertex_to_element(vertex: Vertex) -> HierarchyElement:
    """Map a hierarchy vertex onto a :class:`HierarchyElement`."""
    code, label, children, has_data, order = _read_common(vertex, "convert_vertex_to_element")
    return HierarchyElement(
        id=code, label=label, no_of_children=children, has_data=has_data, order=order
    )


class HierarchyStore(NeptuneDB):
    """Hierarchy reads on top of :class:`NeptuneDB`."""

    def build_hierarchy_node(
        self,
        vertex: Vertex,
        instance_id: str,
        dimension: str,
        want_breadcrumbs: bool,
    ) -> HierarchyResponse:
        """Build the response for ``vertex``, fetching its children and optionally its ancestry."""
        code, label, no_of_children, has_data, order = _read_common(
            vertex, "build_hierarchy_node"
        )
        response = HierarchyResponse(
            id=code,
            label=label,
            no_of_children=no_of_children,
            has_data=has_data,
            order=order,
        )

        if response.no_of_children > 0 and instance_id:
            statement = queries.COUNT_CHILDREN_WITH_ORDER.format(
                instance_id, dimension, response.id
            )
            try:
                order_count = self.get_number(statement)
            except Exception as err:
                raise RuntimeError(
                    f"Gremlin query failed: {json.dumps(statement)}: {err}"
                ) from err

            template = (
                queries.GET_CHILDREN_WITH_ORDER
                if order_count > 0
                else queries.GET_CHILDREN_ALPHABETICALLY
            )
            statement = template.format(instance_id, dimension, response.id)

            child_vertices = self.get_vertices(statement)
            if len(child_vertices) != response.no_of_children:
                logger.warning(
                    "child count mismatch for node %s: property %d, fetched %d",
                    response.id,
                    response.no_of_children,
                    len(child_vertices),
                )
            response.children = [convert_vertex_to_element(child) for child in child_vertices]

        if want_breadcrumbs:
            response.breadcrumbs = self.build_breadcrumbs(instance_id, dimension, response.id)
        return response

    def build_breadcrumbs(
        self, instance_id: str, dimension: str, code: str
    ) -> List[HierarchyElement]:
        """Return the chain of ancestors of the node with ``code``, nearest first."""
        statement = queries.GET_ANCESTRY.format(instance_id, dimension, code)
        ancestors = self.get_vertices(statement)
        return [convert_vertex_to_element(ancestor) for ancestor in ancestors]