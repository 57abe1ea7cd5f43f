import pytest

from gremlinstore.db import PropertyNotFoundError, Vertex
from gremlinstore.hierarchy import (
    HierarchyElement,
    HierarchyResponse,
    HierarchyStore,
    convert_vertex_to_element,
    get_optional_int64,
)

COUNT_QUERY = (
    "g.V().hasLabel('_hierarchy_node_instance-id_dimension').has('code','code')"
    ".in('hasParent').has('order').count()"
)
WITH_ORDER_QUERY = (
    "g.V().hasLabel('_hierarchy_node_instance-id_dimension').has('code','code')"
    ".in('hasParent').order().by('order',asc)"
)
ALPHABETICAL_QUERY = (
    "g.V().hasLabel('_hierarchy_node_instance-id_dimension').has('code','code')"
    ".in('hasParent').order().by('label')"
)
ANCESTRY_QUERY = (
    "g.V().hasLabel('_hierarchy_node_instance-id_dimension').has('code', 'code')"
    ".repeat(out('hasParent')).emit()"
)


def make_vertex(code, label, number_of_children, has_data, order=None):
    properties = {
        "code": [code],
        "label": [label],
        "numberOfChildren": [float(number_of_children)],
        "hasData": [has_data],
    }
    if order is not None:
        properties["order"] = [float(order)]
    return Vertex(id="v", label="vertex-label", properties=properties)


class FakePool:
    def __init__(self, vertices=None, count=0, count_error=None):
        self.vertices = vertices or []
        self.count = count
        self.count_error = count_error
        self.get_calls = []
        self.count_calls = []

    def get(self, query):
        self.get_calls.append(query)
        return list(self.vertices)

    def get_count(self, query):
        self.count_calls.append(query)
        if self.count_error is not None:
            raise self.count_error
        return self.count


def make_store(pool):
    return HierarchyStore(pool, retries=2, retry_time=0.001)


def test_node_without_order():
    pool = FakePool()
    vertex = make_vertex("code", "code-label", 0, True)
    node = make_store(pool).build_hierarchy_node(vertex, "instance-id", "dimension", False)
    assert node == HierarchyResponse(
        id="code", label="code-label", no_of_children=0, has_data=True
    )
    assert pool.get_calls == []
    assert pool.count_calls == []


def test_node_with_order():
    vertex = make_vertex("code", "code-label", 0, True, order=123)
    node = make_store(FakePool()).build_hierarchy_node(
        vertex, "instance-id", "dimension", False
    )
    assert node == HierarchyResponse(
        id="code", label="code-label", no_of_children=0, has_data=True, order=123
    )


@pytest.mark.parametrize(
    "count, expected_children_query",
    [(1, WITH_ORDER_QUERY), (0, ALPHABETICAL_QUERY)],
)
def test_node_with_children(count, expected_children_query):
    child = make_vertex("child-code", "child-label", 1, True)
    pool = FakePool(vertices=[child], count=count)
    vertex = make_vertex("code", "label", 1, True)

    node = make_store(pool).build_hierarchy_node(vertex, "instance-id", "dimension", True)

    assert pool.count_calls == [COUNT_QUERY]
    assert pool.get_calls == [expected_children_query, ANCESTRY_QUERY]
    expected_child = HierarchyElement(
        id="child-code", label="child-label", no_of_children=1, has_data=True
    )
    assert node.children == [expected_child]
    assert node.breadcrumbs == [expected_child]


def test_children_not_fetched_without_instance_id():
    pool = FakePool(vertices=[make_vertex("c", "l", 0, False)], count=1)
    vertex = make_vertex("code", "label", 1, True)
    node = make_store(pool).build_hierarchy_node(vertex, "", "dimension", False)
    assert node.children == []
    assert pool.count_calls == []


def test_count_failure_is_wrapped():
    pool = FakePool(count_error=RuntimeError(" MALFORMED REQUEST "))
    vertex = make_vertex("code", "label", 1, True)
    with pytest.raises(RuntimeError) as info:
        make_store(pool).build_hierarchy_node(vertex, "instance-id", "dimension", False)
    assert str(info.value) == f'Gremlin query failed: "{COUNT_QUERY}":  MALFORMED REQUEST '
    assert len(pool.count_calls) == 1


def test_build_breadcrumbs_returns_ancestors_in_order():
    parent = make_vertex("p", "parent", 2, False)
    grandparent = make_vertex("gp", "grandparent", 1, False, order=4)
    pool = FakePool(vertices=[parent, grandparent])
    crumbs = make_store(pool).build_breadcrumbs("instance-id", "dimension", "code")
    assert pool.get_calls == [ANCESTRY_QUERY]
    assert [c.id for c in crumbs] == ["p", "gp"]
    assert crumbs[1].order == 4
    assert crumbs[0].order is None


def test_build_breadcrumbs_empty():
    crumbs = make_store(FakePool()).build_breadcrumbs("instance-id", "dimension", "code")
    assert crumbs == []


def test_convert_vertex_to_element():
    element = convert_vertex_to_element(make_vertex("K01", "Region", 3, False, order=7))
    assert element == HierarchyElement(
        id="K01", label="Region", no_of_children=3, has_data=False, order=7
    )


def test_convert_vertex_missing_label():
    vertex = Vertex(properties={"code": ["K01"]})
    with pytest.raises(PropertyNotFoundError):
        convert_vertex_to_element(vertex)


def test_get_optional_int64_missing_is_none():
    assert get_optional_int64(Vertex(properties={}), "order") is None


def test_get_optional_int64_present():
    assert get_optional_int64(Vertex(properties={"order": [5.0]}), "order") == 5


def test_get_optional_int64_bad_type_raises():
    with pytest.raises(TypeError):
        get_optional_int64(Vertex(properties={"order": ["x"]}), "order")