"""Gremlin statement templates for the graph store.

Templates use positional ``{}`` placeholders for ``str.format``. Boolean
placeholders expect the lowercase literals ``true`` or ``false``.
Properties that are not lists must be written with ``single`` because the
store defaults to ``set`` cardinality.
"""

# code lists
GET_CODE_LISTS = "g.V().hasLabel('_code_list')"
GET_CODE_LISTS_FILTERED = "g.V().hasLabel('_code_list').has('{}', true)"
GET_CODE_LIST = "g.V().hasLabel('_code_list').has('listID', '{}')"
CODE_LIST_EXISTS = "g.V().hasLabel('_code_list').has('listID', '{}').count()"
CODE_LIST_EDITION_EXISTS = (
    "g.V().hasLabel('_code_list').has('listID', '{}').has('edition', '{}').count()"
)
COUNT_CODES = (
    "g.V().has('_code_list','listID', '{}').has('edition', '{}')"
    ".in('usedBy').count()"
)
COUNT_ORDERED_EDGES = (
    "g.V().has('_code_list','listID', '{}').has('edition', '{}')"
    ".inE('usedBy').has('order').count()"
)
GET_CODES_ALPHABETICALLY = (
    "g.V().has('_code_list','listID', '{}').has('edition', '{}')"
    ".inE('usedBy').as('usedBy')"
    ".outV().order().by('value',asc).as('code')"
    ".select('usedBy', 'code').by('label').by('value')"
    ".unfold().select(values)"
)
GET_CODES_WITH_ORDER = (
    "g.V().has('_code_list', 'listID', '{}').has('edition', '{}')"
    ".inE('usedBy').order().by('order',asc).as('usedBy')"
    ".outV().as('code')"
    ".select('usedBy', 'code').by('label').by('value')"
    ".unfold().select(values)"
)
CODE_EXISTS = (
    "g.V().hasLabel('_code_list')"
    ".has('listID', '{}').has('edition', '{}')"
    '.in(\'usedBy\').has(\'value\', "{}").count()'
)
GET_USED_BY_EDGES_FROM_NODE_IDS = (
    "g.V().hasLabel('_code_list').has('_code_list', 'listID', '{}')"
    ".inE('usedBy').where(otherV().has('value', within({}))).as('usedBy')"
    ".outV().values('value').as('code').union(select('code', 'usedBy'))"
)

# Parameters: code list ID, edition, code value. Collapses edge and node data
# into a flat list of strings: usedBy label, dataset edition, version and id.
GET_CODE_DATASETS = (
    "g.V().hasLabel('_code_list').has('listID', '{}').\n"
    "\t\thas('edition','{}').\n"
    "\t\tinE('usedBy').as('r').values('label').as('rl').select('r').\n"
    "\t\tmatch(\n"
    "\t\t\t__.as('r').outV().has('value',\"{}\").as('c'),\n"
    "\t\t\t__.as('c').out('inDataset').as('d').\n"
    "\t\t\t\tselect('d').values('edition').as('de').\n"
    "\t\t\t\tselect('d').values('version').as('dv').\n"
    "\t\t\t\tselect('d').values('dataset_id').as('did'),\n"
    "\t\t\t__.as('d').has('is_published',true)).\n"
    "\t\tunion(select('rl', 'de', 'dv', 'did')).unfold().select(values)\n"
    "\t"
)

# generic hierarchy lookups returning {node_id, node_code} maps
GET_GENERIC_HIERARCHY_NODE_IDS = (
    "g.V().hasLabel('_generic_hierarchy_node_{}').has('code',within({})).as('gh')"
    ".id().as('node_id').select('gh').values('code').as('node_code')"
    ".select('gh').select('node_id', 'node_code')"
)
GET_GENERIC_HIERARCHY_ANCESTRY_IDS = (
    "g.V().hasLabel('_generic_hierarchy_node_{}').has('code',within({}))"
    ".repeat(out('hasParent')).emit().as('gh')"
    ".id().as('node_id').select('gh').values('code').as('node_code')"
    ".select('gh').select('node_id', 'node_code')"
)

# creates a 'hasCode' edge from a generic hierarchy node to its code node, if absent
CREATE_HAS_CODE_EDGE = (
    "g.V().hasLabel('_code').has('value', '{}')"
    ".where(out('usedBy').hasLabel('_code_list').has('listID','{}')).as('dest')"
    ".V('{}').coalesce(__.outE('hasCode'), __.addE('hasCode').to(select('dest')))"
)

GET_HIERARCHY_NODE_IDS = "g.V().hasLabel('_hierarchy_node_{}_{}').id()"

# hierarchy write
CLONE_HIERARCHY_NODES = (
    "g.V().hasLabel('_generic_hierarchy_node_{}').as('old')"
    ".addV('_hierarchy_node_{}_{}')"
    ".property(single,'code',select('old').values('code'))"
    ".property(single,'label',select('old').values('label'))"
    ".property(single,'hasData', false)"
    ".property('code_list','{}').as('new')"
    ".addE('clone_of').to('old')"
    ".select('new')"
)
CLONE_HIERARCHY_NODES_FROM_IDS = (
    "g.V({}).as('old')"
    ".addV('_hierarchy_node_{}_{}')"
    ".property(single,'code',select('old').values('code'))"
    ".property(single,'label',select('old').values('label'))"
    ".property(single,'hasData', {})"
    ".property('code_list','{}').as('new')"
    ".addE('clone_of').to('old')"
)
CLONE_ORDER_FROM_IDS = (
    "g.V({}).as('old')"
    ".out('hasCode')"
    ".outE('usedBy').where(otherV().hasLabel('_code_list').has('_code_list', 'listID', '{}'))"
    ".values('order').as('o')"
    ".select('old').in('clone_of')"
    ".property(single,'order', select('o'))"
)
COUNT_HIERARCHY_NODES = "g.V().hasLabel('_hierarchy_node_{}_{}').count()"
CLONE_HIERARCHY_RELATIONSHIPS = (
    "g.V().hasLabel('_generic_hierarchy_node_{}').as('oc')"
    ".out('hasParent')"
    ".in('clone_of').hasLabel('_hierarchy_node_{}_{}').as('p')"
    ".select('oc').in('clone_of').hasLabel('_hierarchy_node_{}_{}')"
    ".addE('hasParent').to('p')"
)
CLONE_HIERARCHY_RELATIONSHIPS_FROM_IDS = (
    "g.V({}).as('oc')"
    ".out('hasParent')"
    ".in('clone_of').hasLabel('_hierarchy_node_{}_{}').as('p')"
    ".select('oc').in('clone_of').hasLabel('_hierarchy_node_{}_{}')"
    ".addE('hasParent').to('p')"
)
REMOVE_CLONE_MARKERS = "g.V().hasLabel('_hierarchy_node_{}_{}').outE('clone_of').drop()"
REMOVE_CLONE_MARKERS_FROM_SOURCE_IDS = "g.V({}).outE('clone_of').drop()"
SET_NUMBER_OF_CHILDREN = (
    "g.V().hasLabel('_hierarchy_node_{}_{}')"
    ".property(single,'numberOfChildren',__.in('hasParent').count())"
)
SET_NUMBER_OF_CHILDREN_FROM_IDS = (
    "g.V({}).property(single,'numberOfChildren',__.in('hasParent').count())"
)
GET_CODES_WITH_DATA = "g.V().hasLabel('_{}_{}').values('value')"
SET_HAS_DATA = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').as('v')"
    ".has('code',within({})).property(single,'hasData',true)"
)
MARK_NODES_TO_REMAIN = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').has('hasData', true)"
    ".property(single,'remain',true)"
    ".repeat(out('hasParent')).emit().property(single,'remain',true)"
)
REMOVE_NODES_NOT_MARKED_TO_REMAIN = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').not(has('remain',true)).drop()"
)
REMOVE_REMAIN_MARKER = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').has('remain').properties('remain').drop()"
)

# hierarchy read
HIERARCHY_EXISTS = "g.V().hasLabel('_hierarchy_node_{}_{}').limit(1)"
GET_HIERARCHY_ROOT = "g.V().hasLabel('_hierarchy_node_{}_{}').not(outE('hasParent'))"
GET_HIERARCHY_ELEMENT = "g.V().hasLabel('_hierarchy_node_{}_{}').has('code','{}')"
COUNT_CHILDREN_WITH_ORDER = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').has('code','{}')"
    ".in('hasParent').has('order').count()"
)
GET_CHILDREN_ALPHABETICALLY = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').has('code','{}')"
    ".in('hasParent').order().by('label')"
)
GET_CHILDREN_WITH_ORDER = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').has('code','{}')"
    ".in('hasParent').order().by('order',asc)"
)
# recursive
GET_ANCESTRY = (
    "g.V().hasLabel('_hierarchy_node_{}_{}').has('code', '{}')"
    ".repeat(out('hasParent')).emit()"
)

# instance import
CREATE_INSTANCE = (
    "g.addV('_{}_Instance').property(id, '_{}_Instance')"
    '.property(single,\'header\',"{}")'
)
CHECK_INSTANCE = "g.V('_{}_Instance').count()"
GET_CODE = (
    "g.V().hasLabel('_code').has('value',\"{}\")"
    ".where(out('usedBy').hasLabel('_code_list').has('listID','{}')).id()"
)
CREATE_INSTANCE_TO_CODE_RELATIONSHIP = (
    "g.V('_{}_Instance').as('i').V('{}').addE('inDataset').to('i')"
)
ADD_VERSION_DETAILS_TO_INSTANCE = (
    "g.V().hasId('_{}_Instance').property(single,'dataset_id','{}')."
    "property(single,'edition','{}').property(single,'version','{}')"
)
SET_INSTANCE_IS_PUBLISHED = (
    "g.V().hasId('_{}_Instance').property(single,'is_published',true)"
)
COUNT_OBSERVATIONS = "g.V().hasLabel('_{}_observation').count()"

# instance parts
ADD_INSTANCE_DIMENSIONS_PART = "g.V().hasId('_{}_Instance')"
ADD_INSTANCE_DIMENSIONS_PROPERTY_PART = ".property('dimensions', \"{}\")"

# dimension
GET_DIMENSION = "g.V('{}').id()"
DROP_DIMENSION_RELATIONSHIPS = "g.V('{}').bothE().drop().iterate();"
DROP_DIMENSION = "g.V('{}').drop()"
CREATE_DIMENSION = "g.addV('_{}_{}').property(id, '{}').property('value',\"{}\")"
CREATE_DIMENSION_TO_INSTANCE_RELATIONSHIP = (
    "g.V('_{}_Instance').as('inst')"
    ".V('{}').addE('HAS_DIMENSION').to('inst')"
)

# observation
GET_OBSERVATIONS = "g.V({}).id()"
GET_OBSERVATIONS_EDGES = "g.V({}).bothE().id()"
DROP_OBSERVATION_EDGES = "g.E({}).drop().iterate();"
DROP_OBSERVATIONS = "g.V({}).drop()"

CREATE_OBSERVATION_PART = (
    ".addV('_{}_observation').property(id, '{}').property(single, 'value', '{}')"
)
DIMENSION_LOOKUP_PART = ".V('{}').as('{}')"
ADD_OBSERVATION_EDGE_PART = ".V('{}').addE('isValueOf').to('{}')"

GET_INSTANCE_HEADER_PART = "g.V().hasId('_{}_Instance').values('header')"
GET_ALL_OBSERVATIONS_PART = "g.V().hasLabel('_{}_observation')"
GET_FIRST_DIMENSION_PART = "g.V().hasId({}).in('isValueOf')"
GET_ADDITIONAL_DIMENSIONS_PART = (
    ".where(out('isValueOf').hasId({}).fold().count(local).is({}))"
)
GET_OBSERVATION_VALUES_PART = ".values('value')"
LIMIT_PART = ".limit({})"