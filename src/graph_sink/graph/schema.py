"""
Cypher helpers for the graph sink.

Index names, relationship types and property keys come from record data
and field declarations, and FalkorDB cannot parameterize labels, types or
property keys. Every such identifier is backtick-quoted before being
formatted into a query.

Index representation:
    Membership is recorded per (index, key). A node is in index ``users``
    under key ``name`` with value ``v`` when it carries the label
    ``:users:name`` (see ``index_label``) and property ``name = v``. Other
    properties of the node are not reachable through the index. A FalkorDB
    range index on ``(:users:name).name`` backs the lookup.
"""


def quote_identifier(name: str) -> str:
    """Backtick-quote a label, relationship type or property key."""
    if not isinstance(name, str) or not name:
        raise ValueError(f"Identifier must be a non-empty string, got {name!r}")
    return "`" + name.replace("`", "``") + "`"


def _escape_label_part(part: str) -> str:
    return part.replace("\\", "\\\\").replace(":", "\\:")


def index_label(index_name: str, key: str) -> str:
    """Unquoted label marking membership of ``index_name`` under ``key``."""
    if not index_name or not key:
        raise ValueError(f"Index name and key must be non-empty, got {index_name!r}, {key!r}")
    return f"{_escape_label_part(index_name)}:{_escape_label_part(key)}"


def index_statement(index_name: str, key: str) -> str:
    """Cypher statement creating the secondary index backing ``index_name``/``key``."""
    label = quote_identifier(index_label(index_name, key))
    return f"CREATE INDEX IF NOT EXISTS FOR (n:{label}) ON (n.{quote_identifier(key)})"


CREATE_NODE = "CREATE (n) RETURN ID(n)"

SET_NODE_PROPERTY = "MATCH (n) WHERE ID(n) = $id SET n.{key} = $value"

SET_RELATIONSHIP_PROPERTY = "MATCH ()-[r]->() WHERE ID(r) = $id SET r.{key} = $value"

ADD_TO_INDEX = "MATCH (n) WHERE ID(n) = $id SET n:{label}, n.{key} = $value"

LOOKUP_INDEX = "MATCH (n:{label}) WHERE n.{key} = $value RETURN ID(n) ORDER BY ID(n)"

CREATE_RELATIONSHIP = (
    "MATCH (a), (b) WHERE ID(a) = $start AND ID(b) = $end "
    "CREATE (a)-[r:{rel_type}]->(b) RETURN ID(r)"
)
