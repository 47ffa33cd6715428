"""
Node scheme: one record becomes one node.

Every field of the record is copied onto the new node as a property with
the same name. When an index spec with fields is configured, the node is
then added to that index under each indexed field, keyed by its own value.
"""

import logging

from ..graph.base import GraphHandle, NodeRef
from ..index_spec import IndexSpec
from .base import Record, require_fields

logger = logging.getLogger(__name__)


class NodeScheme:
    """Maps each record to a newly created (and optionally indexed) node."""

    def __init__(self, index_spec: IndexSpec | None = None):
        self._index_spec = index_spec

    @property
    def index_spec(self) -> IndexSpec | None:
        return self._index_spec

    async def sink(self, record: Record, graph: GraphHandle) -> NodeRef:
        """
        Create a node for ``record`` and index it.

        No uniqueness is enforced: sinking the same record twice creates two
        nodes, both of which are found by a later index lookup.

        Raises:
            MissingFieldError: An indexed field is absent from the record
                (checked before anything is written).
        """
        indexed = self._index_spec.fields if self._index_spec is not None else ()
        require_fields(record, indexed)

        node = await graph.create_node()
        for key, value in record.items():
            await graph.set_property(node, key, value)

        for field in indexed:
            await graph.add_to_index(self._index_spec.name, node, field, record[field])

        if indexed:
            logger.debug(f"Node {node.id} added to index {self._index_spec.name!r} on {', '.join(indexed)}")
        return node

    def __repr__(self) -> str:
        return f"NodeScheme(index_spec={self._index_spec!r})"
