import os
import sys
from typing import Any

import pytest

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from graph_sink.graph.base import NodeRef, RelationshipRef  # noqa: E402


class InMemoryGraph:
    """GraphHandle fake holding nodes, relationships and index entries in dicts."""

    def __init__(self):
        self.nodes: dict[int, dict[str, Any]] = {}
        self.relationships: dict[int, dict[str, Any]] = {}
        self.index_entries: dict[str, list[tuple[str, Any, int]]] = {}
        self.initialized = False
        self.closed = False
        self._next_id = 0

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def initialize(self) -> None:
        self.initialized = True

    async def close(self) -> None:
        self.closed = True

    async def create_node(self) -> NodeRef:
        node_id = self._new_id()
        self.nodes[node_id] = {}
        return NodeRef(node_id)

    async def set_property(self, entity, key: str, value: Any) -> None:
        if isinstance(entity, RelationshipRef):
            self.relationships[entity.id]["properties"][key] = value
        else:
            self.nodes[entity.id][key] = value

    async def add_to_index(self, index_name: str, node: NodeRef, key: str, value: Any) -> None:
        self.index_entries.setdefault(index_name, []).append((key, value, node.id))

    async def lookup_index(self, index_name: str, key: str, value: Any) -> list[NodeRef]:
        return [
            NodeRef(node_id)
            for k, v, node_id in self.index_entries.get(index_name, [])
            if k == key and v == value
        ]

    async def create_relationship(self, start: NodeRef, end: NodeRef, rel_type: str) -> RelationshipRef:
        rel_id = self._new_id()
        self.relationships[rel_id] = {"start": start.id, "end": end.id, "type": rel_type, "properties": {}}
        return RelationshipRef(rel_id, rel_type)

    def relationships_from(self, node: NodeRef) -> list[dict[str, Any]]:
        return [r for r in self.relationships.values() if r["start"] == node.id]


@pytest.fixture
def graph():
    """In-memory graph handle."""
    return InMemoryGraph()
