"""
Capability surface the schemes need from a graph database.

Schemes only ever talk to a GraphHandle; GraphClient (FalkorDB) is the
production implementation. Entity references are opaque ids and are never
retained by the schemes across records.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class NodeRef:
    """Reference to a node by its database id."""

    id: int


@dataclass(frozen=True)
class RelationshipRef:
    """Reference to a relationship by its database id."""

    id: int
    type: str


EntityRef = NodeRef | RelationshipRef


@runtime_checkable
class GraphHandle(Protocol):
    """Protocol for graph databases the schemes can write into."""

    async def create_node(self) -> NodeRef: ...

    async def set_property(self, entity: EntityRef, key: str, value: Any) -> None: ...

    async def add_to_index(self, index_name: str, node: NodeRef, key: str, value: Any) -> None: ...

    async def lookup_index(self, index_name: str, key: str, value: Any) -> list[NodeRef]: ...

    async def create_relationship(self, start: NodeRef, end: NodeRef, rel_type: str) -> RelationshipRef: ...
