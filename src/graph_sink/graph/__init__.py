"""
Graph database layer for the graph sink.

GraphHandle is the capability surface schemes write through; GraphClient
is its FalkorDB implementation.
"""

from .base import GraphHandle, NodeRef, RelationshipRef
from .client import GraphClient
from .factory import create_graph_client

__all__ = [
    "GraphClient",
    "GraphHandle",
    "NodeRef",
    "RelationshipRef",
    "create_graph_client",
]
