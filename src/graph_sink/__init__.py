"""
graph-sink: write tabular pipeline records into a graph database.

A NodeScheme maps each record to a node (optionally indexed); a
RelationshipScheme maps each record to a typed relationship between two
nodes resolved through indexes. GraphSink drives either scheme against a
graph handle, by default a FalkorDB GraphClient.
"""

from .errors import (
    AmbiguousNodeError,
    ConfigurationError,
    GraphSinkError,
    MissingFieldError,
    NodeNotFoundError,
    ResolutionError,
    TransportError,
)
from .index_spec import IndexSpec
from .schemes import NodeScheme, RelationshipScheme, Scheme
from .sink import GraphSink, SinkReport, SinkResult

__version__ = "0.1.0"

__all__ = [
    "AmbiguousNodeError",
    "ConfigurationError",
    "GraphSink",
    "GraphSinkError",
    "IndexSpec",
    "MissingFieldError",
    "NodeNotFoundError",
    "NodeScheme",
    "RelationshipScheme",
    "ResolutionError",
    "Scheme",
    "SinkReport",
    "SinkResult",
    "TransportError",
]
