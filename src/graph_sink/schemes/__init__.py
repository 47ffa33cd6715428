"""Record-to-graph mapping schemes."""

from .base import Record, Scheme
from .node import NodeScheme
from .relationship import RelationshipScheme

__all__ = ["NodeScheme", "Record", "RelationshipScheme", "Scheme"]
