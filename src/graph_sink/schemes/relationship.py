"""
Relationship scheme: one record becomes one relationship between two
existing nodes.

Declared fields are positional:

    fields[0]   key of the start node, looked up in ``from_index``
    fields[1]   key of the end node, looked up in ``to_index``
    fields[2]   relationship type (used verbatim, case-sensitive)
    fields[3:]  relationship properties, named after the field

Both endpoints are resolved before anything is written, so a resolution
failure leaves no partial relationship behind.
"""

import logging
from collections.abc import Iterable
from typing import Any

from ..errors import AmbiguousNodeError, ConfigurationError, MissingFieldError, NodeNotFoundError
from ..graph.base import GraphHandle, NodeRef, RelationshipRef
from ..index_spec import IndexSpec
from .base import Record, normalize_fields, require_fields

logger = logging.getLogger(__name__)

MIN_FIELDS = 3


class RelationshipScheme:
    """Maps each record to a typed relationship between two indexed nodes."""

    def __init__(self, fields: Iterable[str], from_index: IndexSpec, to_index: IndexSpec):
        names = normalize_fields(fields)
        if len(names) < MIN_FIELDS:
            raise ConfigurationError(
                "Not enough fields to draw a relationship: need from, to and relationship type at minimum, "
                f"got {list(names)}"
            )
        if not isinstance(from_index, IndexSpec) or not isinstance(to_index, IndexSpec):
            raise ConfigurationError("Relationship scheme needs an IndexSpec for both endpoints")

        self._fields = names
        self._from_index = from_index
        self._to_index = to_index

    @property
    def fields(self) -> tuple[str, ...]:
        return self._fields

    @property
    def from_field(self) -> str:
        return self._fields[0]

    @property
    def to_field(self) -> str:
        return self._fields[1]

    @property
    def type_field(self) -> str:
        return self._fields[2]

    @property
    def property_fields(self) -> tuple[str, ...]:
        """Trailing fields copied onto the relationship as properties."""
        return self._fields[MIN_FIELDS:]

    @property
    def from_index(self) -> IndexSpec:
        return self._from_index

    @property
    def to_index(self) -> IndexSpec:
        return self._to_index

    async def sink(self, record: Record, graph: GraphHandle) -> RelationshipRef:
        """
        Resolve both endpoints and create the relationship.

        Raises:
            MissingFieldError: A declared field is absent, or the type is empty.
            NodeNotFoundError: An endpoint key has no match in its index.
            AmbiguousNodeError: An endpoint key has more than one match.
        """
        require_fields(record, self._fields)
        rel_type = record[self.type_field]
        if rel_type is None or str(rel_type) == "":
            raise MissingFieldError(self.type_field, list(record.keys()))
        rel_type = str(rel_type)

        start = await self._resolve(graph, self._from_index, self.from_field, record[self.from_field])
        end = await self._resolve(graph, self._to_index, self.to_field, record[self.to_field])

        relationship = await graph.create_relationship(start, end, rel_type)
        for field in self.property_fields:
            await graph.set_property(relationship, field, record[field])

        logger.debug(f"Relationship {relationship.id} ({start.id})-[:{rel_type}]->({end.id})")
        return relationship

    @staticmethod
    async def _resolve(graph: GraphHandle, index: IndexSpec, declared_field: str, value: Any) -> NodeRef:
        key = index.lookup_key(default=declared_field)
        matches = await graph.lookup_index(index.name, key, value)
        if not matches:
            raise NodeNotFoundError(index.name, key, value)
        if len(matches) > 1:
            raise AmbiguousNodeError(index.name, key, value, len(matches))
        return matches[0]

    def __repr__(self) -> str:
        return (
            f"RelationshipScheme(fields={list(self._fields)!r}, "
            f"from_index={self._from_index!r}, to_index={self._to_index!r})"
        )
