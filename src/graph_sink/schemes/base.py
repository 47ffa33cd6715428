"""Shared types for record-to-graph schemes."""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from ..errors import ConfigurationError, MissingFieldError
from ..graph.base import GraphHandle, NodeRef, RelationshipRef

Record = Mapping[str, Any]
"""One pipeline record: field name -> scalar value, in field order."""


@runtime_checkable
class Scheme(Protocol):
    """A mapping strategy from one record to graph writes."""

    async def sink(self, record: Record, graph: GraphHandle) -> NodeRef | RelationshipRef: ...


def normalize_fields(fields: Iterable[str] | str) -> tuple[str, ...]:
    """Validate declared field names and return them as an ordered tuple."""
    if isinstance(fields, str):
        fields = (fields,)
    if fields is None:
        raise ConfigurationError("Fields must be given")

    names = tuple(fields)
    for name in names:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Field names must be non-empty strings, got {name!r}")

    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate field names: {', '.join(duplicates)}")
    return names


def require_fields(record: Record, fields: Iterable[str]) -> None:
    """Raise MissingFieldError for the first of ``fields`` absent from ``record``."""
    for field in fields:
        if field not in record:
            raise MissingFieldError(field, list(record.keys()))
