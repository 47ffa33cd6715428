"""Exceptions raised by the graph sink.

Construction-time problems raise ConfigurationError before any record is
processed. Per-record problems raise ResolutionError or MissingFieldError.
Graph database failures surface as TransportError with the driver error
chained as ``__cause__``.
"""

from typing import Any


class GraphSinkError(Exception):
    """Base class for all graph sink errors."""


class ConfigurationError(GraphSinkError, ValueError):
    """Raised when an index spec or scheme is constructed with invalid arguments."""


class MissingFieldError(GraphSinkError, KeyError):
    """Raised when a record does not carry a field the scheme needs."""

    def __init__(self, field: str, available: list[str] | None = None):
        self.field = field
        self.available = available or []
        super().__init__(field)

    def __str__(self) -> str:
        return f"Record has no field {self.field!r} (available: {', '.join(self.available) or 'none'})"


class ResolutionError(GraphSinkError):
    """Raised when a relationship endpoint cannot be resolved to exactly one node."""

    def __init__(self, index_name: str, key: str, value: Any, matches: int):
        self.index_name = index_name
        self.key = key
        self.value = value
        self.matches = matches
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"Expected one node in index {self.index_name!r} for {self.key}={self.value!r}, found {self.matches}"


class NodeNotFoundError(ResolutionError):
    """No node in the index matched the endpoint key."""

    def __init__(self, index_name: str, key: str, value: Any):
        super().__init__(index_name, key, value, 0)


class AmbiguousNodeError(ResolutionError):
    """More than one node in the index matched the endpoint key."""


class TransportError(GraphSinkError):
    """Raised when a call to the graph database fails."""
