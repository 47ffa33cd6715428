"""
GraphSink: the boundary between a record pipeline and the graph database.

The sink holds one graph handle (injected, never a process-wide singleton)
and one scheme. Each record is delivered through ``write`` and mapped by
the scheme into graph writes; there is at most one record in flight per
sink. Parallel pipelines run one sink, with its own handle, per worker.

Failure policy:
    fail_fast  per-record errors (ResolutionError, MissingFieldError) raise
    collect    per-record errors are recorded in the SinkReport and logged

TransportError and ConfigurationError always propagate.
"""

import logging
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass, field
from typing import Any

from .config import FailurePolicy
from .errors import ConfigurationError, MissingFieldError, ResolutionError
from .graph.base import GraphHandle, NodeRef, RelationshipRef
from .schemes.base import Record, Scheme

logger = logging.getLogger(__name__)

_RECORD_ERRORS = (ResolutionError, MissingFieldError)
_FAILURE_POLICIES = frozenset({"fail_fast", "collect"})


@dataclass
class SinkResult:
    """Outcome of writing one record."""

    index: int
    ok: bool
    entity: NodeRef | RelationshipRef | None = None
    error: Exception | None = None


@dataclass
class SinkReport:
    """Per-record outcomes of a ``write_all`` call."""

    results: list[SinkResult] = field(default_factory=list)

    @property
    def written(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failures(self) -> list[SinkResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)


class GraphSink:
    """
    Writes pipeline records into a graph through a scheme.

    Usage::

        async with GraphSink(create_graph_client(), NodeScheme(IndexSpec("users", ["name"]))) as sink:
            report = await sink.write_all(read_delimited("users.csv", ["name", "nationality"]))
    """

    def __init__(
        self,
        graph: GraphHandle,
        scheme: Scheme | None = None,
        failure_policy: FailurePolicy = "fail_fast",
        owns_graph: bool = True,
        log_every: int = 1000,
    ):
        """
        Args:
            graph: Graph handle the sink writes through
            scheme: NodeScheme or RelationshipScheme (may be set later via configure)
            failure_policy: "fail_fast" or "collect"
            owns_graph: Close the handle when the sink is closed
            log_every: Log progress every N records
        """
        if failure_policy not in _FAILURE_POLICIES:
            raise ConfigurationError(f"Invalid failure policy: {failure_policy!r}. Must be one of: {', '.join(sorted(_FAILURE_POLICIES))}")
        if log_every < 1:
            raise ConfigurationError("log_every must be at least 1")

        self._graph = graph
        self._scheme: Scheme | None = None
        self._failure_policy = failure_policy
        self._owns_graph = owns_graph
        self._log_every = log_every
        self._opened = False
        self._stats = {"records": 0, "written": 0, "failed": 0, "nodes_created": 0, "relationships_created": 0}

        if scheme is not None:
            self.configure(scheme)

    @property
    def scheme(self) -> Scheme | None:
        return self._scheme

    @property
    def graph(self) -> GraphHandle:
        return self._graph

    def configure(self, scheme: Scheme) -> None:
        """Select the scheme records are mapped with."""
        if not isinstance(scheme, Scheme):
            raise ConfigurationError(f"Not a scheme: {scheme!r}")
        self._scheme = scheme
        logger.debug(f"GraphSink configured with {scheme!r}")

    # ── Lifecycle ───────────────────────────────────────────────────────

    async def open(self) -> None:
        """Initialize the graph handle if it needs it."""
        if self._opened:
            return
        initialize = getattr(self._graph, "initialize", None)
        if initialize is not None:
            await initialize()
        self._opened = True

    async def close(self) -> None:
        """Log a summary and close the graph handle when the sink owns it."""
        if self._stats["records"]:
            logger.info(
                f"GraphSink closed: {self._stats['written']} written, {self._stats['failed']} failed "
                f"of {self._stats['records']} records"
            )
        if self._owns_graph:
            close = getattr(self._graph, "close", None)
            if close is not None:
                await close()
        self._opened = False

    async def __aenter__(self) -> "GraphSink":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ── Writes ──────────────────────────────────────────────────────────

    async def write(self, record: Record) -> NodeRef | RelationshipRef:
        """
        Map one record into the graph.

        Errors always propagate; ``write_all`` applies the failure policy.
        """
        if self._scheme is None:
            raise ConfigurationError("GraphSink has no scheme; call configure() first")

        self._stats["records"] += 1
        try:
            entity = await self._scheme.sink(record, self._graph)
        except Exception:
            self._stats["failed"] += 1
            raise

        self._stats["written"] += 1
        if isinstance(entity, RelationshipRef):
            self._stats["relationships_created"] += 1
        else:
            self._stats["nodes_created"] += 1

        if self._stats["records"] % self._log_every == 0:
            logger.info(f"GraphSink progress: {self._stats['records']} records ({self._stats['failed']} failed)")
        return entity

    async def sink(self, record: Record) -> SinkResult:
        """
        Write one record and report success or failure.

        Under "collect", a per-record error (ResolutionError, MissingFieldError)
        comes back as a failed SinkResult. Under "fail_fast" it is raised
        instead, and no SinkResult is returned for that record.
        """
        return await self._write_one(self._stats["records"], record)

    async def write_all(self, records: Iterable[Record] | AsyncIterable[Record]) -> SinkReport:
        """
        Write records one at a time, in order.

        Under the "collect" policy, per-record errors raised by the scheme are
        kept in the report against the record's position; other errors still
        raise. Errors raised by ``records`` itself (for example a short line
        from ``read_delimited``) always abort the run, whatever the policy,
        because the source cannot be resumed past them.
        """
        report = SinkReport()
        index = 0
        if isinstance(records, AsyncIterable):
            async for record in records:
                report.results.append(await self._write_one(index, record))
                index += 1
        else:
            for record in records:
                report.results.append(await self._write_one(index, record))
                index += 1
        return report

    async def _write_one(self, index: int, record: Record) -> SinkResult:
        try:
            entity = await self.write(record)
        except _RECORD_ERRORS as e:
            if self._failure_policy == "fail_fast":
                raise
            logger.warning(f"Record {index} not written: {e}")
            return SinkResult(index=index, ok=False, error=e)
        return SinkResult(index=index, ok=True, entity=entity)

    def get_stats(self) -> dict[str, Any]:
        """Get sink statistics."""
        return {
            "scheme": type(self._scheme).__name__ if self._scheme is not None else None,
            "failure_policy": self._failure_policy,
            **self._stats,
        }
