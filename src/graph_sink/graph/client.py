"""
FalkorDB graph client for the graph sink.

Implements the GraphHandle capability surface (create node, set property,
add to index, look up index, create relationship) on top of an async
FalkorDB connection pool. Each call is a single Cypher statement; there is
no batching, retry or caching at this layer.

Driver failures (FalkorDB speaks the Redis protocol, so every failure is a
``redis.exceptions.RedisError``) are re-raised as TransportError.
"""

import logging
from typing import Any

from falkordb.asyncio import FalkorDB
from redis.asyncio import BlockingConnectionPool
from redis.exceptions import RedisError

from ..errors import TransportError
from . import schema
from .base import EntityRef, NodeRef, RelationshipRef
from .schema import index_label, quote_identifier

logger = logging.getLogger(__name__)


class GraphClient:
    """
    Async FalkorDB client implementing GraphHandle.

    One client owns one connection pool and one selected graph. Sink
    workers that run in parallel each get their own client.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        graph_name: str = "graph_sink",
        max_connections: int = 16,
        ensure_indexes: bool = True,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.graph_name = graph_name
        self.max_connections = max_connections
        self.ensure_indexes = ensure_indexes

        self._pool: BlockingConnectionPool | None = None
        self._db: FalkorDB | None = None
        self._graph = None
        self._initialized = False
        self._indexed: set[tuple[str, str]] = set()

    async def initialize(self) -> None:
        """Initialize connection pool and select graph."""
        if self._initialized:
            return

        self._pool = BlockingConnectionPool(
            host=self.host,
            port=self.port,
            password=self.password,
            max_connections=self.max_connections,
            timeout=None,
            decode_responses=True,
        )

        self._db = FalkorDB(connection_pool=self._pool)
        self._graph = self._db.select_graph(self.graph_name)

        self._initialized = True
        logger.info(f"GraphClient initialized: {self.host}:{self.port}/{self.graph_name}")

    @property
    def graph(self):
        """Expose graph for direct query access."""
        if self._graph is None:
            raise RuntimeError("GraphClient not initialized. Call initialize() first.")
        return self._graph

    async def _query(self, query: str, params: dict[str, Any] | None = None):
        try:
            return await self.graph.query(query, params=params)
        except RedisError as e:
            raise TransportError(f"Graph query failed on {self.graph_name!r}: {e}") from e

    # ── Node and relationship writes ────────────────────────────────────

    async def create_node(self) -> NodeRef:
        """Create an unlabeled node with no properties."""
        result = await self._query(schema.CREATE_NODE)
        return NodeRef(int(result.result_set[0][0]))

    async def create_relationship(self, start: NodeRef, end: NodeRef, rel_type: str) -> RelationshipRef:
        """
        Create a relationship of type ``rel_type`` from ``start`` to ``end``.

        The type is used verbatim (case-sensitive). Raises TransportError if
        either node no longer exists, since nothing is created in that case.
        """
        result = await self._query(
            schema.CREATE_RELATIONSHIP.format(rel_type=quote_identifier(rel_type)),
            params={"start": start.id, "end": end.id},
        )
        if not result.result_set:
            raise TransportError(f"Relationship {rel_type!r} not created: node {start.id} or {end.id} is missing")
        return RelationshipRef(int(result.result_set[0][0]), rel_type)

    async def set_property(self, entity: EntityRef, key: str, value: Any) -> None:
        """
        Set a single property on a node or relationship.

        FalkorDB stores no nulls: a ``None`` value removes the property, so
        a record field holding ``None`` leaves no property behind.
        """
        template = schema.SET_RELATIONSHIP_PROPERTY if isinstance(entity, RelationshipRef) else schema.SET_NODE_PROPERTY
        await self._query(template.format(key=quote_identifier(key)), params={"id": entity.id, "value": value})

    # ── Index operations ────────────────────────────────────────────────

    async def ensure_index(self, index_name: str, key: str) -> None:
        """Create the secondary index backing ``index_name``/``key`` once per client."""
        if (index_name, key) in self._indexed:
            return
        try:
            await self.graph.query(schema.index_statement(index_name, key))
        except RedisError as e:
            # Index already exists is not an error
            if "already indexed" not in str(e).lower():
                raise TransportError(f"Failed to create index {index_name}.{key}: {e}") from e
        self._indexed.add((index_name, key))
        logger.debug(f"Index ensured: {index_name}.{key}")

    async def add_to_index(self, index_name: str, node: NodeRef, key: str, value: Any) -> None:
        """Make ``node`` discoverable via ``lookup_index(index_name, key, value)``."""
        if self.ensure_indexes:
            await self.ensure_index(index_name, key)
        await self._query(
            schema.ADD_TO_INDEX.format(label=quote_identifier(index_label(index_name, key)), key=quote_identifier(key)),
            params={"id": node.id, "value": value},
        )

    async def lookup_index(self, index_name: str, key: str, value: Any) -> list[NodeRef]:
        """
        Return every node added to ``index_name`` under ``key`` with ``value``, oldest first.

        Nodes that merely carry a ``key`` property, without having been added
        to the index under that key, are not returned.
        """
        result = await self._query(
            schema.LOOKUP_INDEX.format(label=quote_identifier(index_label(index_name, key)), key=quote_identifier(key)),
            params={"value": value},
        )
        return [NodeRef(int(row[0])) for row in result.result_set]

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            try:
                await self._pool.aclose()
                logger.info("GraphClient connection pool closed")
            except RedisError as e:
                logger.warning(f"Error closing GraphClient pool: {e}")
            finally:
                self._pool = None
                self._db = None
                self._graph = None
                self._initialized = False
                self._indexed.clear()
