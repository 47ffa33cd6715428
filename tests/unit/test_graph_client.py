"""
Unit tests for GraphClient.

Tests the FalkorDB graph client with mocked FalkorDB/Redis connections.
Validates the capability surface queries, index creation and error wrapping.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from graph_sink.errors import TransportError
from graph_sink.graph.base import NodeRef, RelationshipRef


def result(*rows):
    """Build a mock FalkorDB query result."""
    res = MagicMock()
    res.result_set = [list(row) for row in rows]
    return res


@pytest.fixture
def mock_graph():
    """Create a mock FalkorDB graph."""
    return AsyncMock()


@pytest.fixture
def client(mock_graph):
    """GraphClient wired to the mock graph without a real pool."""
    from graph_sink.graph.client import GraphClient

    client = GraphClient(graph_name="test_graph")
    client._graph = mock_graph
    client._initialized = True
    return client


class TestGraphClientInit:
    """Test GraphClient initialization."""

    @pytest.mark.asyncio
    @patch("graph_sink.graph.client.BlockingConnectionPool")
    @patch("graph_sink.graph.client.FalkorDB")
    async def test_initialize_creates_pool_and_selects_graph(self, mock_falkordb_cls, mock_pool_cls):
        from graph_sink.graph.client import GraphClient

        mock_pool_cls.return_value = MagicMock(aclose=AsyncMock())
        mock_db_instance = MagicMock()
        mock_db_instance.select_graph.return_value = AsyncMock()
        mock_falkordb_cls.return_value = mock_db_instance

        client = GraphClient(host="testhost", port=6380, graph_name="test_graph", max_connections=8)
        await client.initialize()

        mock_pool_cls.assert_called_once_with(
            host="testhost",
            port=6380,
            password=None,
            max_connections=8,
            timeout=None,
            decode_responses=True,
        )
        mock_db_instance.select_graph.assert_called_once_with("test_graph")

        # Idempotent: second call is no-op
        await client.initialize()
        mock_pool_cls.assert_called_once()

    def test_graph_before_initialize_raises(self):
        from graph_sink.graph.client import GraphClient

        with pytest.raises(RuntimeError, match="not initialized"):
            GraphClient().graph

    @pytest.mark.asyncio
    async def test_close_releases_pool(self, client):
        pool = MagicMock(aclose=AsyncMock())
        client._pool = pool

        await client.close()

        pool.aclose.assert_awaited_once()
        assert client._graph is None
        assert client._initialized is False


class TestGraphClientWrites:
    @pytest.mark.asyncio
    async def test_create_node(self, client, mock_graph):
        mock_graph.query.return_value = result([12])

        node = await client.create_node()

        assert node == NodeRef(12)
        assert mock_graph.query.call_args[0][0] == "CREATE (n) RETURN ID(n)"

    @pytest.mark.asyncio
    async def test_set_node_property(self, client, mock_graph):
        await client.set_property(NodeRef(3), "name", "pingles")

        query = mock_graph.query.call_args[0][0]
        assert "MATCH (n) WHERE ID(n) = $id" in query
        assert "SET n.`name` = $value" in query
        assert mock_graph.query.call_args[1]["params"] == {"id": 3, "value": "pingles"}

    @pytest.mark.asyncio
    async def test_set_relationship_property(self, client, mock_graph):
        await client.set_property(RelationshipRef(5, "NATIONALITY"), "yearsofcitizenship", "31")

        query = mock_graph.query.call_args[0][0]
        assert "MATCH ()-[r]->() WHERE ID(r) = $id" in query
        assert "SET r.`yearsofcitizenship` = $value" in query
        assert mock_graph.query.call_args[1]["params"] == {"id": 5, "value": "31"}

    @pytest.mark.asyncio
    async def test_set_property_none_passed_through(self, client, mock_graph):
        """None is sent as null, which FalkorDB treats as removing the property."""
        await client.set_property(NodeRef(3), "nickname", None)

        assert mock_graph.query.call_args[1]["params"] == {"id": 3, "value": None}

    @pytest.mark.asyncio
    async def test_create_relationship_quotes_type(self, client, mock_graph):
        mock_graph.query.return_value = result([40])

        rel = await client.create_relationship(NodeRef(1), NodeRef(2), "LIVES IN")

        assert rel == RelationshipRef(40, "LIVES IN")
        query = mock_graph.query.call_args[0][0]
        assert "CREATE (a)-[r:`LIVES IN`]->(b)" in query
        assert mock_graph.query.call_args[1]["params"] == {"start": 1, "end": 2}

    @pytest.mark.asyncio
    async def test_create_relationship_missing_endpoint(self, client, mock_graph):
        mock_graph.query.return_value = result()

        with pytest.raises(TransportError):
            await client.create_relationship(NodeRef(1), NodeRef(99), "KNOWS")


class TestGraphClientIndexes:
    @pytest.mark.asyncio
    async def test_add_to_index_labels_node_and_ensures_index(self, client, mock_graph):
        await client.add_to_index("users", NodeRef(3), "name", "pingles")

        queries = [c[0][0] for c in mock_graph.query.call_args_list]
        assert queries[0] == "CREATE INDEX IF NOT EXISTS FOR (n:`users:name`) ON (n.`name`)"
        assert "SET n:`users:name`, n.`name` = $value" in queries[1]
        assert mock_graph.query.call_args[1]["params"] == {"id": 3, "value": "pingles"}

    @pytest.mark.asyncio
    async def test_index_created_once_per_key(self, client, mock_graph):
        await client.add_to_index("users", NodeRef(1), "name", "pingles")
        await client.add_to_index("users", NodeRef(2), "name", "angrymike")
        await client.add_to_index("users", NodeRef(2), "nationality", "british")

        index_queries = [c[0][0] for c in mock_graph.query.call_args_list if c[0][0].startswith("CREATE INDEX")]
        assert len(index_queries) == 2

    @pytest.mark.asyncio
    async def test_ensure_indexes_disabled(self, client, mock_graph):
        client.ensure_indexes = False

        await client.add_to_index("users", NodeRef(1), "name", "pingles")

        assert mock_graph.query.call_count == 1

    @pytest.mark.asyncio
    async def test_existing_index_tolerated(self, client, mock_graph):
        mock_graph.query.side_effect = [ResponseError("Attribute 'name' is already indexed"), result()]

        await client.add_to_index("users", NodeRef(1), "name", "pingles")  # Should not raise

    @pytest.mark.asyncio
    async def test_lookup_index(self, client, mock_graph):
        mock_graph.query.return_value = result([1], [4])

        nodes = await client.lookup_index("users", "nationality", "british")

        assert nodes == [NodeRef(1), NodeRef(4)]
        query = mock_graph.query.call_args[0][0]
        assert "MATCH (n:`users:nationality`) WHERE n.`nationality` = $value" in query
        assert mock_graph.query.call_args[1]["params"] == {"value": "british"}

    @pytest.mark.asyncio
    async def test_lookup_filters_on_key_membership(self, client, mock_graph):
        """A node indexed on name only is not reachable through nationality."""
        mock_graph.query.return_value = result()

        await client.add_to_index("users", NodeRef(1), "name", "pingles")
        await client.lookup_index("users", "nationality", "british")

        queries = [c[0][0] for c in mock_graph.query.call_args_list]
        add_query, lookup_query = queries[1], queries[2]
        assert "n:`users:name`" in add_query
        assert "`users:nationality`" not in add_query
        assert lookup_query.startswith("MATCH (n:`users:nationality`)")

    @pytest.mark.asyncio
    async def test_lookup_index_no_match(self, client, mock_graph):
        mock_graph.query.return_value = result()

        assert await client.lookup_index("users", "name", "nobody") == []


class TestGraphClientErrors:
    @pytest.mark.asyncio
    async def test_driver_error_becomes_transport_error(self, client, mock_graph):
        cause = RedisConnectionError("connection refused")
        mock_graph.query.side_effect = cause

        with pytest.raises(TransportError) as exc_info:
            await client.create_node()

        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_index_creation_failure_raises(self, client, mock_graph):
        mock_graph.query.side_effect = ResponseError("unknown failure")

        with pytest.raises(TransportError):
            await client.add_to_index("users", NodeRef(1), "name", "pingles")
