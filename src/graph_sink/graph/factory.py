"""
Factory for creating the FalkorDB graph client from settings.
"""

import logging

from ..config import FalkorDBSettings, settings
from .client import GraphClient

logger = logging.getLogger(__name__)


def create_graph_client(config: FalkorDBSettings | None = None, ensure_indexes: bool | None = None) -> GraphClient:
    """
    Build an uninitialized GraphClient.

    Args:
        config: Connection settings (defaults to ``settings.falkordb``)
        ensure_indexes: Override ``settings.sink.ensure_indexes``

    Returns:
        GraphClient; call ``initialize()`` (or hand it to a GraphSink) before use.
    """
    config = config or settings.falkordb
    if ensure_indexes is None:
        ensure_indexes = settings.sink.ensure_indexes

    password = config.password.get_secret_value() if config.password else None

    client = GraphClient(
        host=config.host,
        port=config.port,
        password=password,
        graph_name=config.graph_name,
        max_connections=config.max_connections,
        ensure_indexes=ensure_indexes,
    )
    logger.debug(f"Graph client created for {config.host}:{config.port}/{config.graph_name}")
    return client
