"""
Configuration for the graph sink.

Settings are read from environment variables via pydantic-settings:

    GRAPH_SINK_FALKORDB_*   connection to the FalkorDB graph
    GRAPH_SINK_*            sink behaviour (failure policy, progress logging)

Nothing in the package reads ``settings`` implicitly except
``graph.factory.create_graph_client`` when no config is passed; sinks get
their graph handle and failure policy injected.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

FailurePolicy = Literal["fail_fast", "collect"]


class FalkorDBSettings(BaseSettings):
    """Connection settings for the FalkorDB graph the sink writes into."""

    model_config = SettingsConfigDict(env_prefix="GRAPH_SINK_FALKORDB_", extra="ignore")

    host: str = Field(default="localhost", description="FalkorDB host")
    port: int = Field(default=6379, ge=1, le=65535)
    password: SecretStr | None = Field(default=None, description="FalkorDB password")
    graph_name: str = Field(default="graph_sink", min_length=1)
    max_connections: int = Field(default=16, ge=1, le=256)


class SinkSettings(BaseSettings):
    """Behaviour of the GraphSink adapter."""

    model_config = SettingsConfigDict(env_prefix="GRAPH_SINK_", extra="ignore")

    # fail_fast raises the first per-record error; collect records it and moves on
    failure_policy: FailurePolicy = Field(default="fail_fast")
    log_every: int = Field(default=1000, ge=1, description="Log progress every N records")
    ensure_indexes: bool = Field(default=True, description="Create FalkorDB indexes for index specs on first use")


class Settings(BaseSettings):
    """Top-level settings aggregating all sections."""

    model_config = SettingsConfigDict(extra="ignore")

    falkordb: FalkorDBSettings = Field(default_factory=FalkorDBSettings)
    sink: SinkSettings = Field(default_factory=SinkSettings)


settings = Settings()
