"""Settings read from the environment (.env is loaded by the CLI) and registry construction."""

import os
from typing import Literal, Optional
from pydantic import BaseModel, Field

from chainpress.registry.base import Registry

RegistryBackend = Literal["memory", "nexus", "neo4j"]


class Settings(BaseModel):
    """Runtime configuration."""

    registry: RegistryBackend = Field(default="memory", description="Registry backend to use")
    nexus_api_url: str = Field(default="http://localhost:8080", description="Nexus node API URL")
    nexus_session: Optional[str] = Field(default=None, description="Nexus login session")
    nexus_pin: Optional[str] = Field(default=None, description="PIN authorising asset creation")
    nexus_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    neo4j_uri: str = Field(default="bolt://localhost:7687")
    neo4j_user: str = Field(default="neo4j")
    neo4j_password: Optional[str] = Field(default=None)
    neo4j_database: str = Field(default="neo4j")
    log_level: str = Field(default="INFO")


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    return Settings(
        registry=os.getenv("CHAINPRESS_REGISTRY", "memory").strip().lower(),
        nexus_api_url=os.getenv("NEXUS_API_URL", "http://localhost:8080"),
        nexus_session=os.getenv("NEXUS_SESSION") or None,
        nexus_pin=os.getenv("NEXUS_PIN") or None,
        nexus_timeout=os.getenv("NEXUS_TIMEOUT", "30"),
        neo4j_uri=os.getenv("NEO4J_URI", "bolt://localhost:7687"),
        neo4j_user=os.getenv("NEO4J_USER", "neo4j"),
        neo4j_password=os.getenv("NEO4J_PASSWORD") or None,
        neo4j_database=os.getenv("NEO4J_DATABASE", "neo4j"),
        log_level=os.getenv("CHAINPRESS_LOG_LEVEL", "INFO").upper(),
    )


def create_registry(settings: Settings) -> Registry:
    """
    Create the registry backend named by ``settings.registry``.

    Raises:
        ValueError: If a required credential for the backend is missing.
    """
    if settings.registry == "nexus":
        from chainpress.registry.nexus_registry import NexusRegistry
        return NexusRegistry(
            base_url=settings.nexus_api_url,
            session_id=settings.nexus_session,
            pin=settings.nexus_pin,
            timeout=settings.nexus_timeout,
        )
    if settings.registry == "neo4j":
        if not settings.neo4j_password:
            raise ValueError("NEO4J_PASSWORD must be set to use the neo4j registry.")
        from chainpress.registry.neo4j_registry import Neo4jRegistry
        return Neo4jRegistry(
            uri=settings.neo4j_uri,
            user=settings.neo4j_user,
            password=settings.neo4j_password,
            database=settings.neo4j_database,
        )
    from chainpress.registry.memory_registry import InMemoryRegistry
    return InMemoryRegistry()
