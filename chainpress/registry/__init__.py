"""Registry backends: the append-only stores that hold content records."""

from .base import Registry
from .memory_registry import InMemoryRegistry
from .nexus_registry import NexusRegistry
from .neo4j_registry import Neo4jRegistry

__all__ = ["Registry", "InMemoryRegistry", "NexusRegistry", "Neo4jRegistry"]
