"""Pytest configuration and fixtures."""

import os
import pytest
from dotenv import load_dotenv

from chainpress.models.article import ArticleMetadata
from chainpress.publisher import ArticlePublisher
from chainpress.registry.memory_registry import InMemoryRegistry

# Load environment variables
load_dotenv()


@pytest.fixture
def registry():
    """Fresh in-memory registry."""
    return InMemoryRegistry()


@pytest.fixture
def publisher(registry):
    """Publisher without a confirmation prompt."""
    return ArticlePublisher(registry)


@pytest.fixture
def metadata():
    return ArticleMetadata(title="On Linked Records", abstract="Storing long text in small records", tags="storage")


@pytest.fixture(scope="session")
def neo4j_config():
    """Neo4j configuration from environment variables."""
    password = os.getenv("NEO4J_PASSWORD")
    if not password:
        pytest.skip("NEO4J_PASSWORD not set. Skipping Neo4j tests.")

    return {
        "uri": os.getenv("NEO4J_URI", "bolt://localhost:7687"),
        "user": os.getenv("NEO4J_USER", "neo4j"),
        "password": password,
        "database": os.getenv("NEO4J_DATABASE", "neo4j"),
    }


@pytest.fixture(scope="function")
def neo4j_registry(neo4j_config):
    """Neo4j registry with every Record node cleared before and after the test."""
    from chainpress.registry.neo4j_registry import Neo4jRegistry

    with Neo4jRegistry(**neo4j_config) as reg:
        with reg.driver.session(database=neo4j_config["database"]) as session:
            session.run("MATCH (r:Record) DETACH DELETE r")
        yield reg
        with reg.driver.session(database=neo4j_config["database"]) as session:
            session.run("MATCH (r:Record) DETACH DELETE r")
