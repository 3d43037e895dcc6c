"""Tests for environment settings and registry construction."""

import pytest
from pydantic import ValidationError

from chainpress.config import load_settings, create_registry, Settings
from chainpress.registry.memory_registry import InMemoryRegistry
from chainpress.registry.nexus_registry import NexusRegistry

ENV_VARS = [
    "CHAINPRESS_REGISTRY", "NEXUS_API_URL", "NEXUS_SESSION", "NEXUS_PIN", "NEXUS_TIMEOUT",
    "NEO4J_URI", "NEO4J_USER", "NEO4J_PASSWORD", "NEO4J_DATABASE", "CHAINPRESS_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()
    assert settings.registry == "memory"
    assert settings.nexus_api_url == "http://localhost:8080"
    assert settings.nexus_timeout == 30.0
    assert settings.neo4j_password is None
    assert settings.log_level == "INFO"


def test_nexus_settings(clean_env):
    clean_env.setenv("CHAINPRESS_REGISTRY", " Nexus ")
    clean_env.setenv("NEXUS_API_URL", "http://node:9336")
    clean_env.setenv("NEXUS_PIN", "1234")
    clean_env.setenv("NEXUS_TIMEOUT", "5")
    settings = load_settings()
    registry = create_registry(settings)
    assert isinstance(registry, NexusRegistry)
    assert registry.base_url == "http://node:9336"
    assert registry.pin == "1234"
    assert registry.timeout == 5.0


def test_unknown_backend_rejected(clean_env):
    clean_env.setenv("CHAINPRESS_REGISTRY", "sqlite")
    with pytest.raises(ValidationError):
        load_settings()


def test_memory_registry_by_default():
    assert isinstance(create_registry(Settings()), InMemoryRegistry)


def test_neo4j_requires_password():
    with pytest.raises(ValueError) as exc_info:
        create_registry(Settings(registry="neo4j"))
    assert "NEO4J_PASSWORD" in str(exc_info.value)
