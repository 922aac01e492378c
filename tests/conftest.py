"""Shared test fixtures and configuration for all tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from inboxai_api.config import Settings
from inboxai_api.llm.ollama_client import OllamaClient
from inboxai_api.main import create_app
from tests.fixtures import FakeOllamaBackend


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        APP_NAME="InboxAI API (Test)",
        ENVIRONMENT="development",
        LOG_LEVEL="DEBUG",
        OLLAMA_BASE_URL="http://ollama.test:11434",
        OLLAMA_MODEL="mistral:7b-instruct",
        OLLAMA_TIMEOUT=60,
        OLLAMA_MAX_RETRIES=1,
        DB_ENABLED=False,  # No Postgres in unit tests
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def backend() -> FakeOllamaBackend:
    """Fake Ollama server with a healthy /api/tags and no other routes."""
    fake = FakeOllamaBackend()
    fake.on("GET", "/api/tags", httpx.Response(200, json={"models": [{"name": "mistral:7b-instruct"}]}))
    return fake


@pytest.fixture
def ollama_client(backend: FakeOllamaBackend) -> OllamaClient:
    """OllamaClient wired to the fake backend."""
    return OllamaClient(base_url="http://ollama.test:11434", transport=backend.transport)


@pytest.fixture
def app(test_settings: Settings, ollama_client: OllamaClient):
    """Application with the fake backend injected."""
    return create_app(settings=test_settings, llm_client=ollama_client)


@pytest.fixture
def client(app) -> TestClient:
    """TestClient for the application (lifespan not run)."""
    return TestClient(app)
