"""Integration test fixtures.

These tests run the real uvicorn server on a loopback port. Only the Ollama
server is faked; the database is disabled.
"""

import httpx
import pytest

from inboxai_api.config import Settings
from tests.fixtures import FakeOllamaBackend


@pytest.fixture
def shell_settings() -> Settings:
    """Settings for a server bound to an ephemeral loopback port."""
    return Settings(
        HOST="127.0.0.1",
        PORT=0,
        SHUTDOWN_TIMEOUT=5,
        OLLAMA_BASE_URL="http://ollama.test:11434",
        DB_ENABLED=False,
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def backend() -> FakeOllamaBackend:
    fake = FakeOllamaBackend()
    fake.on("GET", "/api/tags", httpx.Response(200, json={"models": []}))
    return fake
