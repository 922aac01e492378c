"""
Unit tests for environment-driven settings.
"""

from inboxai_api.config import Settings, get_settings


def test_defaults():
    settings = Settings()

    assert settings.PORT == 3001
    assert settings.OLLAMA_BASE_URL == "http://localhost:11434"
    assert settings.OLLAMA_MODEL == "mistral:7b-instruct"
    assert settings.OLLAMA_TIMEOUT == 60
    assert settings.SHUTDOWN_TIMEOUT == 10
    assert settings.CORS_ALLOW_ORIGIN == "http://localhost:3000"


def test_write_timeout_covers_inference_timeout():
    settings = Settings()

    assert settings.WRITE_TIMEOUT > settings.OLLAMA_TIMEOUT
    assert settings.IDLE_TIMEOUT > settings.WRITE_TIMEOUT


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")
    monkeypatch.setenv("db_enabled", "false")

    settings = Settings()

    assert settings.PORT == 8080
    assert settings.OLLAMA_BASE_URL == "http://gpu-box:11434"
    assert settings.DB_ENABLED is False


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
