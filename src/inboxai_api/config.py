"""
Configuration settings for the InboxAI API service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Application ===
    APP_NAME: str = "InboxAI API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # === HTTP listener ===
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    READ_TIMEOUT: int = 15  # seconds
    WRITE_TIMEOUT: int = 300  # must exceed OLLAMA_TIMEOUT
    IDLE_TIMEOUT: int = 360  # slightly longer than write timeout
    SHUTDOWN_TIMEOUT: int = 10
    
    # === CORS ===
    CORS_ALLOW_ORIGIN: str = "http://localhost:3000"
    CORS_ALLOW_HEADERS: str = "Content-Type, Authorization"
    CORS_ALLOW_METHODS: str = "GET, POST, PUT, DELETE, OPTIONS"
    
    # === Ollama Configuration ===
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "mistral:7b-instruct"
    OLLAMA_TIMEOUT: int = 60  # seconds
    OLLAMA_MAX_RETRIES: int = 1  # 1 = single attempt, no retry
    
    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.7
    LLM_TOP_P: float = 0.9
    LLM_MAX_TOKENS: int = 500
    
    # === Database ===
    DB_ENABLED: bool = True
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "inboxai"
    DB_SSLMODE: str = "disable"
    DB_POOL_MAX_SIZE: int = 10
    DB_POOL_MIN_SIZE: int = 2
    DB_POOL_RECYCLE: int = 3600  # max connection lifetime, seconds
    
    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()


@lru_cache()
def get_settings() -> Settings:
    """Get settings singleton."""
    return settings
