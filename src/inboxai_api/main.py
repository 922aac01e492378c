"""
FastAPI application factory for the InboxAI API service.

Serve with ``inboxai-api`` (see server.py) or, for development,
``uvicorn --factory inboxai_api.main:create_app``.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI

from inboxai_api.api.error_handlers import EXCEPTION_HANDLERS
from inboxai_api.api.middleware import AccessLogMiddleware, CORSMiddleware
from inboxai_api.api.routes_mail import router as mail_router
from inboxai_api.api.routes_ollama import router as ollama_router
from inboxai_api.api.routes_system import metrics_router
from inboxai_api.api.routes_system import router as system_router
from inboxai_api.config import Settings, get_settings
from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.llm.email_operations import EmailOperations
from inboxai_api.llm.ollama_client import OllamaClient
from inboxai_api.models.llm_models import SamplingOptions
from inboxai_api.persistence.database import Database

logger = structlog.get_logger(__name__)


async def probe_llm_backend(app: FastAPI) -> bool:
    """Log whether the inference backend answers; never raises."""
    settings: Settings = app.state.settings
    if await app.state.llm_client.health_check():
        logger.info("Ollama connection successful")
        return True
    logger.warning("Ollama not reachable at startup", base_url=settings.OLLAMA_BASE_URL)
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open shared resources on startup, release them on shutdown."""
    settings: Settings = app.state.settings
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        ollama_base_url=settings.OLLAMA_BASE_URL,
        model=settings.OLLAMA_MODEL,
    )

    # A database failure aborts startup
    database: Optional[Database] = app.state.database
    if database is not None:
        await database.connect()

    # Ollama is probed in the background: startup never waits on the backend
    app.state.startup_probe = asyncio.create_task(probe_llm_backend(app))

    logger.info("Application startup complete")
    try:
        yield
    finally:
        logger.info("Application shutdown")
        if not app.state.startup_probe.done():
            app.state.startup_probe.cancel()
            try:
                await app.state.startup_probe
            except asyncio.CancelledError:
                pass
        await app.state.llm_client.close()
        if database is not None:
            await database.close()
        logger.info("Application shutdown complete")


def build_llm_client(settings: Settings) -> OllamaClient:
    """Create the shared Ollama client from settings."""
    return OllamaClient(
        base_url=settings.OLLAMA_BASE_URL,
        timeout=settings.OLLAMA_TIMEOUT,
        max_retries=settings.OLLAMA_MAX_RETRIES,
        default_options=SamplingOptions(
            temperature=settings.LLM_TEMPERATURE,
            top_p=settings.LLM_TOP_P,
            num_predict=settings.LLM_MAX_TOKENS,
        ),
    )


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[BaseLLMClient] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the application with its routes, middleware and shared resources.

    Args:
        settings: Settings to use (defaults to the environment-loaded ones)
        llm_client: LLM client to share between requests (defaults to an
            OllamaClient built from settings)
        database: Connection pool to open on startup (defaults to one built
            from settings when DB_ENABLED is set)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Email intelligence API with a local LLM gateway",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.llm_client = llm_client or build_llm_client(settings)
    app.state.email_operations = EmailOperations(app.state.llm_client, model=settings.OLLAMA_MODEL)
    if database is None and settings.DB_ENABLED:
        database = Database(settings)
    app.state.database = database

    # Added last = outermost: CORS wraps the access log
    app.add_middleware(AccessLogMiddleware, request_timeout=settings.WRITE_TIMEOUT)
    app.add_middleware(
        CORSMiddleware,
        allow_origin=settings.CORS_ALLOW_ORIGIN,
        allow_headers=settings.CORS_ALLOW_HEADERS,
        allow_methods=settings.CORS_ALLOW_METHODS,
    )

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(system_router, tags=["system"])
    app.include_router(ollama_router, tags=["ollama"])
    app.include_router(mail_router, tags=["mail"])
    if settings.PROMETHEUS_ENABLED:
        app.include_router(metrics_router)

    return app
