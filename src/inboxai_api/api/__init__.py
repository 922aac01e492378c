"""
FastAPI API routes and endpoints.

- routes_system.py: GET /health, GET /metrics
- routes_ollama.py: GET /ollama/health, POST /ollama/test
- routes_mail.py: placeholder thread, search and chat endpoints
- dependencies.py: Dependency injection for settings, LLM client, email operations
- middleware.py: CORS and access logging
- error_handlers.py: Exception handlers for structured error responses
"""

from inboxai_api.api import dependencies, error_handlers, models
from inboxai_api.api.routes_mail import router as mail_router
from inboxai_api.api.routes_ollama import router as ollama_router
from inboxai_api.api.routes_system import metrics_router
from inboxai_api.api.routes_system import router as system_router

__all__ = [
    "system_router",
    "metrics_router",
    "ollama_router",
    "mail_router",
    "dependencies",
    "error_handlers",
    "models",
]
