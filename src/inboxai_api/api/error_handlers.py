"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Every error body carries a
human-readable ``error`` string. Unexpected exceptions are answered by
AccessLogMiddleware so the 500 still carries CORS headers.
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from inboxai_api.api.exceptions import ClientDisconnectedError, InvalidInputError
from inboxai_api.llm.exceptions import LLMClientError

logger = structlog.get_logger(__name__)

# Non-standard status used by nginx for "client closed request"
HTTP_499_CLIENT_CLOSED_REQUEST = 499


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    """
    Handle malformed request bodies.
    
    Maps to 400 Bad Request.
    """
    logger.warning("Invalid request body", path=request.url.path, details=exc.details)
    
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


async def llm_client_error_handler(request: Request, exc: LLMClientError) -> JSONResponse:
    """
    Handle inference failures that a route did not map itself.
    
    Maps to 500 Internal Server Error with the client's diagnostic message.
    """
    logger.error(
        "LLM call failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
        details=exc.details,
    )
    
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message},
    )


async def client_disconnected_handler(request: Request, exc: ClientDisconnectedError) -> JSONResponse:
    """
    Handle requests abandoned by the client.
    
    Nobody is left to read the response; 499 only shows up in the access log.
    """
    logger.info("Request abandoned by client", path=request.url.path)
    
    return JSONResponse(
        status_code=HTTP_499_CLIENT_CLOSED_REQUEST,
        content={"error": str(exc)},
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    InvalidInputError: invalid_input_handler,
    LLMClientError: llm_client_error_handler,
    ClientDisconnectedError: client_disconnected_handler,
}
