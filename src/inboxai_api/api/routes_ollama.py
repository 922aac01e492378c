"""
Inference gateway routes.

- GET /ollama/health: liveness of the Ollama backend
- POST /ollama/test: summarize + classify round trip for manual testing
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from inboxai_api.api.dependencies import (
    cancel_on_disconnect,
    get_email_operations,
    get_llm_client,
)
from inboxai_api.api.exceptions import InvalidInputError
from inboxai_api.api.models import (
    ErrorResponse,
    OllamaHealthResponse,
    OllamaTestRequest,
    OllamaTestResponse,
    OllamaUnhealthyResponse,
)
from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.llm.email_operations import EmailOperations
from inboxai_api.llm.exceptions import LLMClientError

logger = structlog.get_logger(__name__)

SAMPLE_TEXT = "Hello, this is a test message for AI processing."

router = APIRouter(prefix="/ollama")

# A JSON null body decodes to an empty request
_test_request_adapter = TypeAdapter(Optional[OllamaTestRequest])


@router.get(
    "/health",
    response_model=OllamaHealthResponse,
    summary="Inference backend health",
    responses={
        200: {"description": "Ollama answered the probe"},
        503: {"model": OllamaUnhealthyResponse, "description": "Ollama unreachable or failing"},
    },
)
async def ollama_health(
    request: Request,
    llm_client: BaseLLMClient = Depends(get_llm_client),
):
    """
    Probe the inference backend.
    
    Only checks that the server answers; a specific model may still be missing.
    """
    try:
        await cancel_on_disconnect(request, llm_client.ensure_healthy())
    except LLMClientError as e:
        logger.warning("Ollama unhealthy", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=OllamaUnhealthyResponse(status="unhealthy", error=e.message).model_dump(),
        )
    
    return OllamaHealthResponse(status="healthy", service="ollama")


@router.post(
    "/test",
    response_model=OllamaTestResponse,
    summary="Summarize and classify a text",
    responses={
        200: {"description": "Both stages succeeded"},
        400: {"model": ErrorResponse, "description": "Body is not valid JSON"},
        500: {"model": ErrorResponse, "description": "Summarization or classification failed"},
    },
)
async def ollama_test(
    request: Request,
    operations: EmailOperations = Depends(get_email_operations),
):
    """
    Run summarize then classify on the given text, sequentially.
    
    The body is decoded by hand so a malformed body is a 400 and never
    reaches the backend.
    """
    body = await request.body()
    try:
        payload = _test_request_adapter.validate_json(body)
    except ValidationError as e:
        raise InvalidInputError(
            "Invalid JSON body",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e
    if payload is None:
        payload = OllamaTestRequest()
    
    text = payload.text or SAMPLE_TEXT
    
    try:
        summary = await cancel_on_disconnect(request, operations.summarize(text))
    except LLMClientError as e:
        logger.error("Summarization failed", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"Summarization failed: {e.message}"},
        )
    
    try:
        category = await cancel_on_disconnect(request, operations.classify(text))
    except LLMClientError as e:
        logger.error("Classification failed", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"Classification failed: {e.message}"},
        )
    
    return OllamaTestResponse(
        input_text=text,
        summary=summary,
        category=category,
        model=operations.model,
    )
