"""
Ollama client implementation for LLM inference.

Communicates with the Ollama HTTP API using a shared httpx AsyncClient:
- POST /api/generate: non-streaming text generation
- POST /api/embeddings: embedding vector for a piece of text
- GET /api/tags: model listing, used as the liveness probe

Every call is a single attempt by default; failures are translated into
LLMClientError subclasses and handed back to the caller.
"""

import asyncio
import time
from typing import Any, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.llm.exceptions import (
    LLMConnectionError,
    LLMDecodeError,
    LLMRequestFailedError,
    LLMTimeoutError,
)
from inboxai_api.models.llm_models import (
    EmbeddingRequest,
    EmbeddingResult,
    GenerationRequest,
    GenerationResult,
    SamplingOptions,
)
from inboxai_api.monitoring.metrics import (
    llm_latency_seconds,
    llm_requests_total,
    llm_tokens_total,
)


logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"

DEFAULT_SAMPLING = SamplingOptions(temperature=0.7, top_p=0.9, num_predict=500)

GENERATE_PATH = "/api/generate"
EMBEDDINGS_PATH = "/api/embeddings"
TAGS_PATH = "/api/tags"

ResultT = TypeVar("ResultT", bound=BaseModel)


class OllamaClient(BaseLLMClient):
    """
    Ollama-specific LLM client using httpx for async HTTP communication.

    Features:
    - One pooled AsyncClient per instance, created on first use
    - Fixed timeout for every call (no per-call override)
    - Optional bounded retry with exponential backoff, for transport errors only
    - Prometheus counters for outcomes, latency and tokens

    The instance keeps no per-request state and is safe to share between
    concurrent requests.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60,
        max_retries: int = 1,
        default_options: Optional[SamplingOptions] = None,
        retry_backoff: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        connection_limits: Optional[httpx.Limits] = None,
        **kwargs
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL (empty string selects the local default)
            timeout: Request timeout in seconds
            max_retries: Total attempts for transport errors (1 = no retry)
            default_options: Sampling options used by generate_text()
            retry_backoff: First backoff delay in seconds, doubled per attempt
            transport: Custom httpx transport (tests use httpx.MockTransport)
            connection_limits: httpx connection pool limits
            **kwargs: Additional config
        """
        super().__init__(base_url or DEFAULT_BASE_URL, timeout, max_retries, **kwargs)

        self.default_options = default_options or DEFAULT_SAMPLING
        self.retry_backoff = retry_backoff
        self._transport = transport
        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=10,
            max_connections=100,
            keepalive_expiry=30.0,
        )
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Ollama client initialized",
            base_url=self.base_url,
            timeout=timeout,
            max_retries=self.max_retries,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
        attempts: Optional[int] = None,
    ) -> httpx.Response:
        """
        Issue one logical call and return the 2xx response.

        Transport errors are retried up to ``attempts`` times in total; a
        non-2xx status is never retried.
        """
        attempts = attempts or self.max_retries
        client = await self._get_client()

        for attempt in range(1, attempts + 1):
            try:
                response = await client.request(method, path, json=payload)
            except httpx.TimeoutException as e:
                llm_requests_total.labels(operation=operation, outcome="timeout").inc()
                logger.warning(
                    "Ollama request timeout",
                    operation=operation,
                    attempt=attempt,
                    timeout=self.timeout,
                    error=str(e),
                )
                error: LLMConnectionError = LLMTimeoutError(
                    f"Request timeout after {self.timeout}s",
                    details={"operation": operation, "attempt": attempt, "timeout": self.timeout},
                )
            except httpx.TransportError as e:
                llm_requests_total.labels(operation=operation, outcome="connection_error").inc()
                logger.warning(
                    "Ollama network error",
                    operation=operation,
                    attempt=attempt,
                    error=str(e),
                )
                error = LLMConnectionError(
                    f"Failed to send request: {e}",
                    details={"operation": operation, "attempt": attempt, "error_type": type(e).__name__},
                )
            else:
                if not response.is_success:
                    llm_requests_total.labels(operation=operation, outcome="request_failed").inc()
                    logger.error(
                        "Ollama HTTP error",
                        operation=operation,
                        status_code=response.status_code,
                        error_text=response.text,
                    )
                    raise LLMRequestFailedError(
                        response.status_code,
                        response.text,
                        details={"operation": operation},
                    )
                return response

            if attempt < attempts:
                backoff = self.retry_backoff * 2 ** (attempt - 1)
                logger.info("Retrying after backoff", operation=operation, backoff=backoff)
                await asyncio.sleep(backoff)
                continue
            raise error

        raise LLMConnectionError(f"{operation} failed after {attempts} attempts")

    @staticmethod
    def _decode(operation: str, response: httpx.Response, model_cls: Type[ResultT]) -> ResultT:
        """Parse a response body into ``model_cls`` or raise LLMDecodeError."""
        try:
            return model_cls.model_validate_json(response.content)
        except ValidationError as e:
            llm_requests_total.labels(operation=operation, outcome="decode_error").inc()
            logger.error("Failed to decode Ollama response", operation=operation, error=str(e))
            raise LLMDecodeError(
                f"Failed to decode response: {e.errors()[0]['msg']}",
                details={"operation": operation, "body": response.text[:200]},
            )

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate a completion via POST /api/generate.

        Payload:
        {
            "model": "mistral:7b-instruct",
            "prompt": "...",
            "system": "...",
            "stream": false,
            "options": {"temperature": 0.7, "top_p": 0.9, "num_predict": 500}
        }

        Response:
        {
            "model": "mistral:7b-instruct",
            "created_at": "2026-02-19T...",
            "response": "...",
            "done": true,
            "total_duration": 5000000000,
            "eval_count": 150,
            "prompt_eval_count": 50
        }
        """
        start_time = time.perf_counter()

        logger.info(
            "Sending generation request to Ollama",
            model=request.model,
            prompt_length=len(request.prompt),
            has_system=bool(request.system),
        )

        response = await self._send("generate", "POST", GENERATE_PATH, request.to_payload())
        result = self._decode("generate", response, GenerationResult)

        latency = time.perf_counter() - start_time
        llm_requests_total.labels(operation="generate", outcome="success").inc()
        llm_latency_seconds.labels(operation="generate", model=request.model).observe(latency)
        if result.prompt_eval_count:
            llm_tokens_total.labels(model=result.model, token_type="prompt").inc(result.prompt_eval_count)
        if result.eval_count:
            llm_tokens_total.labels(model=result.model, token_type="completion").inc(result.eval_count)

        logger.info(
            "Ollama generation successful",
            model=result.model,
            latency_ms=int(latency * 1000),
            prompt_tokens=result.prompt_eval_count,
            completion_tokens=result.eval_count,
            done=result.done,
        )
        return result

    async def generate_text(self, model: str, prompt: str, system: str = "") -> str:
        """Generate text with the client's default sampling options."""
        request = GenerationRequest(
            model=model,
            prompt=prompt,
            system=system or None,
            options=self.default_options,
        )
        result = await self.generate(request)
        return result.response

    async def embed(self, model: str, text: str) -> list[float]:
        """Compute an embedding via POST /api/embeddings."""
        start_time = time.perf_counter()
        request = EmbeddingRequest(model=model, prompt=text)

        response = await self._send("embed", "POST", EMBEDDINGS_PATH, request.model_dump())
        result = self._decode("embed", response, EmbeddingResult)

        latency = time.perf_counter() - start_time
        llm_requests_total.labels(operation="embed", outcome="success").inc()
        llm_latency_seconds.labels(operation="embed", model=model).observe(latency)
        logger.debug("Ollama embedding computed", model=model, dimensions=len(result.embedding))
        return result.embedding

    async def ensure_healthy(self) -> None:
        """
        Probe GET /api/tags once, regardless of max_retries.

        Raises LLMRequestFailedError on a non-2xx status and
        LLMConnectionError when the server cannot be reached.
        """
        await self._send("health", "GET", TAGS_PATH, attempts=1)
        llm_requests_total.labels(operation="health", outcome="success").inc()
        logger.debug("Ollama health check passed")

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Ollama client connection")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
