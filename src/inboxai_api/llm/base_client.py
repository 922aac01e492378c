"""
Abstract base client for LLM inference.

Defines the interface the API layer and the email operations rely on, so the
Ollama backend can be swapped for another server without touching handlers.
"""

from abc import ABC, abstractmethod

import structlog

from inboxai_api.llm.exceptions import LLMClientError
from inboxai_api.models.llm_models import GenerationRequest, GenerationResult


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send generation and embedding requests to the inference server
    - Parse responses into the wire models
    - Translate transport, status and decoding failures into LLMClientError subclasses
    - Provide a liveness probe

    Does NOT handle:
    - Prompt wording (that's EmailOperations' job)
    - Model lifecycle on the server (models are assumed to be pulled and served)

    Implementations hold only immutable configuration plus a connection pool,
    so one instance is shared by all concurrent requests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60,
        max_retries: int = 1,
        **kwargs
    ):
        """
        Initialize base client.

        Args:
            base_url: Base URL of LLM inference server (e.g., http://localhost:11434)
            timeout: Request timeout in seconds, shared by every call
            max_retries: Total attempts for transport errors (1 = no retry)
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.extra_config = kwargs

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Send one generation request and return the full result.

        Raises:
            LLMConnectionError: Network errors
            LLMTimeoutError: Request exceeded timeout
            LLMRequestFailedError: Non-2xx status from the server
            LLMDecodeError: Malformed response body
        """

    @abstractmethod
    async def generate_text(self, model: str, prompt: str, system: str = "") -> str:
        """
        Generate text with the default sampling options.

        Returns the generated text verbatim. Raises like generate().
        """

    @abstractmethod
    async def embed(self, model: str, text: str) -> list[float]:
        """
        Compute the embedding vector of ``text``.

        The vector is returned as produced by the server (no normalization);
        its length is determined by the model. Raises like generate().
        """

    @abstractmethod
    async def ensure_healthy(self) -> None:
        """
        Probe the server and raise LLMClientError if it is not healthy.
        """

    async def health_check(self) -> bool:
        """
        Check if the inference server is reachable and answering.

        Returns:
            True if the probe succeeded, False otherwise

        Note:
            This never raises: it is a liveness probe and does not verify
            that any particular model is loaded.
        """
        try:
            await self.ensure_healthy()
        except LLMClientError as e:
            logger.warning("LLM health check failed", error=str(e))
            return False
        return True

    async def close(self):
        """
        Close client connections and cleanup resources.

        Default implementation does nothing. Subclasses should override if
        they hold persistent connections.
        """
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
