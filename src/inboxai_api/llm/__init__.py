"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- OllamaClient: Implementation for the Ollama inference server
- EmailOperations: Summarize and classify emails on top of a client
- exceptions: LLM-specific exceptions
"""

from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.llm.email_operations import EmailOperations
from inboxai_api.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMDecodeError,
    LLMRequestFailedError,
    LLMTimeoutError,
)
from inboxai_api.llm.ollama_client import OllamaClient

__all__ = [
    "BaseLLMClient",
    "OllamaClient",
    "EmailOperations",
    "LLMClientError",
    "LLMConnectionError",
    "LLMDecodeError",
    "LLMRequestFailedError",
    "LLMTimeoutError",
]
