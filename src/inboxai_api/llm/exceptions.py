"""
Custom exceptions for the LLM client layer.

Every failure of an outbound inference call surfaces as one of these, with
enough context (status code, body snippet, attempt) for the HTTP layer to
render a diagnostic message. None of them is retried by the API layer.
"""

from typing import Optional


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.
    
    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when the inference server cannot be reached.
    
    Covers connection refused, DNS failures and other transport errors.
    This is the only error type eligible for connection-level retries.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when a call exceeds the client timeout.
    """
    pass


class LLMRequestFailedError(LLMClientError):
    """
    Raised when the inference server answers with a non-2xx status.
    
    Carries the status code and the response body text. Never retried: a
    4xx usually means the request itself is wrong (unknown model, bad
    options) and a 5xx is reported to the caller as is.
    """
    def __init__(
        self,
        status_code: int,
        body: str,
        details: Optional[dict] = None,
    ):
        super().__init__(
            f"API request failed with status {status_code}: {body}",
            details={"status": status_code, **(details or {})},
        )
        self.status_code = status_code
        self.body = body


class LLMDecodeError(LLMClientError):
    """
    Raised when a 2xx response body cannot be decoded.
    
    Either the body is not JSON or it lacks the fields the operation expects.
    """
    pass
