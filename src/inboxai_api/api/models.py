"""
API-specific request and response models for FastAPI endpoints.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Response for the service liveness endpoint."""
    
    status: str = Field(description="Always 'ok' while the process serves requests", examples=["ok"])


class OllamaHealthResponse(BaseModel):
    """Response for a reachable inference backend."""
    
    status: str = Field(examples=["healthy"])
    service: str = Field(examples=["ollama"])


class OllamaUnhealthyResponse(BaseModel):
    """Response for an unreachable or failing inference backend (HTTP 503)."""
    
    status: str = Field(examples=["unhealthy"])
    error: str = Field(description="Why the probe failed")


class OllamaTestRequest(BaseModel):
    """Body of POST /ollama/test. An empty or missing text selects the sample sentence."""
    
    text: Optional[str] = Field(default=None, description="Email text to summarize and classify")


class OllamaTestResponse(BaseModel):
    """Result of the summarize + classify round trip."""
    
    input_text: str = Field(description="Text actually sent to the model")
    summary: str = Field(description="Model summary, verbatim")
    category: str = Field(description="Model category label, verbatim (not validated)")
    model: str = Field(description="Model identifier used", examples=["mistral:7b-instruct"])


class ErrorResponse(BaseModel):
    """Standard error response format."""
    
    error: str = Field(description="Human-readable error message")


class ThreadListResponse(BaseModel):
    """Placeholder thread listing."""
    
    threads: list[Any] = Field(default_factory=list)


class ThreadDetailResponse(BaseModel):
    """Placeholder thread detail."""
    
    id: str
    subject: str


class SearchResponse(BaseModel):
    """Placeholder search results."""
    
    results: list[Any] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Placeholder chat answer."""
    
    answer: str
    citations: list[Any] = Field(default_factory=list)
