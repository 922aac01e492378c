"""
Wire models for the Ollama inference API.

Field names follow the Ollama HTTP API so the models serialize straight into
request bodies and parse straight out of responses. They are transient values
scoped to a single call.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SamplingOptions(BaseModel):
    """
    Sampling options sent under "options" in a generation request.
    
    Every field is optional; unset fields are omitted from the payload so
    the backend applies its own defaults.
    """
    model_config = ConfigDict(frozen=True)
    
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Nucleus sampling probability")
    top_k: Optional[int] = Field(default=None, ge=1, description="Top-k sampling cutoff")
    num_predict: Optional[int] = Field(default=None, description="Maximum tokens to generate")
    stop: Optional[list[str]] = Field(default=None, description="Stop sequences")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")


class GenerationRequest(BaseModel):
    """
    Body of POST /api/generate.
    
    Streaming responses are not supported, so ``stream`` only accepts False.
    """
    model_config = ConfigDict(frozen=True)
    
    model: str = Field(..., min_length=1, description="Model identifier (e.g. 'mistral:7b-instruct')")
    prompt: str = Field(..., description="User prompt")
    system: Optional[str] = Field(default=None, description="System instruction")
    options: SamplingOptions = Field(default_factory=SamplingOptions)
    stream: Literal[False] = False
    format: Optional[str | dict[str, Any]] = Field(
        default=None,
        description="Output format hint: 'json' or a JSON Schema object"
    )
    
    def to_payload(self) -> dict[str, Any]:
        """Serialize for the wire, dropping unset optional fields."""
        payload = self.model_dump(exclude_none=True)
        if not payload.get("system"):
            payload.pop("system", None)
        return payload


class GenerationResult(BaseModel):
    """
    Non-streaming response of POST /api/generate.
    
    Only ``response`` is consumed by the service; the timing and token
    counters are passed through for logging and metrics.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")
    
    model: str
    response: str
    done: bool = False
    created_at: Optional[str] = None
    context: Optional[list[int]] = None
    total_duration: Optional[int] = Field(default=None, description="Nanoseconds")
    load_duration: Optional[int] = Field(default=None, description="Nanoseconds")
    prompt_eval_count: Optional[int] = None
    prompt_eval_duration: Optional[int] = Field(default=None, description="Nanoseconds")
    eval_count: Optional[int] = None
    eval_duration: Optional[int] = Field(default=None, description="Nanoseconds")


class EmbeddingRequest(BaseModel):
    """Body of POST /api/embeddings."""
    model_config = ConfigDict(frozen=True)
    
    model: str = Field(..., min_length=1)
    prompt: str


class EmbeddingResult(BaseModel):
    """Response of POST /api/embeddings. Vector length depends on the model."""
    model_config = ConfigDict(frozen=True, extra="ignore")
    
    embedding: list[float]
