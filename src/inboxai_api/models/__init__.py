"""
Pydantic data models for the InboxAI API service.

Includes:
- LLM wire models (GenerationRequest, SamplingOptions, GenerationResult,
  EmbeddingRequest, EmbeddingResult)
- Enums (EmailCategory)
"""

from inboxai_api.models.enums import EmailCategory
from inboxai_api.models.llm_models import (
    EmbeddingRequest,
    EmbeddingResult,
    GenerationRequest,
    GenerationResult,
    SamplingOptions,
)

__all__ = [
    # Enums
    "EmailCategory",
    # LLM models
    "SamplingOptions",
    "GenerationRequest",
    "GenerationResult",
    "EmbeddingRequest",
    "EmbeddingResult",
]
