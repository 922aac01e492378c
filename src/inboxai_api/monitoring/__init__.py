"""Monitoring and metrics instrumentation for the InboxAI API service."""

from inboxai_api.monitoring.metrics import (
    email_classifications_total,
    llm_latency_seconds,
    llm_requests_total,
    llm_tokens_total,
)

__all__ = [
    "llm_requests_total",
    "llm_latency_seconds",
    "llm_tokens_total",
    "email_classifications_total",
]
