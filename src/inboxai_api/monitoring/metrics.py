"""Custom Prometheus metrics for the InboxAI API service.

Exposed at /metrics when PROMETHEUS_ENABLED is set. Alert rules worth having:
- llm_requests_total{outcome!="success"} (inference backend failing or unreachable)
- llm_latency_seconds p95 close to the 60s client timeout
"""

from prometheus_client import Counter, Histogram

# === LLM Gateway Metrics ===

llm_requests_total = Counter(
    "llm_requests_total",
    "Total outbound inference calls by operation and outcome",
    ["operation", "outcome"],
)
"""
Outbound call counter.

Labels:
- operation: generate, embed, health
- outcome: success, connection_error, timeout, request_failed, decode_error
"""

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Outbound inference call latency in seconds",
    ["operation", "model"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Latency of successful outbound calls.

Buckets stop at the 60s client timeout; anything slower fails as a timeout.
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter, fed from the generation diagnostics.

Labels:
- model: Model name reported by the backend
- token_type: prompt (input tokens), completion (output tokens)
"""

# === Domain Metrics ===

email_classifications_total = Counter(
    "email_classifications_total",
    "Email classifications by returned label",
    ["category", "canonical"],
)
"""
Classification label distribution.

Labels:
- category: label as returned by the model (non-canonical labels bucketed as "noncanonical")
- canonical: true when the label is one of the seven known categories

A rising canonical="false" rate means the model is ignoring its instruction.
"""
