"""Prometheus metric definitions for contentlab."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# --- Analysis ---

analysis_duration_seconds = Histogram(
    "contentlab_analysis_duration_seconds",
    "Time spent producing an analysis report",
    labelnames=["analyzer"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30),
)

# --- LLM ---

llm_tokens_total = Counter(
    "contentlab_llm_tokens_total",
    "Total LLM tokens consumed",
    labelnames=["model", "token_type"],
)

llm_requests_total = Counter(
    "contentlab_llm_requests_total",
    "Total text-generation requests by outcome",
    labelnames=["category", "status"],
)

llm_fallbacks_total = Counter(
    "contentlab_llm_fallbacks_total",
    "Times an analysis substituted its deterministic fallback for an LLM answer",
    labelnames=["site"],
)

# --- Retry ---

retry_attempts_total = Counter(
    "contentlab_retry_attempts_total",
    "Total retry attempts",
    labelnames=["fn_name"],
)

retry_exhausted_total = Counter(
    "contentlab_retry_exhausted_total",
    "Total times retries were exhausted",
    labelnames=["fn_name"],
)

# --- Circuit breaker ---

circuit_breaker_state = Gauge(
    "contentlab_circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open, 2=half-open)",
    labelnames=["name"],
)

# --- Experiments ---

experiments_total = Counter(
    "contentlab_experiments_total",
    "Total experiments created or transitioned",
    labelnames=["status"],
)
