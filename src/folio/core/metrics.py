"""Prometheus metrics for the folio chat service.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``folio_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Chat request metrics
# ---------------------------------------------------------------------------

CHAT_REQUESTS_TOTAL = Counter(
    "folio_chat_requests_total",
    "Chat requests by outcome",
    ["outcome"],  # direct | llm | rate_limited | invalid | error
)

CHAT_REQUEST_DURATION_SECONDS = Histogram(
    "folio_chat_request_duration_seconds",
    "End-to-end duration of a chat request",
    ["outcome"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 15),
)

CONTEXT_CATEGORIES_TOTAL = Counter(
    "folio_context_categories_total",
    "Context categories selected by the classifier",
    ["category"],
)

# ---------------------------------------------------------------------------
# LLM metrics
# ---------------------------------------------------------------------------

LLM_CALLS_TOTAL = Counter(
    "folio_llm_calls_total",
    "Generation calls issued to the LLM provider",
)

LLM_FALLBACKS_TOTAL = Counter(
    "folio_llm_fallbacks_total",
    "Replies replaced by the fallback message, by reason",
    ["reason"],  # no_credential | timeout | provider_error | empty
)

LLM_LATENCY_SECONDS = Histogram(
    "folio_llm_latency_seconds",
    "Latency of LLM generation calls",
    buckets=(0.25, 0.5, 1, 2, 3, 5, 8, 10, 15),
)


def instrument_app(app: FastAPI, excluded_handlers: list[str] | None = None) -> None:
    """Attach HTTP instrumentation and expose ``/metrics``.

    Must run before the application starts, since it adds middleware.
    """
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=excluded_handlers or ["/health", "/metrics"],
    ).instrument(app).expose(app, endpoint="/metrics")
    logger.debug("Prometheus metrics initialised")
