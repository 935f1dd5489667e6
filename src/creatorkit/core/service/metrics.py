"""Prometheus metrics for the creatorkit application.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``creatorkit_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from creatorkit.configs.system import TracingConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tool run metrics
# ---------------------------------------------------------------------------

TOOL_RUNS_TOTAL = Counter(
    "creatorkit_tool_runs_total",
    "Total tool runs, by tool name and outcome",
    ["tool", "status"],  # ok | validation_error | generation_unavailable | error | cancelled
)

TOOL_RUN_DURATION_SECONDS = Histogram(
    "creatorkit_tool_run_duration_seconds",
    "End-to-end duration of a tool run (normalize, render, generate, assemble)",
    ["tool"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 20, 30, 60),
)

# ---------------------------------------------------------------------------
# Generation metrics
# ---------------------------------------------------------------------------

GENERATION_LATENCY_SECONDS = Histogram(
    "creatorkit_generation_latency_seconds",
    "Latency of the outbound generation call",
    ["tool"],
    buckets=(0.25, 0.5, 1, 2, 5, 10, 20, 30, 60),
)

# ---------------------------------------------------------------------------
# Repair metrics
# ---------------------------------------------------------------------------

FIELD_REPAIRS_TOTAL = Counter(
    "creatorkit_field_repairs_total",
    "Soft repairs applied to generation output, by field and repair kind",
    ["tool", "field", "kind"],  # dropped | deduplicated | truncated | padded | defaulted
)


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


def install_metrics(app: FastAPI, config: TracingConfig) -> None:
    """Set up Prometheus HTTP instrumentation.

    Attaches ``prometheus-fastapi-instrumentator`` middleware and the
    ``/metrics`` endpoint to the FastAPI *app*.  Call before the app
    starts serving.
    """
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
