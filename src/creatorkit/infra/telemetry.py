"""OpenTelemetry bootstrap: tracing initialisation and helpers.

Configures a ``TracerProvider`` with an OTLP HTTP exporter when tracing is
enabled via ``TracingConfig``.  When disabled the module is a graceful no-op
(local dev without a collector).

Auto-instrumentations wired here:

- **FastAPI** (inbound HTTP spans)
- **httpx** (outbound HTTP spans, covering ``langchain-openai`` generation calls)

``init_telemetry`` runs from the app factory (instrumentation must be in
place before the app starts); ``build_telemetry`` is the lifespan
dependency that flushes the exporter on shutdown.

Usage::

    from creatorkit.infra.telemetry import SPAN_TOOL_RUN, tracer

    with tracer.start_as_current_span(SPAN_TOOL_RUN) as span:
        span.set_attribute(ATTR_TOOL_NAME, spec.name)
"""

from __future__ import annotations

import base64
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from opentelemetry import trace
from opentelemetry.trace import format_trace_id

from creatorkit.configs.config import get_tracing_config
from creatorkit.configs.system import TracingConfig

logger = logging.getLogger(__name__)

_otel_enabled = False

tracer = trace.get_tracer("creatorkit")

# ---------------------------------------------------------------------------
# Span names for all custom spans
# ---------------------------------------------------------------------------

SPAN_TOOL_RUN = "tool.run"
SPAN_GENERATION_CALL = "generation.call"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_TOOL_NAME = "tool.name"
ATTR_TOOL_STATUS = "tool.status"
ATTR_TOOL_REPAIRS = "tool.repairs"

ATTR_GENERATION_PROMPT_LEN = "generation.prompt_len"
ATTR_GENERATION_FIELDS = "generation.fields"
ATTR_GENERATION_ERROR = "generation.error"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> None:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    Parameters
    ----------
    app:
        The FastAPI application instance.  Passed to the FastAPI
        instrumentor so it can attach ASGI middleware.
    settings:
        Tracing configuration.  When ``None`` or ``enabled`` is
        ``False``, this function is a no-op.
    """
    global _otel_enabled  # noqa: PLW0603

    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return

    if not settings.endpoint or not settings.username or not settings.password:
        logger.warning(
            "Tracing enabled but endpoint/credentials not configured, "
            "skipping OpenTelemetry setup."
        )
        return

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})

    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    credentials = f"{settings.username}:{settings.password}"
    encoded = base64.b64encode(credentials.encode()).decode()
    headers = {"Authorization": f"Basic {encoded}"}

    exporter = OTLPSpanExporter(
        endpoint=settings.endpoint,
        headers=headers,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    # --- Auto-instrumentations ---

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls) if settings.excluded_urls else ""
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    _otel_enabled = True
    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )


def get_current_trace_id() -> str | None:
    """Return the active OTEL trace ID as a 32-char hex string, or ``None``."""
    span = trace.get_current_span()
    ctx = span.get_span_context()
    if ctx is None or not ctx.is_valid:
        return None
    return format_trace_id(ctx.trace_id)


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_telemetry(
    config: Annotated[TracingConfig, Depends(get_tracing_config)],
) -> AsyncGenerator[None, None]:
    """Flush buffered spans when the app shuts down."""
    yield
    if not _otel_enabled:
        return
    provider = trace.get_tracer_provider()
    shutdown = getattr(provider, "shutdown", None)
    if shutdown is not None:
        shutdown()
        logger.info("OpenTelemetry exporter flushed (service=%s).", config.service_name)
