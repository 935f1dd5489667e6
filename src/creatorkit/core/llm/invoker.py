"""Generation invoker: the single outbound call of a pipeline run.

Policy: exactly one call, no retry.  Any exception raised by the
capability becomes ``GenerationUnavailable`` (chained to the original)
and no partial result is synthesized.  A reply that is not an object
is treated as an empty object; field-level repair happens downstream.
Cancellation is never intercepted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from opentelemetry.trace import Status, StatusCode

from creatorkit.core.pipeline.exceptions import GenerationUnavailable
from creatorkit.core.pipeline.prompt import RenderedPrompt
from creatorkit.core.service.metrics import GENERATION_LATENCY_SECONDS
from creatorkit.infra.telemetry import (
    ATTR_GENERATION_ERROR,
    ATTR_GENERATION_FIELDS,
    ATTR_GENERATION_PROMPT_LEN,
    ATTR_TOOL_NAME,
    SPAN_GENERATION_CALL,
    tracer,
)

from .generation import GenerationCapability

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Generation failed, please try again."


class GenerationInvoker:
    def __init__(self, capability: GenerationCapability) -> None:
        self._capability = capability

    async def invoke(self, prompt: RenderedPrompt, *, tool: str = "") -> Mapping[str, Any]:
        with tracer.start_as_current_span(SPAN_GENERATION_CALL) as span:
            span.set_attribute(ATTR_TOOL_NAME, tool)
            span.set_attribute(ATTR_GENERATION_PROMPT_LEN, len(prompt.text))
            span.set_attribute(ATTR_GENERATION_FIELDS, list(prompt.schema.names))
            start = time.monotonic()
            try:
                reply = await self._capability.generate(prompt.text, prompt.schema)
            except Exception as exc:
                logger.exception("Generation call failed for tool %s", tool)
                span.set_attribute(ATTR_GENERATION_ERROR, type(exc).__name__)
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                raise GenerationUnavailable(GENERATION_FAILED_MESSAGE, tool=tool) from exc
            finally:
                GENERATION_LATENCY_SECONDS.labels(tool=tool).observe(
                    time.monotonic() - start
                )

        if not isinstance(reply, Mapping):
            logger.warning(
                "Generation reply for %s is %s, treating it as empty",
                tool,
                type(reply).__name__,
            )
            return {}
        return reply
