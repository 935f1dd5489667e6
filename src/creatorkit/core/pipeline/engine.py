"""One executor for every tool.

A ``ToolSpec`` is the static declaration of one tool (inputs, outputs,
prompt template, optional post-assembly hook and export flattener).
``ToolEngine.run`` executes the fixed sequence::

    normalize config -> render prompt -> one generation call
    -> sanitize / enforce / assemble -> finalize

Only ``ValidationError`` (before any outbound call) and
``GenerationUnavailable`` propagate; everything else wrong with a reply
is repaired and counted.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from creatorkit.core.service.metrics import TOOL_RUN_DURATION_SECONDS, TOOL_RUNS_TOTAL
from creatorkit.infra.telemetry import (
    ATTR_TOOL_NAME,
    ATTR_TOOL_REPAIRS,
    ATTR_TOOL_STATUS,
    SPAN_TOOL_RUN,
    tracer,
)

from .assembler import RepairLog, ShapeAssembler
from .exceptions import GenerationUnavailable, ToolSpecError, ValidationError
from .fields import InputField, RequestConfig, config_defaults, input_model, normalize_config
from .prompt import PromptRenderer
from .schema import OutputField

if TYPE_CHECKING:
    from creatorkit.core.llm.invoker import GenerationInvoker

logger = logging.getLogger(__name__)

Finalize = Callable[[dict[str, Any], RequestConfig], dict[str, Any]]
Export = Callable[[Mapping[str, Any]], list[str]]


@dataclass(frozen=True)
class ToolSpec:
    """Static, immutable declaration of one generation tool."""

    name: str
    title: str
    description: str
    inputs: tuple[InputField, ...]
    outputs: tuple[OutputField, ...]
    template: str
    finalize: Finalize | None = None
    export: Export | None = None

    def __post_init__(self) -> None:
        if not self.outputs:
            raise ToolSpecError(f"Tool '{self.name}' declares no output fields.")
        if not self.template.strip():
            raise ToolSpecError(f"Tool '{self.name}' has an empty prompt template.")
        for label, declared in (("input", self.inputs), ("output", self.outputs)):
            names = [d.name for d in declared]
            if len(names) != len(set(names)):
                raise ToolSpecError(f"Tool '{self.name}' repeats an {label} name.")
        known = {i.name for i in self.inputs}
        for declared in self.outputs:
            unknown = set(declared.references()) - known
            if unknown:
                raise ToolSpecError(
                    f"Tool '{self.name}' output '{declared.name}' refers to "
                    f"undeclared inputs {sorted(unknown)}."
                )
        input_model(tuple(self.inputs), self.name)

    def defaults(self) -> RequestConfig:
        """Config with every optional input at its default (for listings)."""
        return config_defaults(self.inputs, self.name)

    def export_lines(self, result: Mapping[str, Any]) -> list[str]:
        """Flatten a NormalizedResult into ordered display lines."""
        if self.export is not None:
            return self.export(result)
        lines: list[str] = []
        for value in result.values():
            if isinstance(value, list):
                lines.extend(str(v) for v in value)
            else:
                lines.append(str(value))
        return lines


class ToolEngine:
    """Runs any ``ToolSpec`` against one generation invoker."""

    def __init__(
        self, invoker: GenerationInvoker, renderer: PromptRenderer | None = None
    ) -> None:
        self._invoker = invoker
        self._renderer = renderer or PromptRenderer()

    async def run(self, spec: ToolSpec, raw: Any) -> dict[str, Any]:
        """Produce the NormalizedResult for one invocation.

        Raises
        ------
        ValidationError
            A required input is blank; no outbound call was made.
        GenerationUnavailable
            The generation call failed outright.
        """
        start = time.monotonic()
        status = "error"
        with tracer.start_as_current_span(SPAN_TOOL_RUN) as span:
            span.set_attribute(ATTR_TOOL_NAME, spec.name)
            try:
                config = normalize_config(spec.inputs, raw, tool=spec.name)
                prompt = self._renderer.render(spec, config)
                reply = await self._invoker.invoke(prompt, tool=spec.name)

                repairs = RepairLog(spec.name)
                result = ShapeAssembler(spec.outputs, config, repairs).assemble(reply)
                if spec.finalize is not None:
                    result = spec.finalize(result, config)
                status = "ok"
            except asyncio.CancelledError:
                status = "cancelled"
                raise
            except ValidationError:
                status = "validation_error"
                raise
            except GenerationUnavailable:
                status = "generation_unavailable"
                raise
            finally:
                elapsed = time.monotonic() - start
                span.set_attribute(ATTR_TOOL_STATUS, status)
                TOOL_RUNS_TOTAL.labels(tool=spec.name, status=status).inc()
                TOOL_RUN_DURATION_SECONDS.labels(tool=spec.name).observe(elapsed)

            span.set_attribute(ATTR_TOOL_REPAIRS, repairs.total)

        logger.info(
            "Tool run %s completed in %.2fs with %d repairs",
            spec.name,
            elapsed,
            repairs.total,
            extra={"tool": spec.name, "repairs": repairs.summary()},
        )
        return result
