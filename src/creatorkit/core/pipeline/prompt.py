"""Prompt rendering with Jinja2.

Each tool template receives every declared input by name (``None`` when
the optional input is absent) so conditionals read naturally::

    {% if platform %}for {{ platform }}{% else %}for the target platform generally{% endif %}

Caller text is embedded verbatim: autoescaping is off because the
destination is a text-generation model, not a markup renderer.  The
output schema description is appended to every prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, StrictUndefined, Template

from .exceptions import ToolSpecError
from .schema import SchemaDescription, describe

if TYPE_CHECKING:
    from .engine import ToolSpec
    from .fields import RequestConfig

logger = logging.getLogger(__name__)


def commas(values: Any) -> str:
    """Jinja filter: comma-join a list (a plain string passes through)."""
    if values is None:
        return ""
    if isinstance(values, str):
        return values
    if isinstance(values, Iterable):
        return ", ".join(str(value) for value in values)
    return str(values)


@dataclass(frozen=True)
class RenderedPrompt:
    """Instruction text plus the output schema it was rendered against."""

    text: str
    schema: SchemaDescription

    def __post_init__(self) -> None:
        if not self.schema:
            raise ToolSpecError("A prompt must be accompanied by an output schema.")


class PromptRenderer:
    """Renders ``ToolSpec.template`` against a ``RequestConfig``.

    Compiled templates are cached per tool name; rendering itself does
    no I/O and is deterministic for a given (spec, config) pair.
    """

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )
        self.env.filters["commas"] = commas
        self._templates: dict[str, Template] = {}

    def compile(self, spec: ToolSpec) -> Template:
        template = self._templates.get(spec.name)
        if template is None:
            template = self.env.from_string(spec.template)
            self._templates[spec.name] = template
        return template

    def render(self, spec: ToolSpec, config: RequestConfig) -> RenderedPrompt:
        schema = describe(spec.outputs, config)
        context = config.as_context(i.name for i in spec.inputs)
        body = self.compile(spec).render(**context).strip()
        text = f"{body}\n\n{schema.render()}"
        logger.debug(
            "Rendered prompt for %s (%d chars, %d output fields)",
            spec.name,
            len(text),
            len(schema.fields),
        )
        return RenderedPrompt(text=text, schema=schema)
