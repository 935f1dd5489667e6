"""Pydantic models for the tools API."""

from typing import Any

from pydantic import BaseModel, Field

from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import input_schema
from creatorkit.core.pipeline.schema import describe
from creatorkit.core.service.runner import ToolRun


def input_listing(spec: ToolSpec) -> list[dict[str, Any]]:
    """One entry per input, taken from the JSON schema of the input model."""
    schema = input_schema(spec.inputs, spec.name)
    required = set(schema.get("required", ()))
    return [
        {"name": name, "required": name in required, **prop}
        for name, prop in schema["properties"].items()
    ]


class ToolInfo(BaseModel):
    """Listing entry for one registered tool."""

    name: str = Field(description="Tool identifier used in the run URL")
    title: str = Field(description="Human-readable title")
    description: str = Field(description="What the tool produces")
    inputs: list[dict[str, Any]] = Field(
        description="Accepted inputs with type, bounds, choices and defaults"
    )
    outputs: dict[str, Any] = Field(
        description="JSON schema of the result at default inputs"
    )

    @classmethod
    def from_spec(cls, spec: ToolSpec) -> "ToolInfo":
        schema = describe(spec.outputs, spec.defaults())
        return cls(
            name=spec.name,
            title=spec.title,
            description=spec.description,
            inputs=input_listing(spec),
            outputs=schema.to_json_schema(),
        )


class ExportPayload(BaseModel):
    """Title plus ordered lines, ready for a document exporter."""

    title: str
    lines: list[str]


class ToolRunResponse(BaseModel):
    """Response model for a tool run."""

    tool: str
    result: dict[str, Any] = Field(description="Normalized result")
    export: ExportPayload

    @classmethod
    def from_run(cls, run: ToolRun) -> "ToolRunResponse":
        return cls(
            tool=run.tool,
            result=run.result,
            export=ExportPayload(title=run.export_title, lines=run.lines),
        )


class ErrorResponse(BaseModel):
    """Body of every handled error response."""

    detail: str
    code: str
    field: str | None = None
