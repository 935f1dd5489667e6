"""Pipeline exceptions.

Only ``ValidationError`` and ``GenerationUnavailable`` ever reach a
caller of ``ToolEngine.run``; every other irregularity in a generation
reply is repaired silently.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ValidationError(PipelineError):
    """A required input is blank after normalization."""

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field


class GenerationUnavailable(PipelineError):
    """The outbound generation call failed outright."""

    def __init__(self, message: str, *, tool: str = "") -> None:
        super().__init__(message)
        self.tool = tool


class UnknownTool(PipelineError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' is not registered.")
        self.name = name


class ToolSpecError(PipelineError):
    """A tool declaration is inconsistent (raised at definition or run time)."""
