"""Tool service: resolves a tool by name, runs it and shapes the export."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from creatorkit.core.pipeline.engine import ToolEngine, ToolSpec
from creatorkit.core.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolRun:
    """One finished run: the NormalizedResult plus its flattened export."""

    tool: str
    result: dict[str, Any]
    export_title: str
    lines: list[str]


class ToolService:
    def __init__(self, engine: ToolEngine, registry: ToolRegistry) -> None:
        self._engine = engine
        self._registry = registry

    def list_tools(self) -> list[ToolSpec]:
        return self._registry.list()

    def get_tool(self, name: str) -> ToolSpec:
        return self._registry.get(name)

    async def run(self, name: str, raw: Any) -> ToolRun:
        """Run tool *name* on raw input.

        ``UnknownTool``, ``ValidationError`` and ``GenerationUnavailable``
        propagate to the caller.
        """
        spec = self._registry.get(name)
        result = await self._engine.run(spec, raw)
        return ToolRun(
            tool=spec.name,
            result=result,
            export_title=spec.title,
            lines=spec.export_lines(result),
        )
