"""Registry of the built-in generation tools."""

from __future__ import annotations

from collections.abc import Iterable

from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.exceptions import ToolSpecError, UnknownTool
from creatorkit.infra.singleton import singleton

from . import (
    analytics,
    brand_pitch,
    carousel,
    content_calendar,
    engagement,
    hashtags,
    headlines,
    hook_captions,
    podcast_hooks,
    trend_radar,
)

BUILTIN_TOOLS: tuple[ToolSpec, ...] = (
    headlines.SPEC,
    hashtags.SPEC,
    carousel.SPEC,
    engagement.SPEC,
    hook_captions.SPEC,
    podcast_hooks.SPEC,
    trend_radar.SPEC,
    brand_pitch.SPEC,
    analytics.SPEC,
    content_calendar.SPEC,
)


class ToolRegistry:
    """Name -> ``ToolSpec`` lookup, in registration order."""

    def __init__(self, specs: Iterable[ToolSpec]) -> None:
        self._specs: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ToolSpecError(f"Tool '{spec.name}' is registered twice.")
            self._specs[spec.name] = spec

    def get(self, name: str) -> ToolSpec:
        spec = self._specs.get(name)
        if spec is None:
            raise UnknownTool(name)
        return spec

    def list(self) -> list[ToolSpec]:
        return list(self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs


@singleton
def get_tool_registry() -> ToolRegistry:
    """Get the global registry of built-in tools."""
    return ToolRegistry(BUILTIN_TOOLS)
