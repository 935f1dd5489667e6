"""FastAPI dependency factories for the tool service.

``get_tool_service`` is a per-request ``Depends`` factory with an
explicit parameter chain; override ``get_generation_capability`` in
tests to run every tool without a model endpoint.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from creatorkit.core.llm import GenerationCapability, GenerationInvoker, get_generation_capability
from creatorkit.core.pipeline.engine import ToolEngine
from creatorkit.core.pipeline.prompt import PromptRenderer
from creatorkit.core.tools.registry import ToolRegistry, get_tool_registry
from creatorkit.infra.singleton import singleton

from .runner import ToolService

logger = logging.getLogger(__name__)


@singleton
def get_prompt_renderer() -> PromptRenderer:
    """Shared renderer; compiled templates are cached per tool."""
    return PromptRenderer()


def get_tool_engine(
    capability: Annotated[GenerationCapability, Depends(get_generation_capability)],
    renderer: Annotated[PromptRenderer, Depends(get_prompt_renderer)],
) -> ToolEngine:
    return ToolEngine(GenerationInvoker(capability), renderer)


def get_tool_service(
    engine: Annotated[ToolEngine, Depends(get_tool_engine)],
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
) -> ToolService:
    return ToolService(engine, registry)


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_tool_registry(
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
    renderer: Annotated[PromptRenderer, Depends(get_prompt_renderer)],
) -> AsyncGenerator[None, None]:
    """Compile every tool template at startup so a broken one fails fast."""
    names = []
    for spec in registry.list():
        renderer.compile(spec)
        names.append(spec.name)
    logger.info("Loaded %d tools: %s", len(names), ", ".join(names))
    yield
