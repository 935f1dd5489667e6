"""Tools API: list the registered tools and run one."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from creatorkit.core.tools.registry import ToolRegistry, get_tool_registry

from .deps import APIConfigDep, ToolServiceDep
from .models import ToolInfo, ToolRunResponse

router = APIRouter(tags=["tools"])


def clip_inputs(value: Any, max_chars: int) -> Any:
    """Clip every string in a raw input body to ``max_chars`` characters."""
    if isinstance(value, str):
        return value[:max_chars]
    if isinstance(value, dict):
        return {k: clip_inputs(v, max_chars) for k, v in value.items()}
    if isinstance(value, list):
        return [clip_inputs(v, max_chars) for v in value]
    return value


@router.get("/tools")
async def list_tools(
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
) -> list[ToolInfo]:
    """List every tool with its inputs and output schema."""
    return [ToolInfo.from_spec(spec) for spec in registry.list()]


@router.post("/tools/{tool_name}")
async def run_tool(
    tool_name: str,
    service: ToolServiceDep,
    api_config: APIConfigDep,
    body: Annotated[Any, Body()] = None,
) -> ToolRunResponse:
    """Run one tool on a raw JSON body.

    The body is taken as-is (any shape); unknown keys are ignored and
    malformed values fall back to defaults.  Only a blank required
    input is rejected (422).
    """
    raw = clip_inputs(body, api_config.max_input_chars)
    run = await service.run(tool_name, raw)
    return ToolRunResponse.from_run(run)
