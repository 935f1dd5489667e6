"""Tests for the tool service and its dependency wiring."""

import logging

import pytest

from creatorkit.core.llm.invoker import GenerationInvoker
from creatorkit.core.pipeline.engine import ToolEngine
from creatorkit.core.pipeline.exceptions import UnknownTool
from creatorkit.core.pipeline.prompt import PromptRenderer
from creatorkit.core.service.deps import build_tool_registry, get_tool_engine, get_tool_service
from creatorkit.core.service.runner import ToolService
from creatorkit.core.tools import hook_captions
from creatorkit.core.tools.registry import ToolRegistry, get_tool_registry


@pytest.fixture
def service(make_capability):
    fake = make_capability({"items": [{"hook": "Stop scrolling now", "caption": "Here is why it works"}]})
    return ToolService(ToolEngine(GenerationInvoker(fake)), get_tool_registry()), fake


class TestToolService:
    @pytest.mark.asyncio
    async def test_run_shapes_export(self, service):
        tool_service, fake = service
        run = await tool_service.run("hook_captions", {"topic": "editing", "count": 4})

        assert run.tool == "hook_captions"
        assert run.export_title == "Hooks and Captions"
        assert len(run.result["items"]) == 4
        assert run.lines[0] == "Stop scrolling now | Here is why it works"
        assert len(run.lines) == 4

    @pytest.mark.asyncio
    async def test_unknown_tool(self, service):
        tool_service, fake = service
        with pytest.raises(UnknownTool):
            await tool_service.run("nope", {})
        assert fake.calls == []

    def test_lookup(self, service):
        tool_service, _ = service
        assert tool_service.get_tool("hook_captions") is hook_captions.SPEC
        assert len(tool_service.list_tools()) == 10


class TestDeps:
    def test_service_factory(self, make_capability):
        engine = get_tool_engine(make_capability(), PromptRenderer())
        service = get_tool_service(engine, get_tool_registry())
        assert isinstance(service, ToolService)

    @pytest.mark.asyncio
    async def test_build_tool_registry_compiles_templates(self, caplog):
        renderer = PromptRenderer()
        registry = ToolRegistry([hook_captions.SPEC])

        with caplog.at_level(logging.INFO, logger="creatorkit.core.service.deps"):
            gen = build_tool_registry(registry, renderer)
            await gen.__anext__()

        assert renderer.compile(hook_captions.SPEC) is renderer.compile(hook_captions.SPEC)
        assert "Loaded 1 tools: hook_captions" in caplog.text
        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()
