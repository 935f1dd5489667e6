"""Shared fixtures: a fake generation capability and engine wiring."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

import pytest

from creatorkit.core.llm.invoker import GenerationInvoker
from creatorkit.core.pipeline.engine import ToolEngine
from creatorkit.core.pipeline.schema import SchemaDescription

Reply = Mapping[str, Any] | Callable[[SchemaDescription], Any] | Any


class FakeCapability:
    """Generation capability with a canned reply; records every prompt."""

    def __init__(self, reply: Reply = None, error: BaseException | None = None) -> None:
        self.reply = {} if reply is None else reply
        self.error = error
        self.calls: list[tuple[str, SchemaDescription]] = []

    async def generate(self, prompt_text: str, schema: SchemaDescription) -> Any:
        self.calls.append((prompt_text, schema))
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(schema)
        return self.reply

    @property
    def prompt(self) -> str:
        return self.calls[-1][0]


@pytest.fixture
def make_capability() -> Callable[..., FakeCapability]:
    return FakeCapability


@pytest.fixture
def make_engine() -> Callable[[FakeCapability], ToolEngine]:
    def build(capability: FakeCapability) -> ToolEngine:
        return ToolEngine(GenerationInvoker(capability))

    return build


@pytest.fixture
def monday() -> date:
    return date(2025, 3, 3)
