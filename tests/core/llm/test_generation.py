"""Tests for the chat-model adapter and the generation invoker."""

import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage
from pydantic import SecretStr

from creatorkit.configs.system import LLMConfig
from creatorkit.core.llm.deps import get_llm
from creatorkit.core.llm.generation import (
    ChatModelGenerator,
    GenerationCapability,
    message_text,
)
from creatorkit.core.llm.invoker import GENERATION_FAILED_MESSAGE, GenerationInvoker
from creatorkit.core.pipeline.exceptions import GenerationUnavailable
from creatorkit.core.pipeline.prompt import RenderedPrompt
from creatorkit.core.pipeline.schema import FieldDescription, SchemaDescription

SCHEMA = SchemaDescription((FieldDescription("summary", "string"),))


def _generator(*responses: str) -> ChatModelGenerator:
    return ChatModelGenerator(FakeListChatModel(responses=list(responses)))


# ---------------------------------------------------------------------------
# ChatModelGenerator
# ---------------------------------------------------------------------------


class TestChatModelGenerator:
    def test_satisfies_protocol(self):
        assert isinstance(_generator("{}"), GenerationCapability)

    @pytest.mark.asyncio
    async def test_parses_json_object(self):
        reply = await _generator('{"summary": "Hello"}').generate("prompt", SCHEMA)
        assert reply == {"summary": "Hello"}

    @pytest.mark.asyncio
    async def test_parses_fenced_json(self):
        reply = await _generator('```json\n{"summary": "Hi"}\n```').generate("p", SCHEMA)
        assert reply == {"summary": "Hi"}

    @pytest.mark.asyncio
    async def test_unparseable_reply_is_empty(self, caplog):
        reply = await _generator("Sorry, I can't do that.").generate("p", SCHEMA)
        assert reply == {}
        assert "Unparseable generation reply" in caplog.text

    @pytest.mark.asyncio
    async def test_array_reply_is_empty(self):
        assert await _generator('["a", "b"]').generate("p", SCHEMA) == {}


def test_message_text_joins_content_parts():
    message = AIMessage(content=[{"type": "text", "text": '{"a":'}, " 1}", {"type": "image"}])
    assert message_text(message) == '{"a": 1}'


# ---------------------------------------------------------------------------
# GenerationInvoker
# ---------------------------------------------------------------------------


class TestGenerationInvoker:
    @pytest.mark.asyncio
    async def test_passes_prompt_and_schema(self, make_capability):
        fake = make_capability({"summary": "ok"})
        reply = await GenerationInvoker(fake).invoke(
            RenderedPrompt("Write a summary.", SCHEMA), tool="demo"
        )
        assert reply == {"summary": "ok"}
        assert fake.calls == [("Write a summary.", SCHEMA)]

    @pytest.mark.asyncio
    async def test_non_mapping_reply_is_empty(self, make_capability):
        fake = make_capability(["summary"])
        assert await GenerationInvoker(fake).invoke(RenderedPrompt("x", SCHEMA)) == {}

    @pytest.mark.asyncio
    async def test_failure_becomes_generation_unavailable(self, make_capability):
        boom = TimeoutError("timed out")
        fake = make_capability(error=boom)
        with pytest.raises(GenerationUnavailable, match=GENERATION_FAILED_MESSAGE) as exc_info:
            await GenerationInvoker(fake).invoke(RenderedPrompt("x", SCHEMA), tool="demo")
        assert exc_info.value.__cause__ is boom


# ---------------------------------------------------------------------------
# Client factory
# ---------------------------------------------------------------------------


def test_chat_client_never_retries():
    llm = get_llm(LLMConfig(api_key=SecretStr("test-key"), model_name="gpt-4o-mini"))
    assert llm.max_retries == 0
    assert llm.model_name == "gpt-4o-mini"
