"""Generation capability protocol and the LangChain chat-model adapter.

The pipeline only depends on ``GenerationCapability``: given the
rendered instruction text and the output schema, return a best-effort
structured reply.  Replies are untrusted, so the adapter never
validates shape; it only turns the model's text into JSON when it can.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import JsonOutputParser

from creatorkit.core.pipeline.schema import SchemaDescription

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write marketing copy for social media creators. "
    "Always answer with a single JSON object and nothing else."
)

JSON_OBJECT_FORMAT = {"type": "json_object"}


@runtime_checkable
class GenerationCapability(Protocol):
    """Anything that can turn a prompt into a best-effort structured reply."""

    async def generate(
        self, prompt_text: str, schema: SchemaDescription
    ) -> Mapping[str, Any]: ...


def message_text(message: BaseMessage) -> str:
    """Flatten string or content-part message bodies into plain text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


class ChatModelGenerator:
    """``GenerationCapability`` backed by a LangChain chat model.

    An unparseable reply is not a failure of the call: it is logged and
    returned as an empty object so that every field falls back.
    Transport and API errors propagate to the invoker untouched.
    """

    def __init__(self, llm: BaseChatModel, json_mode: bool = False) -> None:
        self._llm = llm.bind(response_format=JSON_OBJECT_FORMAT) if json_mode else llm
        self._parser = JsonOutputParser()

    async def generate(
        self, prompt_text: str, schema: SchemaDescription
    ) -> Mapping[str, Any]:
        messages = [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt_text)]
        reply = await self._llm.ainvoke(messages)
        text = message_text(reply)
        try:
            parsed = self._parser.parse(text)
        except OutputParserException:
            logger.warning(
                "Unparseable generation reply (%d chars, expected keys %s)",
                len(text),
                ", ".join(schema.names),
            )
            return {}
        if not isinstance(parsed, Mapping):
            logger.warning("Generation reply is %s, not an object", type(parsed).__name__)
            return {}
        return parsed
