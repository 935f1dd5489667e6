"""Generation model factory functions."""

import logging
from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from creatorkit.configs.config import get_llm_config
from creatorkit.configs.system import LLMConfig

from .generation import ChatModelGenerator, GenerationCapability

logger = logging.getLogger(__name__)


def get_llm(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
) -> ChatOpenAI:
    """Create a ChatOpenAI client for the configured OpenAI-compatible endpoint.

    Client retries are disabled: one pipeline run makes exactly one
    outbound call, and the timeout is the only in-core bound on that call.
    """
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=config.api_key,
        model=config.model_name,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.model_timeout.total_seconds(),
        top_p=config.top_p,
        max_retries=0,
    )


def get_generation_capability(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
    llm: Annotated[BaseChatModel, Depends(get_llm)],
) -> GenerationCapability:
    """Wrap the chat model as the pipeline's generation capability."""
    logger.debug("Generation capability: %s (json_mode=%s)", config.model_name, config.json_mode)
    return ChatModelGenerator(llm, json_mode=config.json_mode)
