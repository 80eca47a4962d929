"""Chat-completion port and its OpenAI-compatible adapter.

The default endpoint is Groq, which exposes an OpenAI-compatible
``/v1/chat/completions`` API, so ``ChatOpenAI`` works unchanged.  Point
``LLM_BASE_URL`` at any other compatible server (vLLM, OpenAI cloud, …)
to swap providers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import openai
from langchain_openai import ChatOpenAI

from docchat.config import settings
from docchat.errors import DownstreamTimeout
from docchat.generation.prompts import build_messages

logger = logging.getLogger(__name__)


class ChatCompletionPort(ABC):
    """Generates text from a system instruction and a user message."""

    @abstractmethod
    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        """Return the generated answer text."""
        ...


def get_llm(max_tokens: int | None = None, temperature: float | None = None) -> ChatOpenAI:
    """Return the configured chat model.

    When ``settings.llm_base_url`` is empty the client talks to the
    OpenAI cloud API.
    """
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": settings.llm_temperature if temperature is None else temperature,
        "max_tokens": max_tokens or settings.llm_max_tokens,
        "timeout": settings.llm_timeout_seconds,
        "max_retries": 0,
        "api_key": settings.llm_api_key or "EMPTY",
    }
    if settings.llm_base_url:
        logger.info("Using chat endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
    return ChatOpenAI(**kwargs)


class OpenAIChatModel(ChatCompletionPort):
    """:class:`ChatCompletionPort` backed by LangChain's ``ChatOpenAI``."""

    def __init__(self, llm: ChatOpenAI | None = None) -> None:
        self._llm = llm or get_llm()

    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        llm = self._llm.bind(max_tokens=max_tokens)
        try:
            response = llm.invoke(build_messages(system, user))
        except openai.APITimeoutError as exc:
            raise DownstreamTimeout(f"Chat completion timed out: {exc}") from exc
        return response.content if isinstance(response.content, str) else str(response.content)
