"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from docchat.errors import ModelUnavailable
from docchat.generation.llm import ChatCompletionPort
from docchat.ingestion.embedder import EmbeddingPort


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fake ports for deterministic testing ───────────────────────────────


class FakeEmbedder(EmbeddingPort):
    """Maps text to a small bag-of-letters vector, or to canned vectors."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, *, ready: bool = True) -> None:
        self.vectors = vectors or {}
        self._ready = ready
        self.calls: list[str] = []

    @property
    def ready(self) -> bool:
        return self._ready

    def set_ready(self, value: bool) -> None:
        self._ready = value

    def embed(self, text: str) -> list[float]:
        if not self._ready:
            raise ModelUnavailable()
        self.calls.append(text)
        if text in self.vectors:
            return list(self.vectors[text])
        lowered = text.lower()
        return [float(lowered.count(letter)) for letter in "abcdefgh"]


class FakeChat(ChatCompletionPort):
    """Records every prompt and returns a fixed reply (or raises)."""

    def __init__(self, reply: str = "The answer.", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        self.calls.append({"system": system, "user": user, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def fake_chat() -> FakeChat:
    return FakeChat()
