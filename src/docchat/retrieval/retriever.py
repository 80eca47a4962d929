"""Grounded answering — rank chunks for a question and ask the LLM.

Usage::

    from docchat.retrieval.retriever import Answerer

    answerer = Answerer(embedder, llm, k=3)
    result = answerer.answer("What is the warranty period?", store)
    for c in result.citations:
        print(c.page, c.preview)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from docchat.errors import DownstreamAnswerError, DownstreamTimeout, EmptyStore
from docchat.generation.llm import ChatCompletionPort
from docchat.generation.prompts import ANSWER_SYSTEM, build_context, build_user_message
from docchat.ingestion.embedder import EmbeddingPort, embed_texts
from docchat.retrieval.base import VectorStoreBase
from docchat.retrieval.models import Answer, Citation, ScoredChunk

logger = logging.getLogger(__name__)

DEFAULT_K = 3
DEFAULT_MAX_TOKENS = 300


class Answerer:
    """Answers questions from whatever store it is handed.

    Parameters
    ----------
    embedder:
        Port used to embed the question.
    llm:
        Chat-completion port that writes the answer.
    k:
        Number of chunks forwarded as context.
    max_tokens:
        Token budget for the generated answer.
    embed_timeout:
        Seconds allowed for embedding the question; ``None`` waits forever.
    """

    def __init__(
        self,
        embedder: EmbeddingPort,
        llm: ChatCompletionPort,
        *,
        k: int = DEFAULT_K,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        embed_timeout: float | None = None,
    ) -> None:
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")
        self.embedder = embedder
        self.llm = llm
        self.k = k
        self.max_tokens = max_tokens
        self.embed_timeout = embed_timeout

    # -- public API -----------------------------------------------------------

    def retrieve(self, question: str, store: VectorStoreBase) -> list[ScoredChunk]:
        """Return the top-k chunks of *store* for *question*."""
        if not question.strip():
            raise ValueError("Question must not be empty")
        if store.is_empty():
            raise EmptyStore()

        [query_embedding] = embed_texts(self.embedder, [question], timeout=self.embed_timeout)
        return store.search(query_embedding, k=self.k)

    def answer(self, question: str, store: VectorStoreBase) -> Answer:
        """Retrieve context for *question* and generate a cited answer.

        Raises
        ------
        EmptyStore
            If *store* holds no chunks.
        ModelUnavailable
            If the embedder is still warming up.
        DownstreamTimeout
            If the question embedding or the LLM call times out.
        DownstreamAnswerError
            If the LLM call fails for any other reason.
        """
        hits = self.retrieve(question, store)
        context = build_context([hit.text for hit in hits])
        logger.info(
            "Answering with %d chunk(s) from page(s) %s",
            len(hits),
            [hit.page for hit in hits],
        )

        try:
            text = self.llm.complete(
                ANSWER_SYSTEM,
                build_user_message(context, question),
                max_tokens=self.max_tokens,
            )
        except DownstreamTimeout:
            raise
        except Exception as exc:
            logger.warning("Chat completion failed: %s", exc)
            raise DownstreamAnswerError(f"Query failed: {exc}") from exc

        return Answer(answer=text, citations=to_citations(hits))


def to_citations(hits: Sequence[ScoredChunk]) -> list[Citation]:
    return [Citation.from_scored(hit) for hit in hits]


def answer(
    question: str,
    store: VectorStoreBase,
    embedder: EmbeddingPort,
    llm: ChatCompletionPort,
    k: int = DEFAULT_K,
    **kwargs,
) -> Answer:
    """Functional shortcut for ``Answerer(embedder, llm, k=k).answer(...)``."""
    return Answerer(embedder, llm, k=k, **kwargs).answer(question, store)
