"""Chunk → embed → store, for one document."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from docchat.ingestion.chunker import DEFAULT_CHUNK_SIZE, chunk_pages
from docchat.ingestion.embedder import EmbeddingPort, embed_texts
from docchat.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


def index_pages(
    pages: Sequence[tuple[int, str]],
    embedder: EmbeddingPort,
    store: VectorStoreBase,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_workers: int = 1,
    timeout: float | None = None,
) -> int:
    """Replace the contents of *store* with the chunks of *pages*.

    The store is cleared first.  Chunks are added in document order with
    ids ``0, 1, 2, …``; whitespace-only chunks are skipped.  All chunks
    are embedded before the store is touched, but a rejected ``add`` still
    leaves it partially populated, so callers that need an all-or-nothing
    index should pass a fresh staging store.

    Returns
    -------
    int
        Number of chunks added.
    """
    chunks = [(page, text) for page, text in chunk_pages(pages, chunk_size) if text.strip()]
    logger.info("Split %d page(s) into %d chunk(s)", len(pages), len(chunks))

    vectors = embed_texts(
        embedder,
        [text for _, text in chunks],
        max_workers=max_workers,
        timeout=timeout,
    )

    store.clear()
    for chunk_id, ((page, text), vector) in enumerate(zip(chunks, vectors)):
        store.add(chunk_id, page, text, vector)
    return len(chunks)
