"""In-memory vector store with exact cosine-similarity search."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from docchat.errors import DimensionMismatch
from docchat.retrieval.base import VectorStoreBase
from docchat.retrieval.models import Chunk, ScoredChunk

logger = logging.getLogger(__name__)

# Keeps the score finite (zero) for all-zero vectors.
EPSILON = 1e-10


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``dot(a, b) / (||a|| * ||b|| + EPSILON)``."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatch(f"Cannot compare vectors of length {va.size} and {vb.size}")
    return float(va @ vb / (np.linalg.norm(va) * np.linalg.norm(vb) + EPSILON))


class InMemoryVectorStore(VectorStoreBase):
    """Ordered list of chunks scanned linearly on every query.

    All chunks must share the dimensionality of the first one added.
    """

    def __init__(self) -> None:
        self._chunks: list[Chunk] = []
        self._dimension: int | None = None

    # -- VectorStoreBase overrides --------------------------------------------

    def add(self, chunk_id: int | str, page: int, text: str, embedding: Sequence[float]) -> None:
        vector = tuple(float(x) for x in embedding)
        if not vector:
            raise DimensionMismatch("Embedding must not be empty")
        if self._dimension is None:
            self._dimension = len(vector)
        elif len(vector) != self._dimension:
            raise DimensionMismatch(
                f"Chunk {chunk_id!r} has {len(vector)} dimensions, store expects {self._dimension}"
            )
        self._chunks.append(Chunk(id=chunk_id, page=page, text=text, embedding=vector))

    def search(self, query_embedding: Sequence[float], k: int = 3) -> list[ScoredChunk]:
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")
        if not self._chunks:
            return []

        query = np.asarray(query_embedding, dtype=np.float64)
        if query.ndim != 1 or query.size != self._dimension:
            raise DimensionMismatch(
                f"Query has {query.size} dimensions, store expects {self._dimension}"
            )

        matrix = np.asarray([c.embedding for c in self._chunks], dtype=np.float64)
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        scores = matrix @ query / (norms + EPSILON)

        # Stable sort on the negated scores keeps insertion order among ties.
        order = np.argsort(-scores, kind="stable")[:k]
        logger.debug("Scanned %d chunks, returning %d", len(self._chunks), len(order))
        return [ScoredChunk(chunk=self._chunks[i], score=float(scores[i])) for i in order]

    def clear(self) -> None:
        self._chunks = []
        self._dimension = None

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def dimension(self) -> int | None:
        return self._dimension

    @property
    def chunks(self) -> list[Chunk]:
        """Stored chunks in insertion order."""
        return list(self._chunks)
