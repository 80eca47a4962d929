"""
Retrieval — vector storage, cosine ranking, and grounded answering.

Public surface
--------------
- :class:`VectorStoreBase` — abstract store (subclass for other backends).
- :class:`InMemoryVectorStore` — default exact-search store.
- :class:`Chunk`, :class:`ScoredChunk`, :class:`Citation`, :class:`Answer` — data models.
- :class:`Answerer` — question → context → LLM → cited answer.
"""

from docchat.retrieval.base import VectorStoreBase
from docchat.retrieval.memory_store import InMemoryVectorStore, cosine_similarity
from docchat.retrieval.models import Answer, Chunk, Citation, IngestResult, ScoredChunk

__all__ = [
    "Answer",
    "Answerer",
    "Chunk",
    "Citation",
    "InMemoryVectorStore",
    "IngestResult",
    "ScoredChunk",
    "VectorStoreBase",
    "cosine_similarity",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import Answerer to avoid pulling in the embedding stack at import time."""
    if name == "Answerer":
        from docchat.retrieval.retriever import Answerer

        return Answerer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
