"""Abstract base class for vector-store backends.

The answering layer only talks to :class:`VectorStoreBase`, so a store
backed by an ANN index or a remote service can replace the in-memory
implementation without touching the rest of the stack.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from docchat.retrieval.models import ScoredChunk


class VectorStoreBase(ABC):
    """Store of ``(id, page, text, embedding)`` records for one document."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add(self, chunk_id: int | str, page: int, text: str, embedding: Sequence[float]) -> None:
        """Append one chunk to the store."""
        ...

    @abstractmethod
    def search(self, query_embedding: Sequence[float], k: int = 3) -> list[ScoredChunk]:
        """Return the top-*k* chunks for *query_embedding*.

        Results are sorted by descending score; on an exact tie the
        earlier-inserted chunk comes first.  An empty store returns ``[]``.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Discard every stored chunk."""
        ...

    @abstractmethod
    def __len__(self) -> int: ...

    # -- optional overrides ---------------------------------------------------

    @property
    def dimension(self) -> int | None:
        """Embedding length accepted by the store, ``None`` while empty."""
        return None

    def is_empty(self) -> bool:
        return len(self) == 0
