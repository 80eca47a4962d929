"""Document QA service — the ingestion and query entry points.

One service instance holds the index of the single active document.
Uploads build a new index off to the side and swap it in only when it is
complete, so a concurrent question always sees either the previous
document or the new one in full.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from docchat.config import Settings, settings as default_settings
from docchat.errors import ExtractionFailure, ModelUnavailable
from docchat.generation.llm import ChatCompletionPort, OpenAIChatModel
from docchat.ingestion.embedder import EmbeddingPort, HuggingFaceEmbedder
from docchat.ingestion.loader import extract_pages
from docchat.ingestion.pipeline import index_pages
from docchat.retrieval.base import VectorStoreBase
from docchat.retrieval.memory_store import InMemoryVectorStore
from docchat.retrieval.models import Answer, IngestResult
from docchat.retrieval.retriever import Answerer

logger = logging.getLogger(__name__)


class DocumentQAService:
    """Owns the active vector store and serves uploads and questions.

    Parameters
    ----------
    embedder:
        Embedding port.  Defaults to a
        :class:`~docchat.ingestion.embedder.HuggingFaceEmbedder` for
        ``settings.embedding_model``; call :meth:`start` to warm it up.
    llm:
        Chat-completion port.  Defaults to
        :class:`~docchat.generation.llm.OpenAIChatModel`.
    store_factory:
        Builds an empty store for every upload.
    config:
        Settings to read chunking, retrieval and timeout values from.
    """

    def __init__(
        self,
        embedder: EmbeddingPort | None = None,
        llm: ChatCompletionPort | None = None,
        *,
        store_factory: Callable[[], VectorStoreBase] = InMemoryVectorStore,
        config: Settings | None = None,
    ) -> None:
        self.config = config or default_settings
        self.embedder = embedder if embedder is not None else HuggingFaceEmbedder(self.config.embedding_model)
        self.llm = llm if llm is not None else OpenAIChatModel()
        self._store_factory = store_factory
        self._store = store_factory()
        self._store_lock = threading.Lock()
        self._ingest_lock = threading.Lock()
        self._answerer = Answerer(
            self.embedder,
            self.llm,
            k=self.config.top_k,
            max_tokens=self.config.llm_max_tokens,
            embed_timeout=self.config.embedding_timeout_seconds,
        )

    # -- lifecycle ------------------------------------------------------------

    def start(self) -> None:
        """Kick off background model warm-up when the embedder supports it."""
        start = getattr(self.embedder, "start", None)
        if callable(start):
            start()

    @property
    def ready(self) -> bool:
        return self.embedder.ready

    @property
    def store(self) -> VectorStoreBase:
        """The currently active store."""
        with self._store_lock:
            return self._store

    @property
    def chunk_count(self) -> int:
        return len(self.store)

    def reset(self) -> None:
        """Drop the active document."""
        with self._store_lock:
            self._store = self._store_factory()
        logger.info("Active document discarded")

    # -- entry points ---------------------------------------------------------

    def upload(self, data: bytes, filename: str) -> IngestResult:
        """Index *data* and make it the active document.

        Raises
        ------
        ModelUnavailable
            If the embedding model is still loading.
        ExtractionFailure
            If no text can be extracted from the document.
        DownstreamTimeout
            If embedding the chunks exceeds the configured timeout.

        On any failure the previously active document stays in place.
        """
        if not self.embedder.ready:
            raise ModelUnavailable()

        with self._ingest_lock:
            pages = extract_pages(data, filename)
            if not pages:
                raise ExtractionFailure(f"No extractable text in {filename!r}")

            staging = self._store_factory()
            count = index_pages(
                pages,
                self.embedder,
                staging,
                chunk_size=self.config.chunk_size,
                max_workers=self.config.embedding_concurrency,
                timeout=self.config.embedding_timeout_seconds,
            )
            with self._store_lock:
                self._store = staging

        logger.info("Indexed %s: %d page(s), %d chunk(s)", filename, len(pages), count)
        return IngestResult(chunk_count=count, page_count=len(pages), filename=filename)

    def ask(self, question: str) -> Answer:
        """Answer *question* from the active document."""
        return self._answerer.answer(question, self.store)
