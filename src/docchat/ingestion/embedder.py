"""Embedding port and the sentence-transformer adapter behind it."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from langchain_huggingface import HuggingFaceEmbeddings

from docchat.config import settings
from docchat.errors import DownstreamTimeout, ModelUnavailable

logger = logging.getLogger(__name__)


class EmbeddingPort(ABC):
    """Anything that turns text into a fixed-length vector."""

    @property
    @abstractmethod
    def ready(self) -> bool:
        """``True`` once :meth:`embed` can be called."""
        ...

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed *text*; raises :class:`ModelUnavailable` when not ready."""
        ...


class HuggingFaceEmbedder(EmbeddingPort):
    """Sentence-transformer embeddings loaded once per process.

    Loading takes several seconds, so :meth:`start` does it on a
    background thread.  Until it finishes, :attr:`ready` is ``False`` and
    :meth:`embed` raises :class:`ModelUnavailable`.

    Parameters
    ----------
    model_name:
        HuggingFace model id; defaults to ``settings.embedding_model``.
    """

    def __init__(self, model_name: str | None = None) -> None:
        self.model_name = model_name or settings.embedding_model
        self._model: HuggingFaceEmbeddings | None = None
        self._load_error: Exception | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._model is not None

    def start(self) -> threading.Thread:
        """Begin loading the model in the background (idempotent)."""
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self._load_quietly, name="embedder-warmup", daemon=True)
                self._thread.start()
            return self._thread

    def load(self) -> None:
        """Load the model synchronously."""
        logger.info("Loading embedding model %s", self.model_name)
        model = HuggingFaceEmbeddings(
            model_name=self.model_name,
            encode_kwargs={"normalize_embeddings": True},
        )
        self._model = model
        self._load_error = None
        logger.info("Embedding model %s loaded", self.model_name)

    def embed(self, text: str) -> list[float]:
        model = self._model
        if model is None:
            if self._load_error is not None:
                raise ModelUnavailable(f"Embedding model failed to load: {self._load_error}")
            raise ModelUnavailable()
        return model.embed_query(text)

    def _load_quietly(self) -> None:
        # Runs on the warm-up thread; the error is reported through embed().
        try:
            self.load()
        except Exception as exc:
            self._load_error = exc
            logger.exception("Embedding model %s failed to load", self.model_name)


def embed_texts(
    embedder: EmbeddingPort,
    texts: Sequence[str],
    *,
    max_workers: int = 1,
    timeout: float | None = None,
) -> list[list[float]]:
    """Embed *texts* with at most *max_workers* calls in flight.

    Vectors are returned in the order of *texts* regardless of which call
    finishes first.  *timeout* bounds the whole batch.

    Raises
    ------
    ModelUnavailable
        If the embedder is not ready.
    DownstreamTimeout
        If the batch does not finish within *timeout* seconds.
    """
    if not embedder.ready:
        raise ModelUnavailable()
    if not texts:
        return []
    if max_workers <= 1 and timeout is None:
        return [embedder.embed(text) for text in texts]

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="embed")
    try:
        return list(executor.map(embedder.embed, texts, timeout=timeout))
    except FutureTimeoutError as exc:
        raise DownstreamTimeout(f"Embedding {len(texts)} text(s) exceeded {timeout}s") from exc
    finally:
        # Do not block on stragglers after a timeout.
        executor.shutdown(wait=False, cancel_futures=True)
