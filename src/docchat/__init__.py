"""
docchat — ask questions about an uploaded document.

A document is split into fixed-width chunks, embedded with a
sentence-transformer and held in an in-memory vector store.  Questions
are answered by an LLM grounded on the top-ranked chunks, with page
citations.

Public API
----------
- :class:`DocumentQAService` — upload / ask entry points.
- :mod:`docchat.errors` — error taxonomy with stable codes.
"""

from docchat.errors import (
    DimensionMismatch,
    DocChatError,
    DownstreamAnswerError,
    DownstreamTimeout,
    EmptyStore,
    ExtractionFailure,
    ModelUnavailable,
)

__version__ = "0.1.0"

__all__ = [
    "DimensionMismatch",
    "DocChatError",
    "DocumentQAService",
    "DownstreamAnswerError",
    "DownstreamTimeout",
    "EmptyStore",
    "ExtractionFailure",
    "ModelUnavailable",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import DocumentQAService to avoid pulling in model SDKs at import time."""
    if name == "DocumentQAService":
        from docchat.service import DocumentQAService

        return DocumentQAService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
