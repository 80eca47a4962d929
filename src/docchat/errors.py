"""Error taxonomy surfaced to callers of the ingestion and query entry points.

Every error carries a stable ``code`` so a transport layer can map it to a
response without string matching.  None of them are retried by the core.
"""

from __future__ import annotations


class DocChatError(Exception):
    """Base class for all user-facing docchat errors."""

    code: str = "docchat_error"
    default_message: str = "Document QA failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class ModelUnavailable(DocChatError):
    """The embedding model has not finished loading."""

    code = "model_unavailable"
    default_message = "Embedding model not ready yet. Try again in a few seconds."


class ExtractionFailure(DocChatError):
    """The uploaded document could not be read."""

    code = "extraction_failure"
    default_message = "Could not extract text from the document"


class EmptyStore(DocChatError):
    """A question was asked before any document was ingested."""

    code = "empty_store"
    default_message = "No document uploaded yet"


class DownstreamAnswerError(DocChatError):
    """The language-model call failed."""

    code = "downstream_answer_error"
    default_message = "The language model failed to produce an answer"


class DownstreamTimeout(DocChatError):
    """An embedding or language-model call exceeded its timeout."""

    code = "downstream_timeout"
    default_message = "A downstream model call timed out"


class DimensionMismatch(DocChatError, ValueError):
    """An embedding's length differs from the vectors already in the store."""

    code = "dimension_mismatch"
    default_message = "Embedding dimensionality does not match the store"
