"""Domain models for stored chunks, ranked hits and answers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

PREVIEW_LENGTH = 80
PREVIEW_SUFFIX = "..."


class Chunk(BaseModel):
    """A bounded slice of one page's text together with its embedding.

    Attributes
    ----------
    id:
        Identifier assigned at ingestion, monotonically increasing.
    page:
        1-indexed source page the text was extracted from.
    text:
        The chunk text; never blank.
    embedding:
        Dense vector produced by the embedding model.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str
    page: int = Field(ge=1)
    text: str
    embedding: tuple[float, ...]

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("chunk text must not be blank")
        return value


class ScoredChunk(BaseModel):
    """A chunk ranked against a query; never persisted."""

    model_config = ConfigDict(frozen=True)

    chunk: Chunk
    score: float

    @property
    def text(self) -> str:
        return self.chunk.text

    @property
    def page(self) -> int:
        return self.chunk.page


def make_preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Return the first *length* characters of *text* followed by ``...``.

    The suffix is appended even when *text* is not truncated.
    """
    return text[:length] + PREVIEW_SUFFIX


class Citation(BaseModel):
    """Short preview of a retrieved chunk plus its source page."""

    preview: str
    page: int

    @classmethod
    def from_scored(cls, hit: ScoredChunk) -> Citation:
        return cls(preview=make_preview(hit.text), page=hit.page)


class Answer(BaseModel):
    """Generated answer together with the chunks that grounded it."""

    answer: str
    citations: list[Citation] = Field(default_factory=list)


class IngestResult(BaseModel):
    """Outcome of indexing one uploaded document."""

    chunk_count: int
    page_count: int = 0
    filename: str = ""
