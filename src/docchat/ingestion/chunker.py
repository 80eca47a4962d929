"""Fixed-width text chunking."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_CHUNK_SIZE = 1000


def split_text(text: str, size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Cut *text* into consecutive slices of at most *size* characters."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [text[i : i + size] for i in range(0, len(text), size)]


def chunk_pages(
    pages: Iterable[tuple[int, str]],
    max_chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[tuple[int, str]]:
    """Split each page into fixed-width chunks tagged with the page number.

    Parameters
    ----------
    pages:
        ``(page_number, text)`` pairs in document order.  Texts are
        expected to be trimmed and non-empty.
    max_chunk_size:
        Maximum number of characters per chunk.  Splits ignore word and
        sentence boundaries, so offsets are exact multiples of this value.

    Returns
    -------
    list[tuple[int, str]]
        ``(page_number, chunk_text)`` pairs, pages in input order and
        chunks in text order within each page.
    """
    return [
        (page_number, piece)
        for page_number, text in pages
        for piece in split_text(text, max_chunk_size)
    ]
