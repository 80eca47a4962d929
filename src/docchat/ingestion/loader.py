"""Document text extraction — turns uploaded bytes into numbered pages."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader

from docchat.errors import ExtractionFailure

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".md"}
PAGE_BREAK = "\f"


def extract_pages(data: bytes, filename: str) -> list[tuple[int, str]]:
    """Return ``(page_number, text)`` for every page that carries text.

    Page texts are trimmed and blank pages dropped; page numbers are the
    1-indexed positions in the source document, so a blank page leaves a
    gap in the numbering.

    Raises
    ------
    ExtractionFailure
        If the file type is unsupported or the content cannot be read.
    """
    suffix = Path(filename).suffix.lower()
    if suffix == ".pdf":
        pages = load_pdf_bytes(data)
    elif suffix in TEXT_SUFFIXES:
        pages = load_text_bytes(data)
    else:
        raise ExtractionFailure(f"Unsupported file type: {filename!r}")

    result = [(number, text.strip()) for number, text in pages if text.strip()]
    logger.info("Extracted %d non-empty page(s) from %s", len(result), filename)
    return result


def load_pdf_bytes(data: bytes) -> list[tuple[int, str]]:
    """Extract per-page text from PDF bytes with ``PyPDFLoader``."""
    # PyPDFLoader reads from a path, so the upload is spooled to disk.
    fd, path = tempfile.mkstemp(suffix=".pdf")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        documents = PyPDFLoader(path).load()
    except Exception as exc:
        raise ExtractionFailure(f"Could not read PDF: {exc}") from exc
    finally:
        os.unlink(path)

    return [
        (int(doc.metadata.get("page", index)) + 1, doc.page_content)
        for index, doc in enumerate(documents)
    ]


def load_text_bytes(data: bytes) -> list[tuple[int, str]]:
    """Decode UTF-8 text; form feeds separate pages."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ExtractionFailure(f"Text file is not valid UTF-8: {exc}") from exc
    return [(index + 1, page) for index, page in enumerate(text.split(PAGE_BREAK))]
