"""PDF text extraction.

Uses PyMuPDF (fitz) to pull text page by page and hands it to the matcher
as lowercased lines.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

import fitz  # PyMuPDF

from invoicefinder.errors import EncryptedDocumentError, ExtractionError
from invoicefinder.utils.text import normalize_lines

LOGGER = logging.getLogger(__name__)


def iter_text_lines(path: Path) -> Iterator[str]:
    """Yield lowercased, non-blank text lines from a PDF file page by page.

    Raises ``ExtractionError`` if the document cannot be opened and
    ``EncryptedDocumentError`` if it requires a password. A page that fails
    to render is logged and skipped.
    """
    try:
        doc = fitz.open(path)
    except Exception as exc:
        raise ExtractionError(path, f"failed to open PDF: {exc}") from exc

    try:
        if doc.needs_pass:
            raise EncryptedDocumentError(path)
        for index in range(len(doc)):
            try:
                text = doc[index].get_text() or ""
            except Exception as exc:
                LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
                continue
            yield from normalize_lines(text.splitlines())
    finally:
        doc.close()


def extract_lines(path: Path) -> List[str]:
    """Extract all text lines of a PDF."""
    return list(iter_text_lines(path))
