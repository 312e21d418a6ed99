"""Error taxonomy for InvoiceFinder."""

from __future__ import annotations

from pathlib import Path


class InvoiceFinderError(Exception):
    """Base class for all InvoiceFinder errors."""


class TokenSourceError(InvoiceFinderError):
    """The token CSV is missing, unreadable or lacks the search column."""


class ExtractionError(InvoiceFinderError):
    """Text could not be extracted from a document."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class EncryptedDocumentError(ExtractionError):
    """The document is password protected."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, "document is encrypted")
