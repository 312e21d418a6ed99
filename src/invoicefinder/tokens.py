"""Search token loading and normalization."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List

from invoicefinder.errors import TokenSourceError
from invoicefinder.utils.text import is_ascii

LOGGER = logging.getLogger(__name__)

DEFAULT_COLUMN = "Invoice #"


def normalize_token(raw: str) -> str:
    return raw.strip().lower()


def load_tokens(raw_tokens: Iterable[str]) -> FrozenSet[str]:
    """Build the token set from raw column values.

    Tokens are trimmed and lowercased. Blank values and values containing
    non-ASCII characters are dropped; duplicates collapse.
    """
    tokens = set()
    for raw in raw_tokens:
        token = normalize_token(raw)
        if not token:
            continue
        if not is_ascii(token):
            LOGGER.debug("Dropping non-ASCII token %r", token)
            continue
        tokens.add(token)
    return frozenset(tokens)


def read_tokens_csv(path: Path, column: str = DEFAULT_COLUMN) -> List[str]:
    """Return the raw values of ``column`` from a CSV file with a header row."""
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if reader.fieldnames is None:
                raise TokenSourceError(f"CSV file is empty: {path}")
            headers = {name.strip(): name for name in reader.fieldnames if name is not None}
            if column not in headers:
                raise TokenSourceError(
                    f"Column {column!r} not found in {path} (found: {', '.join(headers) or 'none'})"
                )
            key = headers[column]
            values = [row[key] for row in reader if row.get(key) is not None]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        LOGGER.error("Error reading CSV file %s: %s", path, exc)
        raise TokenSourceError(f"Cannot read CSV file {path}: {exc}") from exc

    LOGGER.info("Read %d values from column %r of %s", len(values), column, path)
    return values
