"""Text helpers shared by token loading and extraction."""

from __future__ import annotations

from typing import Iterable, Iterator


def is_ascii(text: str) -> bool:
    """Return True when every character has a code point below 128."""
    return all(ord(char) < 128 for char in text)


def normalize_lines(lines: Iterable[str]) -> Iterator[str]:
    """Strip and lowercase lines, dropping the blank ones."""
    for line in lines:
        stripped = line.strip()
        if stripped:
            yield stripped.lower()
