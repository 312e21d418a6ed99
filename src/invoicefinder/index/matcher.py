"""Token matching against a file's name and extracted text."""

from __future__ import annotations

import re
from enum import Enum
from typing import FrozenSet, Iterable, Sequence, Tuple


class MatchPolicy(str, Enum):
    """How tokens are matched against document content.

    Filenames are always matched by substring: identifiers are usually
    embedded in them without separators.
    """

    WORD = "word"
    SUBSTRING = "substring"


def word_pattern(token: str) -> re.Pattern[str]:
    """Compile a pattern matching ``token`` as a delimited whole word."""
    return re.compile(r"(?<!\w)" + re.escape(token) + r"(?!\w)")


class TokenMatcher:
    """Immutable matcher over a fixed token set, safe to share between threads."""

    __slots__ = ("_tokens", "_patterns", "policy")

    def __init__(self, tokens: Iterable[str], policy: MatchPolicy = MatchPolicy.WORD) -> None:
        self.policy = MatchPolicy(policy)
        self._tokens: Tuple[str, ...] = tuple(sorted(set(tokens)))
        if self.policy is MatchPolicy.WORD:
            self._patterns = tuple(word_pattern(token) for token in self._tokens)
        else:
            self._patterns = ()

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    def _in_content(self, index: int, lines: Sequence[str]) -> bool:
        # any() stops at the first hit
        if self.policy is MatchPolicy.WORD:
            search = self._patterns[index].search
            return any(search(line) for line in lines)
        token = self._tokens[index]
        return any(token in line for line in lines)

    def match(self, filename: str, lines: Sequence[str]) -> FrozenSet[str]:
        """Return the tokens found in ``filename`` or ``lines``.

        ``lines`` are expected to be lowercased already.
        """
        if not self._tokens:
            return frozenset()
        name = filename.lower()
        found = set()
        for index, token in enumerate(self._tokens):
            if token in name or self._in_content(index, lines):
                found.add(token)
        return frozenset(found)


def match_file(
    filename: str,
    lines: Sequence[str],
    tokens: Iterable[str],
    policy: MatchPolicy = MatchPolicy.WORD,
) -> FrozenSet[str]:
    return TokenMatcher(tokens, policy).match(filename, lines)
