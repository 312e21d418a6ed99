"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass

from invoicefinder.index.matcher import MatchPolicy
from invoicefinder.output.sink import TokenCase
from invoicefinder.tokens import DEFAULT_COLUMN


@dataclass(slots=True)
class AppConfig:
    search_column: str = DEFAULT_COLUMN
    extension: str = ".pdf"
    match_policy: MatchPolicy = MatchPolicy.WORD
    token_case: TokenCase = TokenCase.STORED

    def __post_init__(self) -> None:
        if not self.extension.startswith("."):
            self.extension = f".{self.extension}"
        self.extension = self.extension.lower()
        self.match_policy = MatchPolicy(self.match_policy)
        self.token_case = TokenCase(self.token_case)
