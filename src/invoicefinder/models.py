"""Core InvoiceFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Mapping


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """Result of processing one candidate file.

    ``error`` is set when extraction failed; ``tokens`` is then empty.
    """

    path: Path
    tokens: FrozenSet[str] = frozenset()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ScanStats:
    dispatched: int = 0
    scanned: int = 0
    failed: int = 0
    cancelled: bool = False
    errors: Dict[Path, str] = field(default_factory=dict)

    def record(self, outcome: FileOutcome) -> None:
        if outcome.ok:
            self.scanned += 1
        else:
            self.failed += 1
            self.errors[outcome.path] = outcome.error or ""


@dataclass(slots=True)
class ScanResult:
    """Aggregated token -> files map plus scan statistics."""

    matches: Mapping[str, FrozenSet[Path]]
    stats: ScanStats


@dataclass(slots=True)
class CopyStats:
    copied: int = 0
    skipped: int = 0
    failed: int = 0
