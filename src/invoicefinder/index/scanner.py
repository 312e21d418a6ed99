"""Concurrent scan of a directory tree for token matches."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Sequence, Set

from invoicefinder.errors import EncryptedDocumentError, ExtractionError
from invoicefinder.index.matcher import MatchPolicy, TokenMatcher
from invoicefinder.ingestion.pdf_loader import extract_lines
from invoicefinder.models import FileOutcome, ScanResult, ScanStats
from invoicefinder.utils.files import iter_candidate_paths

LOGGER = logging.getLogger(__name__)

Extractor = Callable[[Path], Sequence[str]]


class MatchAccumulator:
    """Thread-safe token -> file-set map built from per-file outcomes.

    Merging is a set union per token, so the final content does not depend
    on the order in which outcomes arrive.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._matches: Dict[str, Set[Path]] = {}
        self.stats = ScanStats()

    def merge(self, outcome: FileOutcome) -> None:
        with self._lock:
            self.stats.record(outcome)
            for token in outcome.tokens:
                self._matches.setdefault(token, set()).add(outcome.path)

    def snapshot(self) -> Dict[str, FrozenSet[Path]]:
        with self._lock:
            return {token: frozenset(paths) for token, paths in self._matches.items()}


def process_file(path: Path, matcher: TokenMatcher, extractor: Extractor | None = None) -> FileOutcome:
    """Extract and match a single file. Never raises."""
    try:
        lines = (extractor or extract_lines)(path)
    except EncryptedDocumentError:
        LOGGER.warning("PDF file is encrypted: %s", path)
        return FileOutcome(path=path, error="encrypted")
    except ExtractionError as exc:
        LOGGER.warning("Error reading PDF file %s: %s", path, exc.reason)
        return FileOutcome(path=path, error=exc.reason)
    except Exception as exc:
        LOGGER.warning("Unexpected error processing %s: %s", path, exc)
        return FileOutcome(path=path, error=str(exc) or type(exc).__name__)

    try:
        tokens = matcher.match(path.name, lines)
    except Exception as exc:
        LOGGER.warning("Error matching %s: %s", path, exc)
        return FileOutcome(path=path, error=str(exc) or type(exc).__name__)
    if tokens:
        LOGGER.debug("%s matched %d token(s)", path, len(tokens))
    return FileOutcome(path=path, tokens=tokens)


class Scanner:
    """Walks a directory tree and matches every candidate on a bounded pool."""

    def __init__(
        self,
        tokens: Iterable[str],
        *,
        workers: int,
        extension: str = ".pdf",
        policy: MatchPolicy = MatchPolicy.WORD,
        extractor: Extractor | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.matcher = TokenMatcher(tokens, policy)
        self.workers = workers
        self.extension = extension
        self.extractor = extractor
        self.cancel_event = cancel_event

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def scan(self, root: Path) -> ScanResult:
        """Scan ``root`` and return once every dispatched file is merged."""
        accumulator = MatchAccumulator()
        # Bounds the number of queued tasks; the walk blocks while the pool is saturated.
        slots = threading.BoundedSemaphore(self.workers * 2)
        dispatched = 0

        def _on_done(future: Future[FileOutcome]) -> None:
            try:
                accumulator.merge(future.result())
            finally:
                slots.release()

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="scan") as executor:
            for path in iter_candidate_paths(root, self.extension):
                if self._cancelled():
                    LOGGER.info("Scan cancelled, no further files will be dispatched")
                    break
                slots.acquire()
                dispatched += 1
                future = executor.submit(process_file, path, self.matcher, self.extractor)
                future.add_done_callback(_on_done)
        # Leaving the executor joins the workers, so every callback has merged.

        stats = accumulator.stats
        stats.dispatched = dispatched
        stats.cancelled = self._cancelled()
        LOGGER.info(
            "Scanned %d file(s) under %s: %d ok, %d failed",
            stats.dispatched,
            root,
            stats.scanned,
            stats.failed,
        )
        return ScanResult(matches=accumulator.snapshot(), stats=stats)


def scan(
    root: Path,
    tokens: Iterable[str],
    worker_count: int,
    *,
    extension: str = ".pdf",
    policy: MatchPolicy = MatchPolicy.WORD,
    extractor: Extractor | None = None,
    cancel_event: threading.Event | None = None,
) -> ScanResult:
    return Scanner(
        tokens,
        workers=worker_count,
        extension=extension,
        policy=policy,
        extractor=extractor,
        cancel_event=cancel_event,
    ).scan(root)


def merge_outcomes(outcomes: Iterable[FileOutcome]) -> Mapping[str, FrozenSet[Path]]:
    """Fold outcomes into an aggregated map without a pool."""
    accumulator = MatchAccumulator()
    for outcome in outcomes:
        accumulator.merge(outcome)
    return accumulator.snapshot()
