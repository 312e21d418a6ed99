"""Copying matched files and reporting unmatched tokens."""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, List, Mapping

from invoicefinder.models import CopyStats

LOGGER = logging.getLogger(__name__)


class TokenCase(str, Enum):
    """Casing of the token prefix in copied file names."""

    STORED = "stored"
    UPPER = "upper"


def target_name(token: str, source: Path, case: TokenCase = TokenCase.STORED) -> str:
    """Return ``{TOKEN}_{stem}{suffix}`` for a copy of ``source``."""
    prefix = token.upper() if TokenCase(case) is TokenCase.UPPER else token
    return f"{prefix}_{source.stem}{source.suffix}"


def copy_matches(
    matches: Mapping[str, FrozenSet[Path]],
    target_dir: Path,
    case: TokenCase = TokenCase.STORED,
) -> CopyStats:
    """Copy every matched file into ``target_dir`` once per matching token.

    Existing destinations are left untouched, so repeated runs copy nothing
    new.
    """
    stats = CopyStats()
    target_dir.mkdir(parents=True, exist_ok=True)
    for token in sorted(matches):
        for source in sorted(matches[token]):
            destination = target_dir / target_name(token, source, case)
            if destination.exists():
                LOGGER.debug("Skipping existing copy %s", destination)
                stats.skipped += 1
                continue
            try:
                shutil.copy2(source, destination)
            except OSError as exc:
                LOGGER.warning("Error copying file %s: %s", source, exc)
                stats.failed += 1
                continue
            stats.copied += 1
    LOGGER.info(
        "Copied %d file(s) to %s (%d already present, %d failed)",
        stats.copied,
        target_dir,
        stats.skipped,
        stats.failed,
    )
    return stats


def unmatched_tokens(tokens: Iterable[str], matches: Mapping[str, FrozenSet[Path]]) -> List[str]:
    return sorted(token for token in set(tokens) if not matches.get(token))


def write_unmatched(
    tokens: Iterable[str],
    matches: Mapping[str, FrozenSet[Path]],
    output_file: Path,
) -> List[str]:
    """Write tokens with no matching file to ``output_file``, one per line."""
    unmatched = unmatched_tokens(tokens, matches)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with output_file.open("w", encoding="utf-8", newline="\n") as handle:
        for token in unmatched:
            handle.write(token + "\n")
    LOGGER.info("Wrote %d unmatched token(s) to %s", len(unmatched), output_file)
    return unmatched
