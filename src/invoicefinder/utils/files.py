"""Utility helpers for discovering candidate files."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterator

LOGGER = logging.getLogger(__name__)


def _log_walk_error(error: OSError) -> None:
    LOGGER.error("Error walking through directory %s: %s", error.filename, error.strerror or error)


def iter_candidate_paths(root: Path, extension: str = ".pdf") -> Iterator[Path]:
    """Yield regular files under ``root`` whose name ends with ``extension``.

    The suffix test is case-insensitive. Unreadable subdirectories and
    entries that cannot be stat-ed are logged and skipped; the walk carries
    on with everything else it can reach.
    """
    suffix = extension.lower()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            if not name.lower().endswith(suffix):
                continue
            path = Path(dirpath) / name
            try:
                is_regular = stat.S_ISREG(path.stat().st_mode)
            except OSError as exc:
                LOGGER.error("Cannot stat %s: %s", path, exc.strerror or exc)
                continue
            if is_regular:
                yield path
