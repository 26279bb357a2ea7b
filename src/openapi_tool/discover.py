"""Expand input paths and glob patterns into a list of files."""

import glob
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def expand_patterns(patterns: list[str] | tuple[str, ...]) -> list[Path]:
    """Expand each pattern and return the matching files, without duplicates.

    Matches of a single pattern are sorted; patterns keep their given order.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        matches = sorted(glob.glob(pattern, recursive=True))
        if not matches:
            logger.debug("Pattern %r matched no files", pattern)
        for match in matches:
            path = Path(match)
            if not path.is_file():
                continue
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            files.append(path)
    return files
