"""
Locate GIR documents in the configured search directories.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

GIR_SUFFIX = ".gir"


def find_file_in_dirs(directories: Iterable[Path], filename: str) -> Path | None:
    """Return the first existing ``filename`` across ``directories``."""
    for directory in directories:
        candidate = Path(directory) / filename
        if candidate.is_file():
            return candidate
    return None


def _glob_directory(directory: Path, pattern: str) -> list[Path]:
    if not directory.is_dir():
        logger.warning(f'Error on finding "{pattern}" in "{directory}": not a directory')
        return []
    try:
        # glob itself hides permission errors
        with os.scandir(directory):
            pass
        return sorted(p for p in directory.glob(pattern) if p.is_file())
    except OSError as e:
        logger.warning(f'Error on finding "{pattern}" in "{directory}": {e}')
        return []


def find_modules(
    patterns: Iterable[str],
    directories: Iterable[Path],
    ignore: Iterable[str] = (),
) -> list[str]:
    """
    Find package names matching module name patterns.

    Patterns may use wildcards, e.g. ``Gtk*`` or ``*``. Names in ``ignore``
    are dropped with a warning.

    Args:
        patterns: Module name patterns
        directories: Directories to search
        ignore: Package names to leave out

    Returns:
        Deduplicated package names in discovery order
    """
    ignored = set(ignore)
    dirs = [Path(d) for d in directories]
    found: dict[str, None] = {}

    for pattern in patterns:
        if not pattern:
            continue
        filename = f"{pattern}{GIR_SUFFIX}"
        for directory in dirs:
            for path in _glob_directory(directory, filename):
                package_name = path.name[: -len(GIR_SUFFIX)]
                if package_name in ignored:
                    logger.warning(f"Ignore {package_name}")
                    continue
                found.setdefault(package_name, None)

    return list(found)
