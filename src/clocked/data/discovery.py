"""Discover Claude project directories."""

from __future__ import annotations

import logging
from pathlib import Path

from clocked.data.paths import SUBSTITUTE

logger = logging.getLogger(__name__)


def discover_project_dirs(root: Path) -> list[str]:
    """List encoded project directory names under ``root``, sorted by name.

    Only real directories whose names start with the path substitute character
    are returned. A missing or unreadable root yields an empty list.
    """
    if not root.is_dir():
        logger.info("Claude projects directory not found: %s", root)
        return []

    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        logger.warning("Failed to read %s: %s", root, exc)
        return []

    return [
        entry.name
        for entry in entries
        if entry.name.startswith(SUBSTITUTE) and entry.is_dir()
    ]
