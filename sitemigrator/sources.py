"""Mirror directory access: listing source pages and deriving slugs."""

from __future__ import annotations

import logging
from pathlib import Path

from sitemigrator import settings

logger = logging.getLogger(__name__)


def slug_from_filename(filename: str) -> str:
    """``about-us.php.html`` → ``about-us``"""
    for suffix in settings.SOURCE_SUFFIXES:
        if filename.endswith(suffix):
            return filename[: -len(suffix)]
    return Path(filename).stem


def list_html_files(directory: str | Path) -> list[Path]:
    """Sorted ``*.html`` files directly under *directory*.

    A missing directory yields an empty list.
    """
    path = Path(directory)
    if not path.is_dir():
        logger.debug("Source directory %s not found; nothing to convert", path)
        return []
    return sorted(p for p in path.iterdir() if p.is_file() and p.name.endswith(".html"))


def read_html(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")
