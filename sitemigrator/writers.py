"""Serialise an :class:`ExportCollection` as a markdown tree or one JSON file."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from sitemigrator import settings
from sitemigrator.items import ExportCollection

logger = logging.getLogger(__name__)


def _write_json(path: Path, data: dict | list) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def clean_output_dirs(out_dir: Path) -> None:
    """Remove the collection directories a previous run wrote."""
    for dirname in settings.OUTPUT_DIRS.values():
        target = out_dir / dirname
        if target.exists():
            shutil.rmtree(target)


def write_markdown(export: ExportCollection, out_dir: str | Path) -> list[Path]:
    """Write every item to ``<out_dir>/<collection dir>/<filename>``."""
    out_dir = Path(out_dir)
    clean_output_dirs(out_dir)

    written: list[Path] = []
    for collection, item in export.iter_items():
        path = out_dir / settings.OUTPUT_DIRS[collection] / item.filename
        _write_text(path, item.render())
        written.append(path)
    if export.home is not None:
        _write_json(out_dir / settings.HOME_DATA_FILE, export.home)

    logger.info("Wrote %d markdown files under %s", len(written), out_dir)
    return written


def write_json(export: ExportCollection, out_dir: str | Path) -> Path:
    path = Path(out_dir) / settings.JSON_EXPORT_FILE
    _write_json(path, export.to_dict())
    logger.info("Wrote %d items to %s", export.total(), path)
    return path
