"""Run configuration: settings defaults → options file → CLI overrides."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from sitemigrator import settings

logger = logging.getLogger(__name__)

# Option files written for the older importer use camelCase keys.
_OPTION_ALIASES = {
    "categoriesInNavigation": "categories_in_navigation",
    "defaultDate": "default_date",
    "siteName": "site_name",
    "findReplace": "find_replace",
    "productOrder": "product_order",
    "imageTimeout": "image_timeout",
}


class ImportConfig(BaseModel):
    """Resolved configuration for one import run."""

    site_dir: Path = Path(settings.SITE_DIR)
    out_dir: Path = Path(settings.OUTPUT_DIR)
    url: str | None = None
    output_format: Literal["markdown", "json"] = "markdown"
    converter: Literal["pandoc", "markdownify"] = settings.CONVERTER  # type: ignore[assignment]

    site_name: str = settings.SITE_NAME
    default_date: str = settings.DEFAULT_DATE
    categories_in_navigation: bool = settings.CATEGORIES_IN_NAVIGATION
    product_order: dict[str, int] = Field(default_factory=lambda: dict(settings.PRODUCT_ORDER))
    find_replace: list[tuple[str, str]] = Field(
        default_factory=lambda: list(settings.FIND_REPLACE),
    )
    image_timeout: float = settings.IMAGE_TIMEOUT
    keep_images: bool = False
    validate_output: bool = True

    @field_validator("default_date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        parts = v.split("-")
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            raise ValueError(f"default_date must be YYYY-MM-DD, got {v!r}")
        return v

    @field_validator("find_replace", mode="before")
    @classmethod
    def _coerce_pairs(cls, v: Any) -> Any:
        # Accept {"find": ..., "replace": ...} mappings as well as 2-item lists.
        if isinstance(v, dict):
            return list(v.items())
        if isinstance(v, list):
            return [
                (p["find"], p["replace"]) if isinstance(p, dict) else tuple(p)
                for p in v
            ]
        return v

    @property
    def images_dir(self) -> Path:
        return self.out_dir / settings.IMAGES_DIR


def load_options(path: str | Path) -> dict[str, Any]:
    """Read an options file (YAML or JSON) into a flat dict of known keys."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Options file {path} must contain a mapping")

    known = set(ImportConfig.model_fields)
    options: dict[str, Any] = {}
    for key, value in data.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in known:
            logger.debug("Ignoring unknown option %r in %s", key, path)
            continue
        options[name] = value
    return options


def build_config(
    options_path: str | Path | None = None,
    **overrides: Any,
) -> ImportConfig:
    """Layer an options file and explicit overrides on top of the defaults.

    Overrides whose value is ``None`` are treated as "not given" so argparse
    namespaces can be passed straight through.
    """
    merged: dict[str, Any] = {}
    if options_path:
        merged.update(load_options(options_path))
        logger.debug("Loaded options from %s: %s", options_path, sorted(merged))
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return ImportConfig(**merged)
