"""Post-run checks on the collected items and on the files written to disk.

Every check returns a list of human-readable failures; an empty list means
the output is safe to publish.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from sitemigrator import settings
from sitemigrator.items import ContentItem, ExportCollection

logger = logging.getLogger(__name__)

FILENAME_RE = re.compile(r"^[a-z0-9-]+\.md$")
_LEADING_H1_RE = re.compile(r"^#[ \t]+\S")
_LOCAL_IMAGE_RE = re.compile(r"""(?<![\w.:/-])/images/[^\s)"'\]]+""")

# Collections whose bodies must open with a top-level heading; review bodies
# are testimonial text.
HEADED_COLLECTIONS = ("pages", "news", "products", "categories")
_REVIEW_FIELDS = ("name", "products", "rating")


def split_document(text: str) -> tuple[str, str] | None:
    """Split ``---\\n...\\n---\\n\\nbody`` into (front matter, body)."""
    if not text.startswith("---"):
        return None
    end = text.find("\n---", 3)
    if end == -1:
        return None
    close = end + len("\n---")
    return text[:close], text[close:].strip()


def _frontmatter_failures(label: str, frontmatter: str) -> list[str]:
    if not frontmatter.startswith("---"):
        return [f"{label}: front matter does not start with ---"]
    if "\n---" not in frontmatter[3:]:
        return [f"{label}: front matter has no closing ---"]
    inner = frontmatter[3 : frontmatter.rindex("\n---")]
    try:
        parsed = yaml.safe_load(inner)
    except yaml.YAMLError as exc:
        return [f"{label}: front matter is not valid YAML ({exc.__class__.__name__})"]
    except ValueError as exc:
        return [f"{label}: front matter has an invalid value ({exc})"]
    if not isinstance(parsed, dict):
        return [f"{label}: front matter is not a mapping"]
    return []


def _image_refs(values: Iterable[Any]) -> Iterable[str]:
    for value in values:
        if isinstance(value, str):
            yield from _LOCAL_IMAGE_RE.findall(value)
        elif isinstance(value, dict):
            yield from _image_refs(value.values())
        elif isinstance(value, list):
            yield from _image_refs(value)


def missing_images(texts: Iterable[Any], out_dir: Path) -> list[str]:
    return sorted({ref for ref in _image_refs(texts) if not (out_dir / ref.lstrip("/")).is_file()})


# ---------------------------------------------------------------------------
# In-memory collection checks
# ---------------------------------------------------------------------------

def _item_failures(collection: str, item: ContentItem) -> list[str]:
    label = f"{collection}/{item.filename or item.slug or '?'}"
    failures: list[str] = []

    for name in ("slug", "filename", "content", "frontmatter"):
        if not getattr(item, name):
            failures.append(f"{label}: missing {name}")
    if collection == "reviews":
        for name in _REVIEW_FIELDS:
            if name not in item.metadata:
                failures.append(f"{label}: missing {name}")
        if not isinstance(item.metadata.get("products"), list):
            failures.append(f"{label}: products is not a list")

    if item.filename and not FILENAME_RE.match(item.filename):
        failures.append(f"{label}: filename does not match {FILENAME_RE.pattern}")
    if item.frontmatter:
        failures += _frontmatter_failures(label, item.frontmatter)
    if collection == "products" and "\nprice:" not in item.frontmatter:
        failures.append(f"{label}: product front matter has no price")
    if collection in HEADED_COLLECTIONS and not _LEADING_H1_RE.match(item.content.strip()):
        failures.append(f"{label}: body does not start with a top-level heading")
    return failures


def validate_export(export: ExportCollection, out_dir: str | Path) -> list[str]:
    """Check the collected items against the publishing invariants."""
    out_dir = Path(out_dir)
    failures: list[str] = []

    for name in export.COLLECTIONS:
        if not isinstance(export.collection(name), list):
            failures.append(f"{name} is not a list")

    try:
        datetime.fromisoformat(export.metadata.exported_at)
    except ValueError:
        failures.append(f"metadata.exported_at is not ISO-8601: {export.metadata.exported_at!r}")
    if export.metadata.format_version != settings.FORMAT_VERSION:
        failures.append(f"metadata.format_version should be {settings.FORMAT_VERSION}")

    if not any(export.collection(name) for name in HEADED_COLLECTIONS):
        failures.append("no content was collected")

    for name in export.COLLECTIONS:
        dupes = [s for s, n in Counter(i.slug for i in export.collection(name)).items() if n > 1]
        failures += [f"{name}: duplicate slug {s!r}" for s in dupes]

    filenames = Counter(item.filename for _, item in export.iter_items())
    failures += [f"duplicate filename across collections: {f!r}" for f, n in filenames.items() if n > 1]

    for collection, item in export.iter_items():
        failures += _item_failures(collection, item)

    texts: list[Any] = [t for _, item in export.iter_items() for t in (item.frontmatter, item.content)]
    if export.home:
        texts.append(export.home)
    failures += [f"missing image file: {ref}" for ref in missing_images(texts, out_dir)]

    return failures


# ---------------------------------------------------------------------------
# On-disk checks (markdown mode)
# ---------------------------------------------------------------------------

def validate_markdown_tree(out_dir: str | Path) -> list[str]:
    """Re-read every written ``.md`` file and check it stands on its own."""
    out_dir = Path(out_dir)
    failures: list[str] = []
    texts: list[str] = []

    for collection, dirname in settings.OUTPUT_DIRS.items():
        directory = out_dir / dirname
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob("*.md")):
            label = f"{dirname}/{path.name}"
            text = path.read_text(encoding="utf-8")
            texts.append(text)
            if not FILENAME_RE.match(path.name):
                failures.append(f"{label}: filename does not match {FILENAME_RE.pattern}")
            parts = split_document(text)
            if parts is None:
                failures.append(f"{label}: no delimited front matter")
                continue
            frontmatter, body = parts
            failures += _frontmatter_failures(label, frontmatter)
            if collection in HEADED_COLLECTIONS and not _LEADING_H1_RE.match(body):
                failures.append(f"{label}: body does not start with a top-level heading")
            if collection == "products" and "\nprice:" not in frontmatter:
                failures.append(f"{label}: product front matter has no price")
            if collection == "reviews":
                failures += [
                    f"{label}: missing {name}" for name in _REVIEW_FIELDS
                    if f"\n{name}:" not in frontmatter
                ]

    failures += [f"missing image file: {ref}" for ref in missing_images(texts, out_dir)]
    return failures
