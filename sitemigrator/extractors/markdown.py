"""Convert page HTML to markdown.

Two engines are available:

``pandoc``
    Shells out to ``pandoc -f html -t markdown --wrap=none``.  Its output
    keeps ``::: {.class}`` div markers, which the content normaliser uses to
    find navigation and footer regions.  This is the default.
``markdownify``
    In-process conversion with ATX headings.  Navigation, footer and form
    elements are removed from the tree first since no div markers survive.

Both engines return ``""`` on failure instead of raising.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Callable

from sitemigrator import settings

logger = logging.getLogger(__name__)

_SPAN_TAG_RE = re.compile(r"</?span[^>]*>", re.IGNORECASE)
_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)

_DROP_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "form")
_DROP_CLASS_MARKERS = ("navbar", "drawer", "breadcrumb", "footer", "widget_section")


class PandocNotFoundError(RuntimeError):
    """Raised when the pandoc engine is selected but the binary is missing."""


def check_pandoc() -> str:
    """Return the pandoc executable path or raise :class:`PandocNotFoundError`."""
    path = shutil.which("pandoc")
    if not path:
        raise PandocNotFoundError(
            "pandoc is not installed or not on PATH. "
            "Install it from https://pandoc.org/installing.html "
            "or rerun with --converter markdownify."
        )
    return path


def strip_spans(html: str) -> str:
    """Remove ``<span>`` tags (keeping their text) so pandoc emits no bracketed spans."""
    return _SPAN_TAG_RE.sub("", html)


# ---------------------------------------------------------------------------
# pandoc
# ---------------------------------------------------------------------------

def pandoc_to_markdown(html: str) -> str:
    try:
        result = subprocess.run(
            ["pandoc", *settings.PANDOC_ARGS],
            input=strip_spans(html),
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        logger.error("pandoc failed (exit %d): %s", exc.returncode, (exc.stderr or "").strip())
        return ""
    except OSError as exc:
        logger.error("Could not run pandoc: %s", exc)
        return ""
    return result.stdout


# ---------------------------------------------------------------------------
# markdownify
# ---------------------------------------------------------------------------

def _has_marker_class(tag: object) -> bool:
    getter = getattr(tag, "get", None)
    classes = (getter("class") if getter else None) or []
    if isinstance(classes, str):
        classes = classes.split()
    return any(m in cls for cls in classes for m in _DROP_CLASS_MARKERS)


def html_to_markdown(html: str) -> str:
    """Convert *html* with markdownify after removing page chrome."""
    if not html or not html.strip():
        return ""

    from bs4 import BeautifulSoup
    from markdownify import markdownify  # type: ignore[import-untyped]

    soup = BeautifulSoup(strip_spans(html), "lxml")
    for tag in [*soup.find_all(list(_DROP_TAGS)), *soup.find_all(_has_marker_class)]:
        if not tag.decomposed:
            tag.decompose()

    body = soup.body or soup
    try:
        md = markdownify(str(body), heading_style="ATX", bullets="-")
    except Exception as exc:
        logger.error("markdownify failed: %s", exc)
        return ""

    md = _TRAILING_WHITESPACE_RE.sub("", md)
    md = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", md)
    return md.strip() + "\n"


_ENGINES: dict[str, Callable[[str], str]] = {
    "pandoc": pandoc_to_markdown,
    "markdownify": html_to_markdown,
}


def get_converter(name: str) -> Callable[[str], str]:
    """Look up a conversion engine by name; pandoc is checked for availability."""
    try:
        engine = _ENGINES[name]
    except KeyError:
        raise ValueError(f"Unknown converter {name!r}; choose from {sorted(_ENGINES)}") from None
    if name == "pandoc":
        check_pandoc()
    return engine
