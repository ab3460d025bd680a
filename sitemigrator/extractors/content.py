"""Trim converted markdown down to the page body and clean conversion artifacts.

Two passes:

1. ``extract_main_content`` walks the markdown line by line and keeps only
   the main content region (navigation, reviews, contact forms and the
   footer are dropped).
2. ``clean_content`` applies type-specific and universal regex cleanups.

``process_content`` runs both and, for products, swaps the specification and
price sections for blocks rebuilt from the source HTML tables.
"""

from __future__ import annotations

import logging
import re

from sitemigrator import settings
from sitemigrator.extractors.tables import extract_price_table, extract_specification_table

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Line markers
# ---------------------------------------------------------------------------

_NAV_MARKERS = ("navbar", "drawer", "breadcrumb")
_FOOTER_MARKERS = ("footer", "widget_section")
_FORM_LABELS = (
    "**Name: \\*",
    "**Phone: \\*",
    "**Email: \\*",
    "**Product Enquiry:",
    "**Your Postcode:",
    "**Message:",
    "**Captcha:",
)
_REVIEWS_MARKER = "Our Reviews!"
_PRICES_MARKER = "Our Prices!"
_TOP_HEADING_RE = re.compile(r"^# [A-Z]")

# Line fragments that open the main content region, per content type.
_START_MARKERS: dict[str, tuple[str, ...]] = {
    "blog": ("# ", "Posted By:"),
}
_DEFAULT_START_MARKERS = ("# ",)

# ---------------------------------------------------------------------------
# Cleanup patterns
# ---------------------------------------------------------------------------

_RESULTS_GRID_RE = re.compile(r"####\s+Showing\s+\d+\s+results[\s\S]*\Z", re.IGNORECASE)
_PRODUCT_CARD_RE = re.compile(
    r"\[\]\([^)]*/products/[^)]+\.php\.html[^)]*\)[\s\S]*?\[More Details\]\([^)]+\)",
)
_H4_LINE_RE = re.compile(r"^####\s+.+$", re.MULTILINE)

# Applied in order to every content type.
_UNIVERSAL_CLEANUPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"Posted By:.*?\n"), ""),
    (re.compile(r"^\[\s*Back [Tt]o\s+[^\]]+\]\([^)]+\)(\{[^}]+\})?\s*$", re.MULTILINE), ""),
    (re.compile(r"^:::\s*.*$", re.MULTILINE), ""),
    (re.compile(r"\{[^}]*\}"), ""),
    (re.compile(r"\[ \]"), ""),
    (re.compile(rf"^!\[.*?\]\({re.escape(settings.BROKEN_UPLOAD_URL)}\)\s*$", re.MULTILINE), ""),
    (re.compile(r"\*{3,}"), "**"),
    (re.compile(r"\*\*[ \t\u00a0]+\*\*"), "**"),
    (re.compile(r"[ \t\u00a0]+\*\*[ \t\u00a0]*$", re.MULTILINE), "**"),
    (re.compile(r"\\[ \t]*$", re.MULTILINE), ""),
    (re.compile(r"\(\.\./([^)]+?)\.[A-Za-z0-9]+\.html\)"), r"(/\1/)"),
    (re.compile(r"\n\s*\n\s*\n"), "\n\n"),
)

_SPEC_SECTION_RE = re.compile(r"Product Specifications![\s\S]*?(?=Our Prices!|\Z)", re.IGNORECASE)
_PRICE_SECTION_RE = re.compile(r"Our Prices![\s\S]*?(?=\n\n-{5,}|\Z)", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Pass 1: main content region
# ---------------------------------------------------------------------------

def extract_main_content(markdown: str, content_type: str) -> str:
    """Keep the lines between the first content marker and the footer/form."""
    start_markers = _START_MARKERS.get(content_type, _DEFAULT_START_MARKERS)
    kept: list[str] = []
    in_main = False
    in_reviews = False
    skip_next = False

    for line in markdown.split("\n"):
        if any(marker in line for marker in _NAV_MARKERS):
            skip_next = True
            continue

        if any(label in line for label in _FORM_LABELS):
            break

        if _REVIEWS_MARKER in line:
            in_reviews = True
            continue
        if in_reviews and (_PRICES_MARKER in line or _TOP_HEADING_RE.match(line)):
            in_reviews = False
        if in_reviews:
            continue

        if any(marker in line for marker in _FOOTER_MARKERS):
            break

        if any(marker in line for marker in start_markers):
            in_main = True

        if in_main and not skip_next:
            kept.append(line)
        skip_next = False

    return "\n".join(kept).strip()


# ---------------------------------------------------------------------------
# Pass 2: cleanup
# ---------------------------------------------------------------------------

def remove_product_listings(content: str) -> str:
    """Drop a category page's results grid and any leftover product cards."""
    content = _RESULTS_GRID_RE.sub("", content)
    return _PRODUCT_CARD_RE.sub("", content)


def clean_content(content: str, content_type: str) -> str:
    if content_type == "category":
        content = remove_product_listings(content)
    elif content_type == "blog":
        # Blog templates repeat the post title as an H4 breadcrumb.
        content = _H4_LINE_RE.sub("", content)

    content = content.strip()
    for pattern, replacement in _UNIVERSAL_CLEANUPS:
        content = pattern.sub(replacement, content)
    return content.strip()


def process_content(markdown: str, content_type: str, html: str | None = None) -> str:
    """Full normalisation of one converted document."""
    cleaned = clean_content(extract_main_content(markdown, content_type), content_type)

    if content_type == "product" and html:
        specs = extract_specification_table(html)
        prices = extract_price_table(html)
        cleaned = _SPEC_SECTION_RE.sub(lambda _m: specs + "\n\n", cleaned, count=1)
        cleaned = _PRICE_SECTION_RE.sub(lambda _m: prices, cleaned, count=1)
        logger.debug(
            "Spliced product tables (specs=%d chars, prices=%d chars)", len(specs), len(prices),
        )

    return cleaned
