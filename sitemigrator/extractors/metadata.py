"""Template-specific field extraction from mirrored HTML.

Every extractor here takes the raw page HTML (a few take the converted
markdown) and returns a value or an empty sentinel.  A missing pattern is a
normal outcome and never raises.

Heading priority (highest → lowest):
    active breadcrumb → og:title → first <h1>
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from bs4 import BeautifulSoup

from sitemigrator import settings
from sitemigrator.extractors.patterns import (
    TITLE_RE,
    collapse_ws,
    extract,
    link_rel,
    meta_name,
    meta_property,
)
from sitemigrator.items import Metadata

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_BREADCRUMB_ACTIVE_RE = re.compile(
    r"""<li\s+class=["']breadcrumb-item\s+active["']>([^<]+)</li>""", re.IGNORECASE,
)
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_CANONICAL_NAME_RE = re.compile(r"^.*?/([^/]+)\.php.*$")

_DESCRIPTION_RE = meta_name("description")
_CANONICAL_RE = link_rel("canonical")
_OG_TITLE_RE = meta_property("og:title")
_OG_IMAGE_RE = meta_property("og:image")

_PRICE_ROW_RE = re.compile(
    r"Our Price:</th>\s*<td[^>]*>\s*&pound;([\d,]+\.?\d*)", re.IGNORECASE,
)
_PRICE_JSONLD_RE = re.compile(r'"price":"([\d,]+\.?\d*)"', re.IGNORECASE)
_PRODUCT_NAME_JSONLD_RE = re.compile(r'"@type":"Product","name":"([^"]+)"', re.IGNORECASE)

_REVIEW_TABLE_RE = re.compile(
    r'<div class="menu-heading[^>]*>Our Reviews!</div>[\s\S]*?<table[^>]*>([\s\S]*?)</table>',
)
_REVIEW_ROW_RE = re.compile(r"<tr[^>]*>([\s\S]*?)</tr>", re.IGNORECASE)
_REVIEW_NAME_RE = re.compile(r"<strong>([^<]+)</strong>")
_REVIEW_BODY_RE = re.compile(r'<div class="diblock" itemprop="description">\s*([\s\S]*?)\s*</div>')

_POSTED_DATE_RE = re.compile(r"Posted Date:\s*(?:[A-Za-z]+,\s*)?(.+?)(?:\n|$|\\)", re.MULTILINE)
_MONTH_DAY_YEAR_RE = re.compile(r"([A-Za-z]+)\s+(\d{1,2}),?\s+(\d{4})")
_MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4,
    "may": 5, "june": 6, "july": 7, "august": 8,
    "september": 9, "october": 10, "november": 11, "december": 12,
}

_MD_REMOTE_IMAGE_RE = re.compile(r"!\[.*?\]\((https?://[^)\s]+)")

_LINK_TAG_RE = re.compile(r"<link\s+([^>]*?)>", re.IGNORECASE)
_ATTR_RES = {
    name: re.compile(rf"""{name}=["']([^"']*?)["']""", re.IGNORECASE)
    for name in ("rel", "href", "sizes", "type")
}


def _decode_pound(text: str) -> str:
    return text.replace("&pound;", "£")


def _text_of(fragment: str) -> str:
    """Strip tags from an HTML *fragment* and decode every entity."""
    return BeautifulSoup(fragment, "lxml").get_text()


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

def extract_breadcrumb_text(html: str) -> str:
    m = _BREADCRUMB_ACTIVE_RE.search(html)
    return m.group(1).strip() if m else ""


def extract_content_heading(html: str) -> str:
    """Text of the first ``<h1>``, inner tags stripped."""
    m = _H1_RE.search(html)
    if not m:
        return ""
    return collapse_ws(_text_of(m.group(1)).replace("\xa0", " "))


def extract_heading(html: str) -> str:
    return (
        extract_breadcrumb_text(html)
        or extract(html, _OG_TITLE_RE)
        or extract_content_heading(html)
    )


# ---------------------------------------------------------------------------
# Generic metadata
# ---------------------------------------------------------------------------

def extract_metadata(html: str) -> Metadata:
    """Title, description, permalink and header text from generic tags."""
    permalink = None
    canonical = extract(html, _CANONICAL_RE)
    if canonical:
        m = _CANONICAL_NAME_RE.match(canonical)
        if m:
            permalink = f"/{m.group(1)}/"

    return Metadata(
        title=extract(html, TITLE_RE),
        meta_description=extract(html, _DESCRIPTION_RE),
        header_text=extract_breadcrumb_text(html) or extract(html, _OG_TITLE_RE),
        permalink=permalink,
    )


# ---------------------------------------------------------------------------
# Product fields
# ---------------------------------------------------------------------------

def extract_price(html: str) -> str:
    """Price as ``£<numeral>``; the numeral is kept verbatim (``1,199.00``)."""
    m = _PRICE_ROW_RE.search(html) or _PRICE_JSONLD_RE.search(html)
    return f"£{m.group(1)}" if m else ""


def extract_product_name(html: str) -> str:
    m = _PRODUCT_NAME_JSONLD_RE.search(html)
    if m:
        return _decode_pound(m.group(1))
    return _decode_pound(extract_breadcrumb_text(html))


def extract_category_name(html: str) -> str:
    return extract_breadcrumb_text(html)


def extract_reviews(html: str) -> list[dict[str, str]]:
    """Reviewer name and body for every complete row of the reviews table."""
    table = _REVIEW_TABLE_RE.search(html)
    if not table:
        return []

    reviews: list[dict[str, str]] = []
    for row in _REVIEW_ROW_RE.finditer(table.group(1)):
        name = extract(row.group(1), _REVIEW_NAME_RE)
        body = collapse_ws(extract(row.group(1), _REVIEW_BODY_RE))
        if name and body:
            reviews.append({"name": name, "body": body})
        else:
            logger.debug("Skipping incomplete review row: %r", row.group(0)[:80])
    return reviews


def extract_product_images(html: str) -> dict[str, Any]:
    header = extract(html, _OG_IMAGE_RE)
    return {"header_image": header, "gallery": [header] if header else []}


# ---------------------------------------------------------------------------
# Blog fields (read from converted markdown)
# ---------------------------------------------------------------------------

def extract_blog_date(markdown: str, default: str = settings.DEFAULT_DATE) -> str:
    """Publish date from a ``Posted Date: [Weekday,] Month D, YYYY`` line.

    Parsed against an explicit month table; returns *default* when the
    marker is missing or the text does not parse.
    """
    marker = _POSTED_DATE_RE.search(markdown)
    if not marker:
        return default
    m = _MONTH_DAY_YEAR_RE.search(marker.group(1).strip())
    if not m:
        return default
    month = _MONTHS.get(m.group(1).lower())
    if month is None:
        logger.debug("Unrecognised month in blog date: %r", m.group(0))
        return default
    try:
        return date(int(m.group(3)), month, int(m.group(2))).isoformat()
    except ValueError:
        logger.debug("Impossible blog date: %r", m.group(0))
        return default


def extract_blog_image(markdown: str) -> str:
    m = _MD_REMOTE_IMAGE_RE.search(markdown)
    return m.group(1) if m else ""


# ---------------------------------------------------------------------------
# Favicons
# ---------------------------------------------------------------------------

def extract_favicon_links(html: str) -> list[dict[str, str | None]]:
    """Every ``<link>`` whose rel mentions ``icon`` or ``apple-touch``."""
    links: list[dict[str, str | None]] = []
    for tag in _LINK_TAG_RE.finditer(html):
        attrs = tag.group(1)
        rel_m = _ATTR_RES["rel"].search(attrs)
        if not rel_m:
            continue
        rel = rel_m.group(1).lower()
        if "icon" not in rel and "apple-touch" not in rel:
            continue
        href_m = _ATTR_RES["href"].search(attrs)
        if not href_m:
            continue
        sizes_m = _ATTR_RES["sizes"].search(attrs)
        type_m = _ATTR_RES["type"].search(attrs)
        links.append({
            "rel": rel,
            "href": href_m.group(1),
            "sizes": sizes_m.group(1) if sizes_m else None,
            "type": type_m.group(1) if type_m else None,
        })
    return links
