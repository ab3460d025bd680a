"""Home page data: banner, service cards, intro copy and "Why Choose Us" features.

The result is a plain dict written to ``_data/home_content.json``.  Image
fields hold the remote URLs found in the page; the pipeline swaps them for
relocated local paths.
"""

from __future__ import annotations

import re
from typing import Any

from sitemigrator import settings
from sitemigrator.extractors.patterns import collapse_ws

_SPECIAL_OFFER_RE = re.compile(
    r'<div class="col-12 col-md-9[^>]*>\s*<p class="m-0[^>]*>([^<]+)</p>\s*</div>\s*'
    r'<div class="col-12 col-md-3[^>]*>\s*<a href="([^"]+)"',
)
_CAROUSEL_IMAGE_RE = re.compile(r'<div class="carousel-item[^>]*>\s*<img src="([^"]+)"')
_SERVICE_CARD_RE = re.compile(
    r'<div class="col-xl-4[^>]*>[\s\S]*?<img src="([^"]+)"[^>]*>[\s\S]*?'
    r'<h3[^>]*style="color:[^"]*">([^<]+)</h3>[\s\S]*?'
    r'<p class="card-text py-2">([^<]+)</p>[\s\S]*?'
    r'<a href="([^"]+)"[^>]*>More Info</a>',
)
_HOME_SECTION_RE = re.compile(r'<section class="home-page">([\s\S]*?)</section>')
_INTRO_COLUMN_RE = re.compile(r'<div id="column_NQZ91"[^>]*>([\s\S]*?)</div>\s*<div id="column_EOJ8N"')
_PARAGRAPH_RE = re.compile(r'<p class="ql-align-justify">([^<]+(?:<[^>]+>[^<]*</[^>]+>[^<]*)*?)</p>')
_HIGHLIGHT_RE = re.compile(r'<strong[^>]*style="color:[^"]*">([^<]+)</strong>')
_FEATURE_RE = re.compile(r'<div class="text-center[^>]*><strong>([^<]+)</strong></div>')
_TAG_RE = re.compile(r"<[^>]+>")

_HIGHLIGHT_MARKER = "DBS checked"
_FEATURE_EXCLUDE = "Our Service Areas"


def page_link(href: str) -> str:
    """``contact.php.html`` → ``/contact/#content``"""
    return f"/{href.replace('.php.html', '')}/#content"


def card_slug(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _intro(html: str) -> tuple[list[str], str]:
    section = _HOME_SECTION_RE.search(html)
    if not section:
        return [], ""
    column = _INTRO_COLUMN_RE.search(section.group(1))
    if not column:
        return [], ""

    paragraphs = []
    for m in _PARAGRAPH_RE.finditer(column.group(1)):
        text = _TAG_RE.sub("", m.group(1)).replace("&apos;", "'").strip()
        # The highlighted sentence is emitted separately.
        if _HIGHLIGHT_MARKER not in text:
            paragraphs.append(text)

    hl = _HIGHLIGHT_RE.search(column.group(1))
    return paragraphs, hl.group(1).strip() if hl else ""


def extract_home_content(
    html: str,
    feature_icons: tuple[str, ...] = settings.HOME_FEATURE_ICONS,
) -> dict[str, Any]:
    offer = _SPECIAL_OFFER_RE.search(html)
    paragraphs, highlight = _intro(html)

    features: list[dict[str, str]] = []
    for m in _FEATURE_RE.finditer(html):
        title = m.group(1).strip()
        if not title or _FEATURE_EXCLUDE in title:
            continue
        feature = {"title": title}
        if len(features) < len(feature_icons):
            feature["icon"] = feature_icons[len(features)]
        features.append(feature)

    return {
        "banner": {
            "special_offer": {
                "message": offer.group(1).strip() if offer else "",
                "link": page_link(offer.group(2)) if offer else "",
            },
            "images": [m.group(1).strip() for m in _CAROUSEL_IMAGE_RE.finditer(html)],
        },
        "hero": {
            "service_cards": [
                {
                    "title": collapse_ws(m.group(2)),
                    "description": m.group(3).strip(),
                    "link": page_link(m.group(4)),
                    "image": m.group(1).strip(),
                }
                for m in _SERVICE_CARD_RE.finditer(html)
            ],
        },
        "main_content": {"paragraphs": paragraphs, "highlight": highlight},
        "why_choose_us": {"heading": "Why Choose Us?", "features": features},
        "reviews": {"heading": "Our Reviews"},
    }
