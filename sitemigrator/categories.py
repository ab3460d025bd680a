"""Category membership scan, run once before any product is converted."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from sitemigrator.sources import list_html_files, read_html, slug_from_filename

logger = logging.getLogger(__name__)

_PRODUCT_LINK_RE = re.compile(r'href="(?:\.\.)?/products/([^"]+)\.php(?:\.html)?"')


@dataclass
class CategoryIndex:
    """Which categories list each product, and where it first appears.

    ``product_order`` holds the 1-based position of a product within the
    category listing where it appears earliest.
    """

    product_categories: dict[str, list[str]] = field(default_factory=dict)
    product_order: dict[str, int] = field(default_factory=dict)

    def categories_for(self, product_slug: str) -> list[str]:
        return list(self.product_categories.get(product_slug, []))

    def add_listing(self, category_slug: str, product_slugs: list[str]) -> None:
        ref = f"categories/{category_slug}.md"
        for position, product in enumerate(product_slugs, start=1):
            refs = self.product_categories.setdefault(product, [])
            if ref not in refs:
                refs.append(ref)
            previous = self.product_order.get(product)
            if previous is None or position < previous:
                self.product_order[product] = position


def product_links(html: str) -> list[str]:
    """Product slugs linked from a category page, de-duplicated in page order."""
    seen: set[str] = set()
    slugs: list[str] = []
    for m in _PRODUCT_LINK_RE.finditer(html):
        slug = m.group(1)
        if slug not in seen:
            seen.add(slug)
            slugs.append(slug)
    return slugs


def scan_categories(categories_dir: str | Path) -> CategoryIndex:
    index = CategoryIndex()
    files = list_html_files(categories_dir)
    for path in files:
        html = read_html(path)
        products = product_links(html)
        index.add_listing(slug_from_filename(path.name), products)
        logger.debug("Category %s lists %d products", path.name, len(products))
    logger.info(
        "Category scan: %d products across %d category pages",
        len(index.product_categories),
        len(files),
    )
    return index
