"""Front matter synthesis per content type.

Each synthesizer takes the document's generic :class:`Metadata`, its slug,
the fields gathered by the content type's extractors and the batch context,
and returns a :class:`FrontMatter` holding the YAML block (``---`` delimited)
and, where the type names its own files, the output filename.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, NamedTuple

from sitemigrator import settings

if TYPE_CHECKING:
    from sitemigrator.converters import BatchContext
    from sitemigrator.items import Metadata, ReviewRecord

_LEADING_H1_RE = re.compile(r"^#[ \t]+\S")


class FrontMatter(NamedTuple):
    text: str
    filename: str | None = None


def quote(value: Any) -> str:
    """Double-quoted YAML scalar."""
    text = "" if value is None else str(value)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def quote_list(values: list[str]) -> str:
    return "[" + ", ".join(quote(v) for v in values) + "]"


def _block(lines: list[str]) -> str:
    return "\n".join(["---", *lines, "---"])


def nav_entry(key: str, order: int) -> list[str]:
    return ["eleventyNavigation:", f"  key: {quote(key)}", f"  order: {order}"]


def title_from_slug(slug: str) -> str:
    return slug.replace("-", " ").title()


# ---------------------------------------------------------------------------
# Per-type synthesizers
# ---------------------------------------------------------------------------

def page_frontmatter(
    metadata: Metadata,
    slug: str,
    fields: dict[str, Any] | None = None,
    context: BatchContext | None = None,
) -> FrontMatter:
    page_cfg = settings.PAGE_CONFIG.get(slug, {})
    permalink = f"/{slug}/" if slug in settings.ROOT_PAGES else f"/pages/{slug}/"

    lines = [
        f"meta_title: {quote(metadata.title)}",
        f"meta_description: {quote(metadata.meta_description)}",
        f"permalink: {quote(permalink)}",
        f"layout: {page_cfg.get('layout', settings.DEFAULT_PAGE_LAYOUT)}",
    ]
    if "nav_key" in page_cfg:
        lines += nav_entry(page_cfg["nav_key"], page_cfg["nav_order"])
    return FrontMatter(_block(lines))


def blog_frontmatter(
    metadata: Metadata,
    slug: str,
    fields: dict[str, Any],
    context: BatchContext | None = None,
) -> FrontMatter:
    date = fields.get("date") or (
        context.options.default_date if context else settings.DEFAULT_DATE
    )
    lines = [
        f"title: {quote(metadata.header_text or title_from_slug(slug))}",
        f"date: {date}",
        f"meta_title: {quote(metadata.title)}",
        f"meta_description: {quote(metadata.meta_description)}",
        f"permalink: {quote(f'/blog/{slug}/')}",
    ]
    if fields.get("local_image_path"):
        lines += ["gallery:", f"  - {quote(fields['local_image_path'])}"]
    return FrontMatter(_block(lines), f"{date}-{slug}.md")


def product_order(slug: str, context: BatchContext | None) -> int:
    """Curated order first, then the category scan rank, then the default."""
    curated = context.options.product_order if context else settings.PRODUCT_ORDER
    if slug in curated:
        return curated[slug]
    if context and slug in context.category_index.product_order:
        return context.category_index.product_order[slug]
    return settings.DEFAULT_PRODUCT_ORDER


def product_frontmatter(
    metadata: Metadata,
    slug: str,
    fields: dict[str, Any],
    context: BatchContext | None = None,
) -> FrontMatter:
    categories = context.category_index.categories_for(slug) if context else []
    lines = [
        f"title: {quote(fields.get('product_name') or metadata.title)}",
        f"price: {quote(fields.get('price', ''))}",
        f"order: {product_order(slug, context)}",
        f"meta_title: {quote(metadata.title)}",
        f"meta_description: {quote(metadata.meta_description)}",
        f"permalink: {quote(f'/products/{slug}/')}",
        f"categories: {quote_list(categories)}",
        "features: []",
    ]
    if fields.get("local_image_path"):
        lines.append(f"gallery: {quote_list([fields['local_image_path']])}")
    return FrontMatter(_block(lines))


def category_frontmatter(
    metadata: Metadata,
    slug: str,
    fields: dict[str, Any],
    context: BatchContext | None = None,
) -> FrontMatter:
    title = fields.get("category_name") or metadata.title
    lines = [
        f"title: {quote(title)}",
        f"meta_title: {quote(title)}",
        f"meta_description: {quote(metadata.meta_description)}",
        f"permalink: {quote(f'/categories/{slug}/')}",
        "featured: false",
    ]
    if context and context.options.categories_in_navigation:
        key = title or fields.get("category_heading", "")
        lines += nav_entry(key, settings.CATEGORY_NAV_ORDER_BASE + context.position)
    return FrontMatter(_block(lines))


def review_frontmatter(record: ReviewRecord, rating: int = settings.REVIEW_RATING) -> str:
    return _block([
        f"name: {quote(record.name)}",
        f"products: {quote_list(record.products)}",
        f"rating: {rating}",
    ])


# ---------------------------------------------------------------------------
# Leading heading
# ---------------------------------------------------------------------------

def has_leading_heading(content: str) -> bool:
    return bool(_LEADING_H1_RE.match(content.strip()))


def ensure_heading(content: str, candidates: list[str], slug: str) -> str:
    """Prepend ``# <heading>`` unless *content* already opens with one.

    The first non-empty candidate wins; the title-cased slug is the last
    resort so no document goes out without a heading.
    """
    if has_leading_heading(content):
        return content
    heading = next((c.strip() for c in candidates if c and c.strip()), "") or title_from_slug(slug)
    body = content.strip()
    return f"# {heading}\n\n{body}" if body else f"# {heading}"
