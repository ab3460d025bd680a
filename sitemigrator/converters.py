"""Per-file conversion driven by content-type descriptors.

A :class:`ContentType` bundles everything that differs between pages, blog
posts, products and categories: the field extractors, the front matter
synthesizer, the heading field and optional hooks.  ``convert_single`` and
``convert_batch`` are generic over it.

Per-file flow::

    read → convert → extract fields → normalise → before_write
         → front matter → ensure heading → collect → after_convert
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sitemigrator import settings
from sitemigrator.categories import CategoryIndex
from sitemigrator.config import ImportConfig
from sitemigrator.extractors.content import process_content
from sitemigrator.extractors.metadata import (
    extract_blog_date,
    extract_blog_image,
    extract_category_name,
    extract_content_heading,
    extract_heading,
    extract_metadata,
    extract_price,
    extract_product_images,
    extract_product_name,
    extract_reviews,
)
from sitemigrator.frontmatter import (
    FrontMatter,
    blog_frontmatter,
    category_frontmatter,
    ensure_heading,
    page_frontmatter,
    product_frontmatter,
    review_frontmatter,
)
from sitemigrator.images import ImageRelocator
from sitemigrator.items import BatchResult, ContentItem, ExportCollection, Metadata, ReviewRecord
from sitemigrator.sources import read_html, slug_from_filename

logger = logging.getLogger(__name__)

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
_LEAVE_REVIEW_MARKER = "[Click Here To Leave A Review!]"


# ---------------------------------------------------------------------------
# Per-run and per-file state
# ---------------------------------------------------------------------------

@dataclass
class RawDocument:
    """One source file during conversion."""

    path: Path
    html: str
    markdown: str
    slug: str


@dataclass
class BatchContext:
    """State shared by every file of a batch.

    ``convert_batch`` hands each file a shallow copy with its own
    ``position``; the maps and the export collection stay shared.
    """

    options: ImportConfig
    relocator: ImageRelocator
    converter: Callable[[str], str]
    export: ExportCollection
    category_index: CategoryIndex = field(default_factory=CategoryIndex)
    reviews: dict[str, ReviewRecord] = field(default_factory=dict)
    position: int = 0


Extractor = Callable[[RawDocument, BatchContext], Any]
Synthesizer = Callable[[Metadata, str, dict[str, Any], BatchContext], FrontMatter]
BeforeWrite = Callable[[str, dict[str, Any], RawDocument, BatchContext], str]
AfterConvert = Callable[[dict[str, Any], RawDocument, BatchContext], None]


@dataclass(frozen=True)
class ContentType:
    """Descriptor for one kind of source document."""

    name: str
    collection: str
    frontmatter: Synthesizer
    extractors: Mapping[str, Extractor] = field(default_factory=dict)
    heading_field: str | None = None
    before_write: BeforeWrite | None = None
    after_convert: AfterConvert | None = None


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def _scalar_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if isinstance(v, str | int | float | bool)}


def convert_single(path: str | Path, content_type: ContentType, context: BatchContext) -> bool:
    """Convert one source file into a :class:`ContentItem`.

    Any error is logged against the file and reported as ``False``; images
    already downloaded for the file are left in place.
    """
    path = Path(path)
    try:
        html = read_html(path)
        slug = slug_from_filename(path.name)
        doc = RawDocument(path=path, html=html, markdown=context.converter(html), slug=slug)
        metadata = extract_metadata(html)

        fields = {name: fn(doc, context) for name, fn in content_type.extractors.items()}
        content = process_content(doc.markdown, content_type.name, html)

        if content_type.before_write:
            content = content_type.before_write(content, fields, doc, context)

        fm = content_type.frontmatter(metadata, slug, fields, context)

        candidates = [
            fields.get(content_type.heading_field, "") if content_type.heading_field else "",
            extract_heading(html),
            metadata.title,
        ]
        content = ensure_heading(content, candidates, slug)

        item = ContentItem(
            slug=slug,
            filename=fm.filename or f"{slug}.md",
            frontmatter=fm.text,
            content=content,
            metadata={**metadata.model_dump(), **_scalar_fields(fields)},
        )
        context.export.add(content_type.collection, item)

        if content_type.after_convert:
            content_type.after_convert(fields, doc, context)
    except Exception as exc:
        logger.error("Error converting %s: %s", path.name, exc)
        logger.debug("Traceback for %s", path.name, exc_info=True)
        return False
    else:
        logger.info("Converted: %s", item.filename)
        return True


def convert_batch(
    files: list[Path],
    content_type: ContentType,
    context: BatchContext,
) -> BatchResult:
    successful = failed = 0
    for i, path in enumerate(files):
        file_context = dataclasses.replace(context, position=i)
        if convert_single(path, content_type, file_context):
            successful += 1
        else:
            failed += 1
    return BatchResult(successful=successful, failed=failed, total=len(files))


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

def review_slug(name: str) -> str:
    return _NON_SLUG_RE.sub("-", name.lower()).strip("-")


def accumulate_reviews(fields: dict[str, Any], doc: RawDocument, context: BatchContext) -> None:
    """Fold a product's reviews into the shared review map."""
    ref = f"products/{doc.slug}.md"
    for review in fields.get("reviews") or []:
        key = review_slug(review["name"])
        if not key:
            continue
        record = context.reviews.get(key)
        if record is None:
            context.reviews[key] = ReviewRecord(name=review["name"], body=review["body"], products=[ref])
        else:
            record.add_product(ref)


def flush_reviews(context: BatchContext) -> int:
    """Emit one review item per accumulated record."""
    rating = settings.REVIEW_RATING
    for key, record in context.reviews.items():
        context.export.add("reviews", ContentItem(
            slug=key,
            filename=f"{key}.md",
            frontmatter=review_frontmatter(record, rating),
            content=record.body,
            metadata={"name": record.name, "products": list(record.products), "rating": rating},
        ))
    return len(context.reviews)


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------

def _relocate_embedded(namespace: str) -> BeforeWrite:
    def hook(content: str, fields: dict[str, Any], doc: RawDocument, context: BatchContext) -> str:
        return context.relocator.relocate_embedded(content, namespace, doc.slug)
    return hook


def _blog_before_write(content: str, fields: dict[str, Any], doc: RawDocument, context: BatchContext) -> str:
    if fields.get("blog_image"):
        fields["local_image_path"] = context.relocator.relocate_header(
            fields["blog_image"], "news", doc.slug,
        )
    return context.relocator.relocate_embedded(content, "news", doc.slug)


def _product_before_write(content: str, fields: dict[str, Any], doc: RawDocument, context: BatchContext) -> str:
    header = (fields.get("images") or {}).get("header_image", "")
    fields["local_image_path"] = context.relocator.relocate_header(header, "products", doc.slug)
    return context.relocator.relocate_embedded(content, "products", doc.slug)


def _truncate_at_review_form(content: str, fields: dict[str, Any], doc: RawDocument, context: BatchContext) -> str:
    idx = content.find(_LEAVE_REVIEW_MARKER)
    return content[:idx].strip() if idx != -1 else content


# ---------------------------------------------------------------------------
# Built-in content types
# ---------------------------------------------------------------------------

PAGE = ContentType(
    name="page",
    collection="pages",
    frontmatter=page_frontmatter,
    extractors={"page_heading": lambda doc, ctx: extract_content_heading(doc.html)},
    heading_field="page_heading",
    before_write=_relocate_embedded("pages"),
)

REVIEWS_PAGE = dataclasses.replace(PAGE, before_write=_truncate_at_review_form)

BLOG = ContentType(
    name="blog",
    collection="news",
    frontmatter=blog_frontmatter,
    extractors={
        "date": lambda doc, ctx: extract_blog_date(doc.markdown, ctx.options.default_date),
        "blog_heading": lambda doc, ctx: extract_content_heading(doc.html),
        "blog_image": lambda doc, ctx: extract_blog_image(doc.markdown),
    },
    heading_field="blog_heading",
    before_write=_blog_before_write,
)

PRODUCT = ContentType(
    name="product",
    collection="products",
    frontmatter=product_frontmatter,
    extractors={
        "price": lambda doc, ctx: extract_price(doc.html),
        "reviews": lambda doc, ctx: extract_reviews(doc.html),
        "product_name": lambda doc, ctx: extract_product_name(doc.html),
        "product_heading": lambda doc, ctx: extract_content_heading(doc.html),
        "images": lambda doc, ctx: extract_product_images(doc.html),
    },
    heading_field="product_heading",
    before_write=_product_before_write,
    after_convert=accumulate_reviews,
)

CATEGORY = ContentType(
    name="category",
    collection="categories",
    frontmatter=category_frontmatter,
    extractors={
        "category_name": lambda doc, ctx: extract_category_name(doc.html),
        "category_heading": lambda doc, ctx: extract_content_heading(doc.html),
    },
    heading_field="category_heading",
    before_write=_relocate_embedded("categories"),
)
