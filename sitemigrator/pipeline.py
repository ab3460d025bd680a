"""Top-level import driver.

Phases run in a fixed order::

    1. favicons, home page data, special pages
    2. pages (+ root contact page), reviews index, blog posts
    3. category scan          ← must precede products
    4. products, then accumulated reviews
    5. categories
    6. blog index
    7. find/replace over every collected item
    8. write (markdown tree or JSON)
    9. validation
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sitemigrator import settings
from sitemigrator.categories import scan_categories
from sitemigrator.config import ImportConfig
from sitemigrator.converters import (
    BLOG,
    CATEGORY,
    PAGE,
    PRODUCT,
    REVIEWS_PAGE,
    BatchContext,
    convert_batch,
    convert_single,
    flush_reviews,
)
from sitemigrator.extractors.home import card_slug, extract_home_content
from sitemigrator.extractors.markdown import get_converter
from sitemigrator.favicons import copy_favicons
from sitemigrator.images import Fetcher, ImageRelocator, download_file
from sitemigrator.items import BatchResult, ExportCollection
from sitemigrator.sources import list_html_files, read_html
from sitemigrator.special_pages import blog_index_page, generate_special_pages, reviews_page
from sitemigrator.validation import validate_export, validate_markdown_tree
from sitemigrator.writers import write_json, write_markdown

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of one run: per-step results, collected items, validation failures."""

    export: ExportCollection
    results: dict[str, BatchResult] = field(default_factory=dict)
    validation_failures: list[str] = field(default_factory=list)
    output_path: Path | None = None
    images: dict[str, Any] = field(default_factory=dict)

    def add(self, name: str, result: BatchResult) -> BatchResult:
        self.results[name] = result
        logger.info("%s: %d/%d", name, result.successful, result.total)
        return result

    @property
    def totals(self) -> BatchResult:
        return sum(self.results.values(), BatchResult())

    @property
    def ok(self) -> bool:
        return self.totals.failed == 0 and not self.validation_failures


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def build_home_content(html: str, relocator: ImageRelocator) -> dict[str, Any]:
    """Home page data with banner and card images relocated under ``home``."""
    data = extract_home_content(html)

    banner: list[str] = []
    for url in data["banner"]["images"]:
        local = relocator.relocate(url, "home", f"banner-{len(banner)}")
        if local:
            banner.append(local)
    data["banner"]["images"] = banner

    for card in data["hero"]["service_cards"]:
        card["image"] = relocator.relocate(card["image"], "home", card_slug(card["title"])) or card["image"]
    return data


def _replace_all(value: Any, pairs: list[tuple[str, str]]) -> Any:
    if isinstance(value, str):
        for find, replace in pairs:
            value = value.replace(find, replace)
        return value
    if isinstance(value, list):
        return [_replace_all(v, pairs) for v in value]
    if isinstance(value, dict):
        return {k: _replace_all(v, pairs) for k, v in value.items()}
    return value


def apply_find_replace(export: ExportCollection, pairs: list[tuple[str, str]]) -> int:
    """Apply literal replacements to every item's front matter, body and metadata."""
    changed = 0
    for _, item in export.iter_items():
        frontmatter = _replace_all(item.frontmatter, pairs)
        content = _replace_all(item.content, pairs)
        metadata = _replace_all(item.metadata, pairs)
        if (frontmatter, content, metadata) != (item.frontmatter, item.content, item.metadata):
            item.frontmatter, item.content, item.metadata = frontmatter, content, metadata
            changed += 1
    logger.debug("Find/replace changed %d items", changed)
    return changed



def _source_dir(config: ImportConfig, key: str) -> Path:
    return config.site_dir / settings.SOURCE_DIRS[key]


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

def run_import(
    config: ImportConfig,
    *,
    converter: Callable[[str], str] | None = None,
    fetch: Fetcher | None = None,
) -> ImportReport:
    """Convert the mirror at ``config.site_dir`` and write it to ``config.out_dir``.

    Raises:
        FileNotFoundError: when the site directory does not exist.
        PandocNotFoundError: when pandoc is selected but not installed.
    """
    site_dir, out_dir = config.site_dir, config.out_dir
    if not site_dir.is_dir():
        raise FileNotFoundError(f"Site directory not found: {site_dir}")

    converter = converter or get_converter(config.converter)
    relocator = ImageRelocator(
        config.images_dir, fetch=fetch or download_file, timeout=config.image_timeout,
    )
    if not config.keep_images:
        relocator.reset()

    export = ExportCollection()
    report = ImportReport(export=export)
    context = BatchContext(options=config, relocator=relocator, converter=converter, export=export)

    # Phase 1: site-wide assets and generated pages
    report.add("Favicons", copy_favicons(site_dir, out_dir / settings.FAVICON_DIR))

    home_path = site_dir / settings.HOME_FILE
    home_html = read_html(home_path) if home_path.is_file() else None
    if home_html is not None:
        try:
            export.home = build_home_content(home_html, relocator)
        except Exception as exc:
            logger.error("Error converting homepage content: %s", exc)
            report.add("Homepage Content", BatchResult(failed=1, total=1))
        else:
            report.add("Homepage Content", BatchResult(successful=1, total=1))
    else:
        logger.warning("%s not found; home page uses default metadata", home_path)

    report.add("Special Pages", generate_special_pages(config, export, home_html))

    # Phase 2: documents that need no cross-document state
    page_files = list_html_files(_source_dir(config, "pages"))
    contact = site_dir / settings.CONTACT_FILE
    if contact.is_file():
        page_files.append(contact)
    report.add("Pages", convert_batch(page_files, PAGE, context))

    reviews_file = site_dir / settings.REVIEWS_FILE
    if reviews_file.is_file():
        ok = convert_single(reviews_file, REVIEWS_PAGE, context)
        report.add("Reviews Index", BatchResult(successful=int(ok), failed=int(not ok), total=1))
    else:
        export.add("pages", reviews_page(config))
        report.add("Reviews Index", BatchResult(successful=1, total=1))

    report.add("Blog Posts", convert_batch(list_html_files(_source_dir(config, "blog")), BLOG, context))

    # Phase 3: products read category membership and rank from this index
    context.category_index = scan_categories(_source_dir(config, "categories"))

    # Phase 4
    report.add("Products", convert_batch(list_html_files(_source_dir(config, "products")), PRODUCT, context))
    n_reviews = flush_reviews(context)
    report.add("Reviews", BatchResult(successful=n_reviews, total=n_reviews))

    # Phase 5
    report.add(
        "Categories",
        convert_batch(list_html_files(_source_dir(config, "categories")), CATEGORY, context),
    )

    # Phase 6
    export.add("pages", blog_index_page(config))
    report.add("Blog Index", BatchResult(successful=1, total=1))

    # Phase 7
    apply_find_replace(export, config.find_replace)

    # Phase 8
    if config.output_format == "json":
        report.output_path = write_json(export, out_dir)
    else:
        write_markdown(export, out_dir)
        report.output_path = out_dir

    # Phase 9
    if config.validate_output:
        failures = validate_export(export, out_dir)
        if config.output_format == "markdown":
            failures += validate_markdown_tree(out_dir)
        report.validation_failures = list(dict.fromkeys(failures))
        for failure in report.validation_failures:
            logger.error("Validation: %s", failure)

    report.images = relocator.stats()
    return report
