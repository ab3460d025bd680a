"""Pages generated without a source document of their own.

The listing pages (products, service areas, blog) only carry front matter
and an intro: the site templates render the actual listings.  Their
navigation entries are dropped when categories take over the navigation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sitemigrator.config import ImportConfig
from sitemigrator.extractors.metadata import extract_metadata
from sitemigrator.frontmatter import nav_entry, quote
from sitemigrator.items import BatchResult, ContentItem, ExportCollection

logger = logging.getLogger(__name__)


def _page(slug: str, fm_lines: list[str], body: str) -> ContentItem:
    return ContentItem(
        slug=slug,
        filename=f"{slug}.md",
        frontmatter="\n".join(["---", *fm_lines, "---"]),
        content=body.strip(),
    )


def home_page(config: ImportConfig, home_html: str | None = None) -> ContentItem:
    title = f"{config.site_name} | Burglar Alarms & CCTV Systems"
    description = (
        "Professional burglar alarm and CCTV installation across "
        "South East London and Kent."
    )
    if home_html:
        meta = extract_metadata(home_html)
        title = meta.title or title
        description = meta.meta_description or description

    return _page("home", [
        f"meta_title: {quote(title)}",
        f"meta_description: {quote(description)}",
        'permalink: "/"',
        'layout: "home.html"',
        *nav_entry("Home", 1),
    ], f"# {title}")


def products_page(config: ImportConfig) -> ContentItem:
    lines = [
        f"meta_title: {quote(f'Security Packages | Burglar Alarms & CCTV | {config.site_name}')}",
        f"meta_description: {quote('Browse our complete range of security packages: burglar alarms, CCTV systems, and combined packages.')}",
        'permalink: "/products/"',
        "layout: products",
    ]
    if not config.categories_in_navigation:
        lines += nav_entry("Products", 3)
    return _page("products", lines, (
        "# Our Security Packages\n\n"
        "We offer a comprehensive range of security packages designed to "
        "protect your home or business."
    ))


def service_areas_page(config: ImportConfig) -> ContentItem:
    lines = [
        f"meta_title: {quote('Service Areas | Security Installation Across South East London & Kent')}",
        f"meta_description: {quote('We provide professional burglar alarm and CCTV installation across South East London and Kent.')}",
        'permalink: "/service-areas/"',
        "layout: service-areas.html",
    ]
    if not config.categories_in_navigation:
        lines += nav_entry("Service Areas", 4)
    return _page("service-areas", lines, (
        "# Service Areas\n\n"
        "We provide professional security installation and maintenance "
        "services across South East London and Kent."
    ))


def not_found_page(config: ImportConfig) -> ContentItem:
    return _page("not-found", [
        "meta_description:",
        "meta_title: Not Found",
        "no_index: true",
        "permalink: /not_found.html",
    ], (
        "# Not Found\n\n"
        "## Page Not Found\n\n"
        "Whoops! It looks like you followed an invalid link - "
        "**[click here to go back to the homepage](/)**."
    ))


def thank_you_page(config: ImportConfig) -> ContentItem:
    return _page("thank-you", [
        "meta_description:",
        "meta_title: Thank You",
        "navigationParent: Contact",
        "no_index: true",
    ], "# Thank You\n\n## Thank You\n\nYour message has been sent - we will be in touch.")


def blog_index_page(config: ImportConfig) -> ContentItem:
    lines = [
        f"meta_title: {quote(f'Latest Blog Posts | {config.site_name}')}",
        f"meta_description: {quote(f'All of the latest news from {config.site_name}.')}",
        'permalink: "/blog/"',
        "layout: news-archive.html",
    ]
    if not config.categories_in_navigation:
        lines += nav_entry("News", 5)
    return _page("blog", lines, (
        "# Latest Blog Posts\n\n"
        f"All of the latest news from {config.site_name}."
    ))


def reviews_page(config: ImportConfig) -> ContentItem:
    """Fallback reviews index when the mirror has no reviews page."""
    return _page("reviews", [
        "meta_description:",
        "meta_title: Reviews",
        'permalink: "/reviews/"',
        "layout: reviews.html",
    ], "# Reviews")


SPECIAL_PAGES: tuple[Callable[[ImportConfig], ContentItem], ...] = (
    products_page,
    service_areas_page,
    not_found_page,
    thank_you_page,
)


def generate_special_pages(
    config: ImportConfig,
    export: ExportCollection,
    home_html: str | None = None,
) -> BatchResult:
    """Add the home page and the fixed special pages to *export*."""
    pages = [home_page(config, home_html), *(generate(config) for generate in SPECIAL_PAGES)]
    for item in pages:
        export.add("pages", item)
        logger.info("Generated: %s", item.filename)
    return BatchResult(successful=len(pages), total=len(pages))
