"""Copy the mirror's favicon set into the output tree."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sitemigrator import settings
from sitemigrator.extractors.metadata import extract_favicon_links
from sitemigrator.items import BatchResult
from sitemigrator.sources import list_html_files, read_html

logger = logging.getLogger(__name__)


def copy_favicons(site_dir: str | Path, dest_dir: str | Path) -> BatchResult:
    """Copy every icon referenced by the home page (or first root page) to *dest_dir*."""
    site_dir, dest_dir = Path(site_dir), Path(dest_dir)
    if dest_dir.exists():
        shutil.rmtree(dest_dir)

    home = site_dir / settings.HOME_FILE
    source = home if home.is_file() else next(iter(list_html_files(site_dir)), None)
    if source is None:
        logger.warning("No HTML files in %s to read favicon links from", site_dir)
        return BatchResult()

    links = extract_favicon_links(read_html(source))
    if not links:
        logger.warning("No favicon links found in %s", source.name)
        return BatchResult()

    successful = failed = 0
    for link in links:
        href = (link["href"] or "").split("?", 1)[0].lstrip("/")
        src = site_dir / href
        if not src.is_file():
            logger.warning("Favicon file not found: %s", src)
            failed += 1
            continue
        dest_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest_dir / src.name)
        logger.debug("Copied favicon %s", src.name)
        successful += 1

    return BatchResult(successful=successful, failed=failed, total=len(links))
