"""sitemigrator - turn a mirrored PHP storefront into a static-site content tree.

Quick usage::

    from sitemigrator import build_config, run_import

    config = build_config(site_dir="./old_site", out_dir="./output")
    report = run_import(config)
    print(report.totals, report.validation_failures)

JSON export::

    config = build_config(site_dir="./old_site", output_format="json")
    run_import(config)            # -> ./output/content.json
"""

from sitemigrator.config import ImportConfig, build_config
from sitemigrator.images import FetchError
from sitemigrator.items import BatchResult, ContentItem, ExportCollection
from sitemigrator.pipeline import ImportReport, run_import

__version__ = "0.1.0"
__all__ = [
    "BatchResult",
    "ContentItem",
    "ExportCollection",
    "FetchError",
    "ImportConfig",
    "ImportReport",
    "build_config",
    "run_import",
]
