"""Extraction sub-package: pattern-based field extraction and markdown cleanup."""

from .content import clean_content, extract_main_content, process_content
from .home import extract_home_content
from .markdown import PandocNotFoundError, get_converter, html_to_markdown, pandoc_to_markdown
from .metadata import extract_metadata
from .tables import extract_price_table, extract_specification_table

__all__ = [
    "extract_metadata",
    "extract_main_content",
    "extract_home_content",
    "extract_price_table",
    "extract_specification_table",
    "clean_content",
    "process_content",
    "get_converter",
    "html_to_markdown",
    "pandoc_to_markdown",
    "PandocNotFoundError",
]
