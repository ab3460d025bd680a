"""Tag patterns shared by the template extractors."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")

TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def meta_name(name: str) -> re.Pattern[str]:
    """``<meta name="NAME" content="...">``"""
    return re.compile(
        rf"""<meta\s+name=["']{re.escape(name)}["']\s+content=["'](.*?)["']""",
        re.IGNORECASE | re.DOTALL,
    )


def meta_property(prop: str) -> re.Pattern[str]:
    """``<meta property="PROP" content="...">``"""
    return re.compile(
        rf"""<meta\s+property=["']{re.escape(prop)}["']\s+content=["'](.*?)["']""",
        re.IGNORECASE | re.DOTALL,
    )


def link_rel(rel: str) -> re.Pattern[str]:
    """``<link rel="REL" href="...">``"""
    return re.compile(
        rf"""<link\s+rel=["']{re.escape(rel)}["']\s+href=["'](.*?)["']""",
        re.IGNORECASE | re.DOTALL,
    )


def collapse_ws(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract(html: str, pattern: re.Pattern[str]) -> str:
    """Return the first group of *pattern* in *html*, whitespace-collapsed, or ``""``."""
    m = pattern.search(html)
    if not m:
        return ""
    return collapse_ws(m.group(1))
