"""Rebuild product specification and price tables as markdown.

Table layout rarely survives HTML→markdown conversion, so both blocks are
rendered straight from the source markup and spliced into the converted body
by ``sitemigrator.extractors.content.process_content``.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

_SPEC_TABLE_RE = re.compile(
    r'<div class="menu-heading[^"]*">Product Specifications!</div>\s*'
    r'<table class="table table-striped">([\s\S]*?)</table>',
    re.IGNORECASE,
)
_PRICE_TABLE_RE = re.compile(
    r'<div class="menu-heading[^"]*">Our Prices!</div>\s*'
    r'<table class="table table-striped">([\s\S]*?)</table>',
    re.IGNORECASE,
)
_ROW_RE = re.compile(r"<tr>([\s\S]*?)</tr>")
_TD_RE = re.compile(r"<td[^>]*>([\s\S]*?)</td>")
_CELL_RE = re.compile(r"<t[dh][^>]*>([\s\S]*?)</t[dh]>")


def _cell_text(fragment: str) -> str:
    if not fragment.strip():
        return ""
    return BeautifulSoup(fragment, "lxml").get_text().strip()


def _spec_groups(table_html: str) -> list[tuple[str, list[str]]]:
    groups: list[tuple[str, list[str]]] = []
    label: str | None = None
    values: list[str] = []

    for row in _ROW_RE.finditer(table_html):
        row_html = row.group(1)
        if "<th>" in row_html:
            continue
        cells = _TD_RE.findall(row_html)
        if len(cells) != 2:
            continue
        label_text, value_text = _cell_text(cells[0]), _cell_text(cells[1])

        if label_text:
            if label and values:
                groups.append((label, values))
            label = label_text
            values = [value_text] if value_text else []
        elif value_text and label:
            # Blank label cell: another value for the current label.
            values.append(value_text)

    if label and values:
        groups.append((label, values))
    return groups


def extract_specification_table(html: str) -> str:
    """Markdown for the "Product Specifications!" table, or ``""``.

    A row with a label starts a group; following rows whose label cell is
    blank add values to it.  Single-value groups render inline
    (``**Label** value``), multi-value groups as a bullet list.
    """
    m = _SPEC_TABLE_RE.search(html)
    if not m:
        return ""

    lines: list[str] = []
    for label, values in _spec_groups(m.group(1)):
        lines.append("")
        if len(values) > 1:
            lines.append(f"**{label}**")
            lines.append("")
            lines.extend(f"- {v}" for v in values)
        else:
            lines.append(f"**{label}** {values[0]}")
    lines.append("")
    return "\n".join(lines)


def extract_price_table(html: str) -> str:
    """Markdown for the "Our Prices!" table: one ``**Label:** value`` per row."""
    m = _PRICE_TABLE_RE.search(html)
    if not m:
        return ""

    lines: list[str] = []
    for row in _ROW_RE.finditer(m.group(1)):
        cells = _CELL_RE.findall(row.group(1))
        if len(cells) != 2:
            continue
        label = _cell_text(cells[0]).removesuffix(":")
        lines.append("")
        lines.append(f"**{label}:** {_cell_text(cells[1])}")
    lines.append("")
    return "\n".join(lines)
