"""Tests for the category membership scan."""

from __future__ import annotations

from sitemigrator.categories import CategoryIndex, product_links, scan_categories


def _listing(*slugs: str) -> str:
    return "\n".join(f'<a href="../products/{s}.php.html">{s}</a>' for s in slugs)


def test_product_links_dedupe_in_page_order(category_html):
    assert product_links(category_html) == ["basic-system", "standard-system"]


def test_product_links_accept_root_relative_php():
    assert product_links('<a href="/products/pet-package.php">Pet</a>') == ["pet-package"]


def test_scan_two_categories(tmp_path):
    (tmp_path / "alarms.php.html").write_text(_listing("basic", "pet", "standard"), encoding="utf-8")
    (tmp_path / "cctv.php.html").write_text(_listing("standard", "cctv-1"), encoding="utf-8")

    index = scan_categories(tmp_path)

    assert index.categories_for("standard") == ["categories/alarms.md", "categories/cctv.md"]
    assert index.categories_for("pet") == ["categories/alarms.md"]
    # earliest position across every listing
    assert index.product_order["standard"] == 1
    assert index.product_order["pet"] == 2
    assert index.categories_for("unlisted") == []


def test_scan_missing_directory(tmp_path):
    index = scan_categories(tmp_path / "nope")
    assert index.product_categories == {}
    assert index.product_order == {}


def test_add_listing_is_idempotent():
    index = CategoryIndex()
    index.add_listing("alarms", ["a"])
    index.add_listing("alarms", ["a"])
    assert index.categories_for("a") == ["categories/alarms.md"]


def test_categories_for_returns_copy():
    index = CategoryIndex()
    index.add_listing("alarms", ["a"])
    index.categories_for("a").append("mutated")
    assert index.categories_for("a") == ["categories/alarms.md"]
