"""Tests for the markdown tree and JSON writers."""

from __future__ import annotations

import json

from sitemigrator.items import ContentItem, ExportCollection
from sitemigrator.writers import write_json, write_markdown


def _export() -> ExportCollection:
    export = ExportCollection()
    export.add("pages", ContentItem(slug="about-us", filename="about-us.md", frontmatter='---\ntitle: "About"\n---', content="# About"))
    export.add("news", ContentItem(slug="post", filename="2024-06-10-post.md", frontmatter="---\ndate: 2024-06-10\n---", content="# Post"))
    export.home = {"banner": {"images": []}}
    return export


def test_markdown_layout(tmp_path):
    written = write_markdown(_export(), tmp_path)
    assert sorted(p.relative_to(tmp_path).as_posix() for p in written) == [
        "news/2024-06-10-post.md",
        "pages/about-us.md",
    ]
    assert (tmp_path / "pages" / "about-us.md").read_text(encoding="utf-8") == '---\ntitle: "About"\n---\n\n# About\n'
    assert json.loads((tmp_path / "_data" / "home_content.json").read_text(encoding="utf-8")) == {"banner": {"images": []}}


def test_markdown_clears_previous_collections(tmp_path):
    (tmp_path / "products").mkdir()
    (tmp_path / "products" / "gone.md").write_text("x", encoding="utf-8")
    (tmp_path / "images").mkdir()
    write_markdown(_export(), tmp_path)
    assert not (tmp_path / "products").exists()
    assert (tmp_path / "images").exists()


def test_json_document(tmp_path):
    path = write_json(_export(), tmp_path)
    assert path == tmp_path / "content.json"
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["pages"][0]["filename"] == "about-us.md"
    assert doc["news"][0]["content"] == "# Post"
    assert doc["reviews"] == []
    assert doc["metadata"]["format_version"] == "1.0"
