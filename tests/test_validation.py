"""Tests for the post-run validation suite."""

from __future__ import annotations

from sitemigrator.items import ContentItem, ExportCollection
from sitemigrator.validation import (
    missing_images,
    split_document,
    validate_export,
    validate_markdown_tree,
)
from sitemigrator.writers import write_markdown


def _item(slug: str, content: str = "# Title\n\nBody", frontmatter: str | None = None, filename: str | None = None) -> ContentItem:
    return ContentItem(
        slug=slug,
        filename=filename or f"{slug}.md",
        frontmatter=frontmatter or f'---\ntitle: "{slug}"\n---',
        content=content,
    )


def _valid_export() -> ExportCollection:
    export = ExportCollection()
    export.add("pages", _item("about-us"))
    export.add("products", _item("basic", frontmatter='---\ntitle: "Basic"\nprice: "£539.00"\n---'))
    export.add("reviews", ContentItem(
        slug="john-smith",
        filename="john-smith.md",
        frontmatter='---\nname: "John Smith"\nproducts: ["products/basic.md"]\nrating: 5\n---',
        content="Great service.",
        metadata={"name": "John Smith", "products": ["products/basic.md"], "rating": 5},
    ))
    return export


class TestValidateExport:
    def test_valid_export_passes(self, tmp_path):
        assert validate_export(_valid_export(), tmp_path) == []

    def test_empty_export_fails(self, tmp_path):
        assert "no content was collected" in validate_export(ExportCollection(), tmp_path)

    def test_duplicate_slug(self, tmp_path):
        export = _valid_export()
        export.add("pages", _item("about-us", filename="about-us-2.md"))
        assert any("duplicate slug 'about-us'" in f for f in validate_export(export, tmp_path))

    def test_duplicate_filename_across_collections(self, tmp_path):
        export = _valid_export()
        export.add("categories", _item("about-us"))
        assert any("duplicate filename" in f for f in validate_export(export, tmp_path))

    def test_bad_filename(self, tmp_path):
        export = _valid_export()
        export.add("pages", _item("Terms_And_Conditions"))
        assert any("filename does not match" in f for f in validate_export(export, tmp_path))

    def test_missing_heading(self, tmp_path):
        export = _valid_export()
        export.add("pages", _item("terms", content="## Terms"))
        assert any("pages/terms.md: body does not start" in f for f in validate_export(export, tmp_path))

    def test_reviews_exempt_from_heading(self, tmp_path):
        failures = validate_export(_valid_export(), tmp_path)
        assert not any(f.startswith("reviews/") for f in failures)

    def test_review_missing_fields(self, tmp_path):
        export = _valid_export()
        export.add("reviews", _item("jane", content="Nice"))
        failures = validate_export(export, tmp_path)
        assert "reviews/jane.md: missing name" in failures
        assert "reviews/jane.md: products is not a list" in failures

    def test_product_without_price(self, tmp_path):
        export = _valid_export()
        export.add("products", _item("mystery"))
        assert "products/mystery.md: product front matter has no price" in validate_export(export, tmp_path)

    def test_unterminated_frontmatter(self, tmp_path):
        export = _valid_export()
        export.add("pages", _item("broken", frontmatter='---\ntitle: "x"'))
        assert "pages/broken.md: front matter has no closing ---" in validate_export(export, tmp_path)

    def test_invalid_yaml(self, tmp_path):
        export = _valid_export()
        export.add("pages", _item("bad-yaml", frontmatter='---\ntitle: "unterminated\n---'))
        assert any("not valid YAML" in f for f in validate_export(export, tmp_path))

    def test_impossible_date_reported(self, tmp_path):
        export = _valid_export()
        export.add("news", _item("leap", frontmatter="---\ntitle: \"Leap\"\ndate: 2024-02-30\n---"))
        failures = validate_export(export, tmp_path)
        assert any(f.startswith("news/leap.md: front matter has an invalid value") for f in failures)

    def test_missing_image(self, tmp_path):
        export = _valid_export()
        export.add("pages", _item("gallery", content="# Gallery\n\n![Panel](/images/pages/panel.jpg)"))
        assert "missing image file: /images/pages/panel.jpg" in validate_export(export, tmp_path)

    def test_present_image(self, tmp_path):
        (tmp_path / "images" / "pages").mkdir(parents=True)
        (tmp_path / "images" / "pages" / "panel.jpg").write_bytes(b"x")
        export = _valid_export()
        export.add("pages", _item("gallery", content="# Gallery\n\n![Panel](/images/pages/panel.jpg)"))
        assert validate_export(export, tmp_path) == []

    def test_home_data_images_checked(self, tmp_path):
        export = _valid_export()
        export.home = {"banner": {"images": ["/images/home/banner.jpg"]}}
        assert "missing image file: /images/home/banner.jpg" in validate_export(export, tmp_path)


class TestMarkdownTree:
    def test_written_tree_passes(self, tmp_path):
        write_markdown(_valid_export(), tmp_path)
        assert validate_markdown_tree(tmp_path) == []

    def test_file_without_frontmatter(self, tmp_path):
        (tmp_path / "pages").mkdir()
        (tmp_path / "pages" / "loose.md").write_text("# Loose\n", encoding="utf-8")
        assert validate_markdown_tree(tmp_path) == ["pages/loose.md: no delimited front matter"]

    def test_bad_filename_on_disk(self, tmp_path):
        (tmp_path / "news").mkdir()
        (tmp_path / "news" / "Bad Name.md").write_text('---\ntitle: "x"\n---\n\n# X\n', encoding="utf-8")
        assert any("filename does not match" in f for f in validate_markdown_tree(tmp_path))


def test_split_document():
    assert split_document('---\ntitle: "x"\n---\n\n# X\n') == ('---\ntitle: "x"\n---', "# X")
    assert split_document("# X") is None


def test_missing_images_ignores_remote_and_nested_paths(tmp_path):
    texts = [
        "![a](https://cdn.example.com/images/a.jpg)",
        "![b](/assets/images/b.jpg)",
        {"cards": [{"image": "/images/home/card.jpg"}]},
    ]
    assert missing_images(texts, tmp_path) == ["/images/home/card.jpg"]
