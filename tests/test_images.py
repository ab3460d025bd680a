"""Tests for image download and relocation."""

from __future__ import annotations

import urllib.error
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sitemigrator.images import (
    FetchError,
    ImageRelocator,
    download_file,
    image_filename,
    strip_cdn_transformations,
)

CDN = "https://res.cloudinary.com/kbs/image/upload"


def test_strip_cdn_transformations():
    assert strip_cdn_transformations(f"{CDN}/f_auto,q_auto/v1/a.jpg") == f"{CDN}/v1/a.jpg"


class TestImageFilename:
    def test_namespace_slug_and_stem(self):
        assert image_filename(f"{CDN}/v1/products/alarm.jpg", "products", "basic") == "products-basic-alarm.jpg"

    def test_missing_extension_defaults_to_webp(self):
        assert image_filename(f"{CDN}/v1/photo", "news", "post") == "news-post-photo.webp"

    def test_query_string_ignored(self):
        assert image_filename(f"{CDN}/v1/a.png?w=200", "pages", "x") == "pages-x-a.png"


class TestImageRelocator:
    def test_relocate_downloads_and_returns_web_path(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        path = relocator.relocate(f"{CDN}/f_auto,q_auto/v1/a.jpg", "products", "basic")
        assert path == "/images/products/products-basic-a.jpg"
        assert (tmp_path / "images" / "products" / "products-basic-a.jpg").is_file()
        assert fetcher.requested == [f"{CDN}/v1/a.jpg"]
        assert relocator.stats() == {"downloaded": 1, "failed": 0}

    def test_relocate_empty_url(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        assert relocator.relocate("", "products", "basic") == ""
        assert fetcher.requested == []

    def test_failed_download_returns_empty(self, tmp_path, failing_fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=failing_fetcher)
        assert relocator.relocate(f"{CDN}/v1/a.jpg", "products", "basic") == ""
        assert relocator.stats() == {"downloaded": 0, "failed": 1}

    def test_header_uses_slug_name(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        assert relocator.relocate_header(f"{CDN}/v1/a.jpg", "news", "my-post") == "/images/news/my-post.webp"

    def test_embedded_images_rewritten(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        content = f"Intro\n\n![Control panel]({CDN}/v1/panel.jpg)\n\nOutro"
        result = relocator.relocate_embedded(content, "products", "basic")
        assert "![Control panel](/images/products/products-basic-panel.jpg)" in result
        assert CDN not in result

    def test_embedded_image_title_dropped(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        result = relocator.relocate_embedded(f'![Panel]({CDN}/v1/panel.jpg "The panel")', "pages", "x")
        assert result == "![Panel](/images/pages/pages-x-panel.jpg)"

    def test_embedded_image_without_alt_removed(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        result = relocator.relocate_embedded(f"Before ![]({CDN}/v1/spacer.gif) after", "pages", "x")
        assert result == "Before  after"
        assert fetcher.requested == []

    def test_embedded_failure_keeps_remote_url(self, tmp_path, failing_fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=failing_fetcher)
        content = f"![Panel]({CDN}/v1/panel.jpg)"
        assert relocator.relocate_embedded(content, "pages", "x") == content

    def test_other_hosts_left_alone(self, tmp_path, fetcher):
        relocator = ImageRelocator(tmp_path / "images", fetch=fetcher)
        content = "![Logo](https://example.com/logo.png)"
        assert relocator.relocate_embedded(content, "pages", "x") == content

    def test_reset_clears_previous_images(self, tmp_path, fetcher):
        root = tmp_path / "images"
        (root / "old").mkdir(parents=True)
        (root / "old" / "stale.jpg").write_bytes(b"x")
        ImageRelocator(root, fetch=fetcher).reset()
        assert not root.exists()


class TestDownloadFile:
    def test_writes_body(self, tmp_path):
        resp = MagicMock()
        resp.status = 200
        resp.read.return_value = b"jpeg"
        resp.__enter__.return_value = resp
        dest = tmp_path / "a" / "b.jpg"
        with patch("sitemigrator.images.urllib.request.urlopen", return_value=resp):
            download_file(f"{CDN}/v1/b.jpg", dest)
        assert dest.read_bytes() == b"jpeg"

    def test_http_error_raises_fetch_error(self, tmp_path):
        err = urllib.error.HTTPError(f"{CDN}/v1/b.jpg", 404, "Not Found", None, None)
        with patch("sitemigrator.images.urllib.request.urlopen", side_effect=err):
            with pytest.raises(FetchError) as exc_info:
                download_file(f"{CDN}/v1/b.jpg", tmp_path / "b.jpg")
        assert exc_info.value.status == 404
        assert not (tmp_path / "b.jpg").exists()

    def test_network_error_raises_fetch_error(self, tmp_path):
        with patch("sitemigrator.images.urllib.request.urlopen", side_effect=urllib.error.URLError("timed out")):
            with pytest.raises(FetchError) as exc_info:
                download_file(f"{CDN}/v1/b.jpg", Path(tmp_path) / "b.jpg")
        assert exc_info.value.status == 0
        assert exc_info.value.url.endswith("b.jpg")
