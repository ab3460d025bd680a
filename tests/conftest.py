"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from sitemigrator.config import ImportConfig
from sitemigrator.converters import BatchContext
from sitemigrator.images import FetchError, ImageRelocator
from sitemigrator.items import ExportCollection

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def product_html() -> str:
    return _read_fixture("product.html")


@pytest.fixture
def category_html() -> str:
    return _read_fixture("category.html")


@pytest.fixture
def blog_html() -> str:
    return _read_fixture("blog.html")


@pytest.fixture
def page_html() -> str:
    return _read_fixture("page.html")


@pytest.fixture
def home_html() -> str:
    return _read_fixture("home.html")


# ---------------------------------------------------------------------------
# Image fetchers
# ---------------------------------------------------------------------------

class FakeFetcher:
    """Records every requested URL and writes a placeholder file."""

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.fail_on = fail_on
        self.requested: list[str] = []

    def __call__(self, url: str, dest: Path, timeout: float) -> None:
        self.requested.append(url)
        if any(part in url for part in self.fail_on):
            raise FetchError(f"HTTP 404 for {url}", url=url, status=404)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"image-bytes")


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def failing_fetcher() -> FakeFetcher:
    return FakeFetcher(fail_on=("res.cloudinary.com",))


# ---------------------------------------------------------------------------
# Mirror tree and batch context
# ---------------------------------------------------------------------------

@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A minimal mirrored site laid out the way wget writes it."""
    site = tmp_path / "old_site"
    layout = {
        "index.html": "home.html",
        "contact.php.html": "contact.html",
        "pages/about-us.php.html": "page.html",
        "blog/choosing-cctv-for-your-home.php.html": "blog.html",
        "products/standard-system.php.html": "product.html",
        "products/wireless-kit.php.html": "product_kit.html",
        "categories/burglar-alarms.php.html": "category.html",
        "categories/wireless-alarms.php.html": "category_wireless.html",
    }
    for rel, fixture in layout.items():
        dest = site / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(FIXTURES_DIR / fixture, dest)
    (site / "favicon-32x32.png").write_bytes(b"png")
    (site / "apple-touch-icon.png").write_bytes(b"png")
    return site


@pytest.fixture
def config(tmp_path: Path, site_dir: Path) -> ImportConfig:
    return ImportConfig(site_dir=site_dir, out_dir=tmp_path / "output")


@pytest.fixture
def make_context(tmp_path: Path, fetcher: FakeFetcher):
    """Build a :class:`BatchContext` with a fake converter and fetcher."""

    def _make(converter=lambda html: "", **options) -> BatchContext:
        options.setdefault("out_dir", tmp_path / "output")
        cfg = ImportConfig(**options)
        return BatchContext(
            options=cfg,
            relocator=ImageRelocator(cfg.images_dir, fetch=fetcher),
            converter=converter,
            export=ExportCollection(),
        )

    return _make
