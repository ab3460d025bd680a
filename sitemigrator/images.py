"""Download remote images into the output tree and rewrite references to them.

Files land in ``<images_root>/<namespace>/<filename>`` and are referenced as
``/images/<namespace>/<filename>``.  A failed download is logged and yields
``""``; it never fails the document that asked for it.  Existing files are
overwritten, so re-running an import refreshes every image.
"""

from __future__ import annotations

import logging
import re
import shutil
import urllib.error
import urllib.request
from collections.abc import Callable
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlparse

from sitemigrator import settings

logger = logging.getLogger(__name__)

_EMBEDDED_IMAGE_RE = re.compile(
    rf'!\[([^\]]*)\]\((https://{re.escape(settings.CDN_HOST)}/[^)]+?)(?:\s+"[^"]*")?\)',
)

Fetcher = Callable[[str, Path, float], None]


class FetchError(RuntimeError):
    """Raised when an image cannot be downloaded.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


def download_file(url: str, dest: Path, timeout: float = settings.IMAGE_TIMEOUT) -> None:
    """GET *url* and write the body to *dest*.

    Raises:
        FetchError: on a non-200 response or any network failure.
    """
    req = urllib.request.Request(url, headers={"User-Agent": settings.IMAGE_USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            if status != 200:
                raise FetchError(f"HTTP {status} for {url}", url=url, status=status)
            data: bytes = resp.read()
    except urllib.error.HTTPError as exc:
        raise FetchError(f"HTTP {exc.code} for {url}", url=url, status=exc.code) from exc
    except (urllib.error.URLError, OSError) as exc:
        raise FetchError(f"Network error for {url}: {exc}", url=url) from exc

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(data)


def strip_cdn_transformations(url: str) -> str:
    """Drop the CDN's ``/f_auto,q_auto/`` segment to address the source asset."""
    return url.replace(settings.CDN_TRANSFORM_SEGMENT, "/")


def image_filename(url: str, namespace: str, slug: str) -> str:
    """``<namespace>-<slug>-<stem>.<ext>`` from the last segment of *url*."""
    name = PurePosixPath(urlparse(url).path).name
    stem, dot, ext = name.partition(".")
    if not dot:
        ext = settings.DEFAULT_IMAGE_EXT
    else:
        ext = ext.rsplit(".", 1)[-1] or settings.DEFAULT_IMAGE_EXT
    return f"{namespace}-{slug}-{stem}.{ext}"


class ImageRelocator:
    """Fetches remote images and hands back local web paths."""

    def __init__(
        self,
        images_root: str | Path,
        web_root: str = settings.IMAGES_WEB_ROOT,
        fetch: Fetcher = download_file,
        timeout: float = settings.IMAGE_TIMEOUT,
    ) -> None:
        self.images_root = Path(images_root)
        self.web_root = web_root.rstrip("/")
        self._fetch = fetch
        self.timeout = timeout
        self.downloaded = 0
        self.failed = 0

    def reset(self) -> None:
        """Remove every previously relocated image."""
        if self.images_root.exists():
            shutil.rmtree(self.images_root)
            logger.debug("Cleared images directory %s", self.images_root)

    def relocate(
        self,
        url: str,
        namespace: str,
        slug: str,
        filename: str | None = None,
    ) -> str:
        """Download *url* and return its ``/images/...`` path, or ``""`` on failure."""
        if not url:
            return ""
        source = strip_cdn_transformations(url)
        name = filename or image_filename(source, namespace, slug)
        dest = self.images_root / namespace / name

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            self._fetch(source, dest, self.timeout)
        except FetchError as exc:
            self.failed += 1
            logger.warning("Failed to download image for %s: %s", slug, exc)
            return ""

        self.downloaded += 1
        logger.debug("Image %s → %s", source, dest)
        return f"{self.web_root}/{namespace}/{name}"

    def relocate_header(self, url: str, namespace: str, slug: str) -> str:
        """Header images use a fixed ``<slug>.webp`` name."""
        return self.relocate(url, namespace, slug, f"{slug}.{settings.DEFAULT_IMAGE_EXT}")

    def relocate_embedded(self, content: str, namespace: str, slug: str) -> str:
        """Relocate every CDN-hosted markdown image in *content*.

        Images without alt text are treated as decorative and removed.  An
        image whose download fails keeps its remote URL.
        """
        for m in list(_EMBEDDED_IMAGE_RE.finditer(content)):
            full, alt, url = m.group(0), m.group(1), m.group(2)
            if not alt.strip():
                content = content.replace(full, "", 1)
                continue
            local = self.relocate(url, namespace, slug)
            if local:
                content = content.replace(full, f"![{alt}]({local})", 1)
        return content

    def stats(self) -> dict[str, Any]:
        return {"downloaded": self.downloaded, "failed": self.failed}
