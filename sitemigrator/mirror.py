"""Download a site mirror with wget."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

WGET_ARGS = (
    "--recursive",
    "--no-parent",
    "--page-requisites",
    "--adjust-extension",
    "--no-clobber",
)


class MirrorError(RuntimeError):
    """Raised when the site cannot be mirrored."""


def download_site(url: str, site_dir: str | Path) -> Path:
    """Mirror *url* into *site_dir*, replacing whatever was there.

    wget writes into ``<tmp>/<host>/``; that tree is moved into place only
    once the download has finished.
    """
    host = urlparse(url).hostname
    if not host:
        raise MirrorError(f"Not a valid site URL: {url!r}")
    if not shutil.which("wget"):
        raise MirrorError("wget is not installed or not on PATH")

    site_dir = Path(site_dir)
    with tempfile.TemporaryDirectory(prefix="sitemigrator-") as tmp:
        cmd = ["wget", *WGET_ARGS, f"--directory-prefix={tmp}", url]
        logger.info("Mirroring %s", url)
        try:
            subprocess.run(cmd, check=True)
        except subprocess.CalledProcessError as exc:
            # wget exits 8 when some requisites 404; the mirror is still usable.
            if exc.returncode != 8:
                raise MirrorError(f"wget failed with exit status {exc.returncode}") from exc
            logger.warning("wget reported server errors for some files; continuing")

        downloaded = Path(tmp) / host
        if not downloaded.is_dir():
            raise MirrorError(f"wget produced no files for {host}")

        if site_dir.exists():
            shutil.rmtree(site_dir)
        site_dir.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(downloaded), str(site_dir))

    logger.info("Site mirrored to %s", site_dir)
    return site_dir
