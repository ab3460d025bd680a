"""Tests for the wget mirror step."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from sitemigrator.mirror import MirrorError, download_site


def _fake_wget(returncode: int = 0, host: str = "www.myalarm.example"):
    """Stand-in for ``subprocess.run`` that writes a one-page mirror."""

    def run(cmd, check):
        prefix = next(arg.split("=", 1)[1] for arg in cmd if arg.startswith("--directory-prefix="))
        site = Path(prefix) / host
        site.mkdir(parents=True)
        (site / "index.html").write_text("<html></html>", encoding="utf-8")
        if returncode:
            raise subprocess.CalledProcessError(returncode, cmd)
        return subprocess.CompletedProcess(cmd, 0)

    return run


@pytest.fixture
def wget_installed():
    with patch("sitemigrator.mirror.shutil.which", return_value="/usr/bin/wget"):
        yield


def test_mirror_moved_into_place(tmp_path, wget_installed):
    site_dir = tmp_path / "old_site"
    with patch("sitemigrator.mirror.subprocess.run", side_effect=_fake_wget()):
        assert download_site("https://www.myalarm.example/", site_dir) == site_dir
    assert (site_dir / "index.html").is_file()


def test_existing_mirror_replaced(tmp_path, wget_installed):
    site_dir = tmp_path / "old_site"
    site_dir.mkdir()
    (site_dir / "stale.html").write_text("old", encoding="utf-8")
    with patch("sitemigrator.mirror.subprocess.run", side_effect=_fake_wget()):
        download_site("https://www.myalarm.example/", site_dir)
    assert not (site_dir / "stale.html").exists()


def test_server_errors_tolerated(tmp_path, wget_installed):
    site_dir = tmp_path / "old_site"
    with patch("sitemigrator.mirror.subprocess.run", side_effect=_fake_wget(returncode=8)):
        download_site("https://www.myalarm.example/", site_dir)
    assert (site_dir / "index.html").is_file()


def test_other_wget_failures_raise(tmp_path, wget_installed):
    with patch("sitemigrator.mirror.subprocess.run", side_effect=_fake_wget(returncode=4)):
        with pytest.raises(MirrorError, match="exit status 4"):
            download_site("https://www.myalarm.example/", tmp_path / "old_site")


def test_nothing_downloaded(tmp_path, wget_installed):
    with patch("sitemigrator.mirror.subprocess.run", side_effect=_fake_wget(host="elsewhere.example")):
        with pytest.raises(MirrorError, match="no files"):
            download_site("https://www.myalarm.example/", tmp_path / "old_site")


def test_wget_missing(tmp_path):
    with patch("sitemigrator.mirror.shutil.which", return_value=None):
        with pytest.raises(MirrorError, match="wget is not installed"):
            download_site("https://www.myalarm.example/", tmp_path / "old_site")


def test_invalid_url(tmp_path):
    with pytest.raises(MirrorError, match="Not a valid site URL"):
        download_site("not a url", tmp_path / "old_site")
