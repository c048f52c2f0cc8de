"""Shared test fixtures."""

from pathlib import Path

import pytest

from autoredirects.config import (
    Config,
    OutputConfig,
    PagesConfig,
    RedirectsConfig,
    ServerConfig,
    SnapshotConfig,
)
from autoredirects.core.redirects import Redirect
from autoredirects.core.snapshot import JsonSnapshotStore
from autoredirects.core.types import PageId, PageTable, URLPath


def r(from_path: str, to_path: str) -> Redirect:
    """Build a permanent redirect."""
    return Redirect(from_path=from_path, to_path=to_path)


def page_table(pages: dict[str, str]) -> PageTable:
    """Build a page table from plain strings."""
    return {PageId(k): URLPath(v) for k, v in pages.items()}


def mock_pages(length: int) -> PageTable:
    """Build a page table of ``page-<i>`` ids served at ``/page-<i>``."""
    return page_table({f"page-{i}": f"/page-{i}" for i in range(length)})


def mock_redirects(length: int, base_path: str) -> list[Redirect]:
    """Build unrelated redirects ``<base>-<2i>`` -> ``<base>-<2i+1>``."""
    return [r(f"{base_path}-{i * 2}", f"{base_path}-{i * 2 + 1}") for i in range(length)]


@pytest.fixture
def store(tmp_path: Path) -> JsonSnapshotStore:
    """Snapshot store writing into tmp_path."""
    return JsonSnapshotStore(tmp_path / "pages.json", tmp_path / "redirects.json")


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Creates site_dir and returns a Config instance suitable for testing.
    """
    site_dir = tmp_path / "public"
    site_dir.mkdir(exist_ok=True)

    return Config(
        pages=PagesConfig(),
        snapshot=SnapshotConfig(
            pages_file=tmp_path / "pages.json",
            redirects_file=tmp_path / "redirects.json",
        ),
        redirects=RedirectsConfig(),
        output=OutputConfig(site_dir=site_dir),
        server=ServerConfig(),
    )
