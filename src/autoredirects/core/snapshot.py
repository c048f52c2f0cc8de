"""Build snapshot persistence.

A snapshot is the page table and redirect set written at the end of a build
and read at the start of the next one. Snapshot data is advisory: a missing
or broken snapshot is treated as a first build and a failed write only loses
continuity for future builds.

Default on-disk layout (both files under the project root):
    pages.json         # {"<page id>": "/path", ...}
    redirects.json     # [{"fromPath": ..., "toPath": ..., "isPermanent": ...}, ...]
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from autoredirects.core.redirects import Redirect
from autoredirects.core.types import PageId, PageTable, URLPath

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Page table and redirect set of one build."""

    pages: PageTable = field(default_factory=dict)
    redirects: list[Redirect] = field(default_factory=list)


class SnapshotStore(Protocol):
    """Loads and saves build snapshots."""

    def load(self) -> Snapshot:
        """Load the previous build's snapshot, or an empty one."""
        ...

    def save(self, snapshot: Snapshot) -> bool:
        """Persist a snapshot. Returns False if it could not be written."""
        ...


class JsonSnapshotStore:
    """Snapshot store backed by two JSON files."""

    def __init__(self, pages_file: Path, redirects_file: Path) -> None:
        """Initialize store with file locations.

        Args:
            pages_file: JSON file holding the page table
            redirects_file: JSON file holding the redirect set
        """
        self._pages_file = pages_file
        self._redirects_file = redirects_file

    @property
    def pages_file(self) -> Path:
        return self._pages_file

    @property
    def redirects_file(self) -> Path:
        return self._redirects_file

    def load(self) -> Snapshot:
        """Load snapshot, falling back to empty data per file.

        Returns:
            Snapshot with whatever could be read
        """
        return Snapshot(
            pages=self._load_pages(),
            redirects=self._load_redirects(),
        )

    def save(self, snapshot: Snapshot) -> bool:
        """Write snapshot files.

        Args:
            snapshot: Snapshot to persist

        Returns:
            True if both files were written, False otherwise
        """
        pages_ok = self._write_json(self._pages_file, dict(snapshot.pages))
        redirects_ok = self._write_json(
            self._redirects_file,
            [r.to_dict() for r in snapshot.redirects],
        )
        return pages_ok and redirects_ok

    def _load_pages(self) -> PageTable:
        data = self._read_json(self._pages_file)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self._pages_file}: expected a JSON object")
            return {}

        pages: PageTable = {}
        for page_id, path in data.items():
            if not isinstance(path, str):
                logger.warning(
                    f"Ignoring page {page_id!r} in {self._pages_file}: path is not a string",
                )
                continue
            pages[PageId(page_id)] = URLPath(path)
        return pages

    def _load_redirects(self) -> list[Redirect]:
        data = self._read_json(self._redirects_file)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring {self._redirects_file}: expected a JSON array")
            return []

        redirects: list[Redirect] = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                logger.warning(
                    f"Ignoring redirect #{index} in {self._redirects_file}: not an object",
                )
                continue
            try:
                redirects.append(Redirect.from_dict(item))
            except ValueError as e:
                logger.warning(
                    f"Ignoring redirect #{index} in {self._redirects_file}: {e}",
                )
        return redirects

    def _read_json(self, path: Path) -> Any | None:
        """Read a JSON file.

        Args:
            path: File to read

        Returns:
            Parsed data, or None if missing or unreadable
        """
        if not path.exists():
            logger.debug(f"No snapshot file at {path}, starting empty")
            return None

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read snapshot file {path}: {e}")
            return None

    def _write_json(self, path: Path, data: object) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Could not write snapshot file {path}: {e}")
            return False
        return True
