"""Build session.

Holds the state of one build between its lifecycle points:

    session = BuildSession.start(store)       # build start: load snapshot
    session.add_page(path, context)           # once per rendered page
    redirects = session.finish(sink)          # build end: prune, register, save

Pages may be rendered concurrently; ``add_page`` calls are serialized since
redirect insertion order matters when several pages move in one build.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from autoredirects.core.factory import DefaultRedirectFactory
from autoredirects.core.redirects import (
    Redirect,
    RedirectFactory,
    filter_live_redirects,
    update_redirects,
)
from autoredirects.core.sinks import RedirectSink
from autoredirects.core.snapshot import Snapshot, SnapshotStore
from autoredirects.core.types import PageId, PageTable, URLPath

logger = logging.getLogger(__name__)

DEFAULT_ID_PROPERTY = "id"


class BuildSession:
    """Redirect tracking state for a single build."""

    def __init__(
        self,
        previous: Snapshot,
        store: SnapshotStore,
        *,
        id_property: str = DEFAULT_ID_PROPERTY,
        factory: RedirectFactory | None = None,
    ) -> None:
        """Initialize session from a previous snapshot.

        Args:
            previous: Snapshot of the previous build
            store: Store the final snapshot is saved to
            id_property: Page context key holding the page identifier
            factory: Redirect factory, defaults to permanent redirects
        """
        self._prev_pages: PageTable = dict(previous.pages)
        self._pages: PageTable = {}
        self._redirects: list[Redirect] = list(previous.redirects)
        self._store = store
        self._id_property = id_property
        self._factory = factory if factory is not None else DefaultRedirectFactory()
        self._lock = threading.Lock()
        self._finished = False
        self.saved: bool | None = None

    @classmethod
    def start(
        cls,
        store: SnapshotStore,
        *,
        id_property: str = DEFAULT_ID_PROPERTY,
        factory: RedirectFactory | None = None,
    ) -> "BuildSession":
        """Start a session by loading the previous snapshot from ``store``."""
        previous = store.load()
        logger.debug(
            f"Loaded snapshot with {len(previous.pages)} pages "
            f"and {len(previous.redirects)} redirects",
        )
        return cls(previous, store, id_property=id_property, factory=factory)

    @property
    def previous_pages(self) -> PageTable:
        return dict(self._prev_pages)

    @property
    def pages(self) -> PageTable:
        return dict(self._pages)

    @property
    def redirects(self) -> list[Redirect]:
        return list(self._redirects)

    @property
    def finished(self) -> bool:
        return self._finished

    def resolve_page_id(self, context: Mapping[str, Any]) -> PageId | None:
        """Read the page identifier from a page context.

        Returns:
            Identifier as a string, or None if absent or empty
        """
        value = context.get(self._id_property)
        if value is None or value == "":
            return None
        return PageId(str(value))

    def add_page(self, path: str, context: Mapping[str, Any]) -> bool:
        """Track a rendered page.

        Args:
            path: Path the page is rendered at
            context: Page context holding the page identifier

        Returns:
            True if the page is tracked, False if it has no identifier

        Raises:
            RuntimeError: If the session is already finished
        """
        self._ensure_open()
        page_id = self.resolve_page_id(context)
        if page_id is None:
            logger.warning(
                f"Page context property {self._id_property!r} missing for path {path}, "
                "page will not be redirected automatically",
            )
            return False

        with self._lock:
            self._ensure_open()
            tracked_path = self._pages.get(page_id)
            if tracked_path is not None and tracked_path != path:
                logger.warning(
                    f"Page id {page_id} rendered at both {tracked_path} and {path}, "
                    f"keeping {path}",
                )
            self._redirects = update_redirects(
                page_id,
                URLPath(path),
                self._prev_pages,
                self._redirects,
                self._factory,
            )
            self._pages[page_id] = URLPath(path)
        return True

    def finish(self, sink: RedirectSink | None = None) -> list[Redirect]:
        """Prune redirects to deleted pages, register and persist the result.

        Args:
            sink: Optional sink receiving every final redirect

        Returns:
            Final redirect set

        Raises:
            RuntimeError: If the session is already finished
        """
        with self._lock:
            self._ensure_open()
            self._redirects = filter_live_redirects(
                self._prev_pages,
                self._pages,
                self._redirects,
                self._factory,
            )
            self._finished = True

        if sink is not None:
            for redirect in self._redirects:
                sink.register(redirect)

        self.saved = self._store.save(
            Snapshot(pages=dict(self._pages), redirects=list(self._redirects)),
        )
        if not self.saved:
            logger.error(
                "Snapshot could not be saved, the next build will start without "
                "redirect history",
            )

        logger.info(
            f"Build finished with {len(self._pages)} pages "
            f"and {len(self._redirects)} redirects",
        )
        return list(self._redirects)

    def _ensure_open(self) -> None:
        if self._finished:
            raise RuntimeError("Build session is already finished")
