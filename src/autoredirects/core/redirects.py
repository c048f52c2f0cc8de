"""Redirect graph maintenance.

Keeps a redirect set acyclic for direct reversals and single-hop for chains
as page paths change between builds:

    a -> b exists, b -> a added    =>  a -> b is dropped
    a -> b exists, b -> c added    =>  a -> b becomes a -> c

All functions return new lists and never mutate their inputs.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from autoredirects.core.types import PageId, PageTable, URLPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Redirect:
    """Directed redirect from an old path to a new path.

    Graph operations only look at ``from_path`` and ``to_path``; everything
    else is carried along untouched.
    """

    from_path: str
    to_path: str
    is_permanent: bool = True
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the edge for graph operations."""
        return (self.from_path, self.to_path)

    @property
    def status_code(self) -> int:
        """HTTP status code a server should answer with."""
        return 301 if self.is_permanent else 302

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.extra,
            "fromPath": self.from_path,
            "toPath": self.to_path,
            "isPermanent": self.is_permanent,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Redirect":
        """Build a redirect from its JSON representation.

        Raises:
            ValueError: If fromPath or toPath is missing or not a string
        """
        from_path = data.get("fromPath")
        if not isinstance(from_path, str):
            raise ValueError("redirect.fromPath must be a string")

        to_path = data.get("toPath")
        if not isinstance(to_path, str):
            raise ValueError("redirect.toPath must be a string")

        is_permanent = data.get("isPermanent", True)
        if not isinstance(is_permanent, bool):
            raise ValueError("redirect.isPermanent must be a boolean")

        extra = {
            k: v
            for k, v in data.items()
            if k not in ("fromPath", "toPath", "isPermanent")
        }
        return cls(
            from_path=from_path,
            to_path=to_path,
            is_permanent=is_permanent,
            extra=extra,
        )


class RedirectFactory(Protocol):
    """Builds the redirect recorded when a page moves.

    Implementations must be deterministic: the same ``(page_id, path, path)``
    input has to yield the same ``to_path`` every time, because pruning of
    deleted pages asks the factory what a redirect to a dead path looks like.
    """

    def make_redirect(
        self,
        page_id: PageId,
        from_path: URLPath,
        to_path: URLPath,
    ) -> Redirect: ...


def insert_redirect(new: Redirect, redirects: Iterable[Redirect]) -> list[Redirect]:
    """Insert a redirect, collapsing chains and dropping direct reversals.

    Reversal removal runs before chain rewriting, so an edge removed as the
    reverse of ``new`` is never rewritten. An existing copy of ``new`` is
    replaced, which makes repeated insertion of the same edge a no-op.

    Args:
        new: Redirect to insert
        redirects: Current redirect set

    Returns:
        Surviving and rewritten redirects in original order, followed by ``new``
    """
    result: list[Redirect] = []
    for redirect in redirects:
        if redirect.from_path == new.to_path and redirect.to_path == new.from_path:
            continue
        if redirect.to_path == new.from_path:
            redirect = replace(redirect, to_path=new.to_path)
        if redirect.key == new.key:
            continue
        result.append(redirect)

    result.append(new)
    return result


def update_redirects(
    page_id: PageId,
    new_path: URLPath,
    prev_pages: PageTable,
    redirects: Iterable[Redirect],
    factory: RedirectFactory,
) -> list[Redirect]:
    """Record a redirect if a page moved since the previous build.

    Args:
        page_id: Identifier of the rendered page
        new_path: Path the page is rendered at in this build
        prev_pages: Page table of the previous build
        redirects: Current redirect set
        factory: Builds the new redirect when the path changed

    Returns:
        Updated redirect set, or a copy of ``redirects`` for new and
        unmoved pages
    """
    if page_id not in prev_pages or prev_pages[page_id] == new_path:
        return list(redirects)

    new = factory.make_redirect(page_id, prev_pages[page_id], new_path)
    logger.info(
        f"Path changed for page id {page_id}, "
        f"new redirect from {new.from_path} to {new.to_path}",
    )
    return insert_redirect(new, redirects)


def filter_live_redirects(
    prev_pages: PageTable,
    pages: PageTable,
    redirects: Iterable[Redirect],
    factory: RedirectFactory,
) -> list[Redirect]:
    """Drop redirects pointing at pages deleted in this build.

    A page is deleted when its id was in the previous build but not in the
    current one. The destination a redirect to its old path would have is
    taken from ``factory`` so custom path canonicalization is honoured.

    Args:
        prev_pages: Page table of the previous build
        pages: Page table of the current build
        redirects: Current redirect set
        factory: Redirect factory used when the redirects were recorded

    Returns:
        Redirects whose destination is still live, in original order
    """
    dead_destinations = {
        factory.make_redirect(page_id, path, path).to_path
        for page_id, path in prev_pages.items()
        if page_id not in pages
    }
    if dead_destinations:
        logger.debug(f"Pruning redirects to {len(dead_destinations)} deleted pages")

    return [r for r in redirects if r.to_path not in dead_destinations]
