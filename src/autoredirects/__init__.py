"""Automatic redirects for statically generated sites."""

from autoredirects.core.factory import DefaultRedirectFactory, load_factory
from autoredirects.core.redirects import (
    Redirect,
    RedirectFactory,
    filter_live_redirects,
    insert_redirect,
    update_redirects,
)
from autoredirects.core.session import BuildSession
from autoredirects.core.snapshot import JsonSnapshotStore, Snapshot, SnapshotStore

__all__ = [
    "BuildSession",
    "DefaultRedirectFactory",
    "JsonSnapshotStore",
    "Redirect",
    "RedirectFactory",
    "Snapshot",
    "SnapshotStore",
    "filter_live_redirects",
    "insert_redirect",
    "load_factory",
    "update_redirects",
]
