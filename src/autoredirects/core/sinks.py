"""Redirect sinks.

A sink receives every redirect of the final set at the end of a build, e.g.
to register it with a serving layer or to write it into the build output.
"""

import html
import json
import logging
from pathlib import Path
from typing import Protocol

from autoredirects.core.redirects import Redirect

logger = logging.getLogger(__name__)

GENERATOR = "autoredirects"

HTML_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="generator" content="{generator}">
    <title>Redirecting...</title>
    <link rel="canonical" href="{url}">
    <meta name="robots" content="noindex">
    <script>var anchor=window.location.hash.substr(1);location.href={js_url}+(anchor?"#"+anchor:"")</script>
    <meta http-equiv="refresh" content="0; url={url}">
</head>
<body>
Redirecting to <a href="{url}">{url}</a>...
</body>
</html>
"""


class RedirectSink(Protocol):
    """Receives the redirects of a finished build."""

    def register(self, redirect: Redirect) -> None: ...


class RedirectCollector:
    """Sink keeping registered redirects in memory."""

    def __init__(self) -> None:
        self.redirects: list[Redirect] = []

    def register(self, redirect: Redirect) -> None:
        self.redirects.append(redirect)


class HtmlRedirectWriter:
    """Sink writing meta-refresh stub pages into a static site directory.

    ``/old/page`` becomes ``<site_dir>/old/page/index.html``; paths ending in
    ``.html`` are written as-is. Existing files that were not written by this
    sink are left alone, since a live page served at the old path wins.
    """

    def __init__(self, site_dir: Path) -> None:
        self._site_dir = site_dir
        self.written: list[Path] = []
        self.skipped: list[Redirect] = []

    @property
    def site_dir(self) -> Path:
        return self._site_dir

    def stub_path(self, from_path: str) -> Path | None:
        """Compute the stub file for a redirect source path.

        Args:
            from_path: Redirect source (e.g., "/old/page")

        Returns:
            Target file, or None if the path escapes the site directory
        """
        relative = from_path.split("?", 1)[0].split("#", 1)[0].strip("/")
        if relative.endswith((".html", ".htm")):
            target = self._site_dir / relative
        else:
            target = self._site_dir / relative / "index.html"

        root = self._site_dir.resolve()
        if not target.resolve().is_relative_to(root):
            return None
        return target

    def register(self, redirect: Redirect) -> None:
        target = self.stub_path(redirect.from_path)
        if target is None:
            logger.warning(
                f"Skipping redirect from {redirect.from_path}: outside {self._site_dir}",
            )
            self.skipped.append(redirect)
            return

        if target.exists() and not self._is_stub(target):
            logger.warning(
                f"Skipping redirect from {redirect.from_path}: {target} is a live page",
            )
            self.skipped.append(redirect)
            return

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.render(redirect), encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write redirect stub {target}: {e}")
            self.skipped.append(redirect)
            return
        self.written.append(target)

    def render(self, redirect: Redirect) -> str:
        """Render the stub page for a redirect."""
        return HTML_TEMPLATE.format(
            generator=GENERATOR,
            url=html.escape(redirect.to_path, quote=True),
            js_url=json.dumps(redirect.to_path).replace("</", "<\\/"),
        )

    def _is_stub(self, path: Path) -> bool:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        return f'<meta name="generator" content="{GENERATOR}">' in content
