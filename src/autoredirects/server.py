"""aiohttp preview server.

Serves a built static site and answers redirected paths the way a production
host would, so the redirect set of a build can be checked locally.
"""

from collections.abc import Iterable
from pathlib import Path

from aiohttp import web

from autoredirects.app_keys import redirects_key, site_dir_key
from autoredirects.config import Config
from autoredirects.core.redirects import Redirect


def normalize_path(path: str) -> str:
    """Normalize a URL path for redirect lookups (no trailing slash)."""
    path = path if path.startswith("/") else f"/{path}"
    return path.rstrip("/") or "/"


def index_redirects(redirects: Iterable[Redirect]) -> dict[str, Redirect]:
    """Index redirects by normalized source path.

    Later redirects win, matching the order they were recorded in. Redirects
    whose source and destination only differ by a trailing slash are left out,
    since both normalize to the same path and would redirect to themselves.
    """
    return {
        normalize_path(r.from_path): r
        for r in redirects
        if normalize_path(r.from_path) != normalize_path(r.to_path)
    }


async def handle_request(request: web.Request) -> web.StreamResponse:
    """Redirect known source paths, serve everything else from the site dir."""
    redirect = request.app[redirects_key].get(normalize_path(request.path))
    if redirect is not None:
        location = redirect.to_path
        if request.query_string:
            location = f"{location}?{request.query_string}"
        if redirect.is_permanent:
            raise web.HTTPMovedPermanently(location=location)
        raise web.HTTPFound(location=location)

    file_path = _resolve_file(request.app[site_dir_key], request.path)
    if file_path is None:
        raise web.HTTPNotFound()
    return web.FileResponse(file_path)


def _resolve_file(site_dir: Path, url_path: str) -> Path | None:
    root = site_dir.resolve()
    candidate = (root / url_path.lstrip("/")).resolve()
    if not candidate.is_relative_to(root):
        return None
    if candidate.is_dir():
        candidate = candidate / "index.html"
    if not candidate.is_file():
        return None
    return candidate


def create_app(config: Config, redirects: Iterable[Redirect]) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        redirects: Redirects to answer with

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    app[redirects_key] = index_redirects(redirects)
    app[site_dir_key] = config.output.site_dir

    app.router.add_get("/{path:.*}", handle_request)

    return app


def run_server(config: Config, redirects: Iterable[Redirect]) -> None:
    """Run the server.

    Args:
        config: Application configuration
        redirects: Redirects to answer with
    """
    app = create_app(config, redirects)
    web.run_app(app, host=config.server.host, port=config.server.port)
