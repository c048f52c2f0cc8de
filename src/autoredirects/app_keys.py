"""Application keys for type-safe app configuration access."""

from pathlib import Path

from aiohttp import web

from autoredirects.core.redirects import Redirect

redirects_key = web.AppKey("redirects", dict[str, Redirect])
site_dir_key = web.AppKey("site_dir", Path)
