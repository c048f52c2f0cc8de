"""CLI interface for autoredirects.

Command-line tool for maintaining the redirect table of a static site build.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from autoredirects.config import Config
from autoredirects.core.redirects import Redirect
from autoredirects.core.session import BuildSession
from autoredirects.core.sinks import HtmlRedirectWriter, RedirectCollector


@click.group()
def cli() -> None:
    """autoredirects - Keep old links working when page paths change."""


_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Path to configuration file (default: auto-discover autoredirects.toml)",
)


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, path_type=Path, dir_okay=False))
@_config_option
@click.option(
    "--site-dir",
    "-s",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Built site directory (overrides config)",
)
@click.option(
    "--html-stubs/--no-html-stubs",
    default=None,
    help="Write meta-refresh pages for redirects into the site directory (overrides config)",
)
@click.option(
    "--id-property",
    default=None,
    help="Page context property holding the page id (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def build(
    manifest: Path,
    config_path: Path | None,
    site_dir: Path | None,
    html_stubs: bool | None,
    id_property: str | None,
    verbose: bool,
) -> None:
    """Update redirects from a page MANIFEST of the current build.

    MANIFEST is a JSON list of {"path": ..., "context": {...}} entries in
    render order.
    """
    _configure_logging(verbose)

    try:
        config = Config.load(config_path).with_overrides(
            id_property=id_property,
            site_dir=site_dir,
            html_stubs=html_stubs,
        )
        factory = config.create_factory()
        pages = load_manifest(manifest)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    session = BuildSession.start(
        config.create_store(),
        id_property=config.pages.id_property,
        factory=factory,
    )

    skipped = 0
    for path, context in pages:
        if not session.add_page(path, context):
            skipped += 1

    sink: HtmlRedirectWriter | RedirectCollector
    if config.output.html_stubs:
        sink = HtmlRedirectWriter(config.output.site_dir)
    else:
        sink = RedirectCollector()
    redirects = session.finish(sink)

    click.echo(f"Pages tracked: {len(session.pages)}")
    if skipped:
        click.echo(
            click.style(
                f"Pages without '{config.pages.id_property}': {skipped}",
                fg="yellow",
            ),
        )
    click.echo(f"Redirects: {len(redirects)}")
    _print_redirects(redirects)

    if isinstance(sink, HtmlRedirectWriter):
        click.echo(f"Redirect pages written: {len(sink.written)}")
        if sink.skipped:
            click.echo(
                click.style(
                    f"Redirect pages skipped: {len(sink.skipped)}",
                    fg="yellow",
                ),
            )

    if not session.saved:
        click.echo(
            click.style(
                "Warning: snapshot could not be saved, "
                "the next build will start without redirect history",
                fg="yellow",
            ),
            err=True,
        )


@cli.command(name="list")
@_config_option
def list_redirects(config_path: Path | None) -> None:
    """Show the redirects stored by the last build."""
    try:
        config = Config.load(config_path)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    snapshot = config.create_store().load()
    if not snapshot.redirects:
        click.echo("No redirects stored")
        return

    _print_redirects(snapshot.redirects)


@cli.command()
@_config_option
@click.option(
    "--site-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Built site directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
def serve(
    config_path: Path | None,
    site_dir: Path | None,
    host: str | None,
    port: int | None,
) -> None:
    """Preview the built site with the stored redirects applied."""
    from autoredirects.server import run_server

    try:
        config = Config.load(config_path).with_overrides(
            site_dir=site_dir,
            host=host,
            port=port,
        )
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    redirects = config.create_store().load().redirects

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Site directory: {config.output.site_dir}")
    click.echo(f"Redirects: {len(redirects)}")

    run_server(config, redirects)


def load_manifest(path: Path) -> list[tuple[str, dict[str, Any]]]:
    """Read a build manifest.

    Args:
        path: JSON file with a list of {"path", "context"} entries

    Returns:
        List of (path, context) pairs in manifest order

    Raises:
        ValueError: If the manifest is not valid
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in manifest {path}: {e}") from e

    if not isinstance(data, list):
        raise ValueError("Manifest must be a list of pages")

    pages: list[tuple[str, dict[str, Any]]] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Manifest entry #{index} must be an object")
        page_path = entry.get("path")
        if not isinstance(page_path, str):
            raise ValueError(f"Manifest entry #{index}: path must be a string")
        context = entry.get("context", {})
        if not isinstance(context, dict):
            raise ValueError(f"Manifest entry #{index}: context must be an object")
        pages.append((page_path, context))
    return pages


def _print_redirects(redirects: list[Redirect]) -> None:
    for redirect in redirects:
        click.echo(f"  {redirect.from_path} -> {redirect.to_path} ({redirect.status_code})")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    cli()
