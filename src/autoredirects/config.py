"""Configuration management for autoredirects.

Supports TOML configuration format with auto-discovery. Relative paths are
resolved against the directory holding the configuration file (the project
root), or the current directory when no file is found.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from autoredirects.core.factory import DefaultRedirectFactory, load_factory
from autoredirects.core.redirects import RedirectFactory
from autoredirects.core.session import DEFAULT_ID_PROPERTY
from autoredirects.core.snapshot import JsonSnapshotStore

CONFIG_FILENAME = "autoredirects.toml"


@dataclass
class PagesConfig:
    """Page tracking configuration."""

    id_property: str = DEFAULT_ID_PROPERTY


@dataclass
class SnapshotConfig:
    """Snapshot storage configuration."""

    pages_file: Path = field(default_factory=lambda: Path("pages.json"))
    redirects_file: Path = field(default_factory=lambda: Path("redirects.json"))


@dataclass
class RedirectsConfig:
    """Redirect factory configuration."""

    permanent: bool = True
    factory: str | None = None


@dataclass
class OutputConfig:
    """Build output configuration."""

    site_dir: Path = field(default_factory=lambda: Path("public"))
    html_stubs: bool = False


@dataclass
class ServerConfig:
    """Preview server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class Config:
    """Application configuration."""

    pages: PagesConfig
    snapshot: SnapshotConfig
    redirects: RedirectsConfig
    output: OutputConfig
    server: ServerConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for autoredirects.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            pages=PagesConfig(),
            snapshot=SnapshotConfig(),
            redirects=RedirectsConfig(),
            output=OutputConfig(),
            server=ServerConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            pages=cls._parse_pages(data.get("pages")),
            snapshot=cls._parse_snapshot(data.get("snapshot"), config_dir),
            redirects=cls._parse_redirects(data.get("redirects")),
            output=cls._parse_output(data.get("output"), config_dir),
            server=cls._parse_server(data.get("server")),
            config_path=path,
        )

    @classmethod
    def _parse_pages(cls, data: object) -> PagesConfig:
        if data is None:
            return PagesConfig()

        if not isinstance(data, dict):
            raise ValueError("pages section must be a dictionary")

        id_property = data.get("id_property", DEFAULT_ID_PROPERTY)
        if not isinstance(id_property, str) or not id_property:
            raise ValueError("pages.id_property must be a non-empty string")

        return PagesConfig(id_property=id_property)

    @classmethod
    def _parse_snapshot(cls, data: object, config_dir: Path) -> SnapshotConfig:
        """Parse snapshot configuration section.

        Args:
            data: Raw snapshot section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SnapshotConfig instance
        """
        if data is None:
            return SnapshotConfig(
                pages_file=config_dir / "pages.json",
                redirects_file=config_dir / "redirects.json",
            )

        if not isinstance(data, dict):
            raise ValueError("snapshot section must be a dictionary")

        pages_file = data.get("pages_file", "pages.json")
        if not isinstance(pages_file, str):
            raise ValueError("snapshot.pages_file must be a string")

        redirects_file = data.get("redirects_file", "redirects.json")
        if not isinstance(redirects_file, str):
            raise ValueError("snapshot.redirects_file must be a string")

        return SnapshotConfig(
            pages_file=config_dir / pages_file,
            redirects_file=config_dir / redirects_file,
        )

    @classmethod
    def _parse_redirects(cls, data: object) -> RedirectsConfig:
        if data is None:
            return RedirectsConfig()

        if not isinstance(data, dict):
            raise ValueError("redirects section must be a dictionary")

        permanent = data.get("permanent", True)
        if not isinstance(permanent, bool):
            raise ValueError("redirects.permanent must be a boolean")

        factory = data.get("factory")
        if factory is not None and not isinstance(factory, str):
            raise ValueError("redirects.factory must be a string")

        return RedirectsConfig(permanent=permanent, factory=factory)

    @classmethod
    def _parse_output(cls, data: object, config_dir: Path) -> OutputConfig:
        """Parse output configuration section.

        Args:
            data: Raw output section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            OutputConfig instance
        """
        if data is None:
            return OutputConfig(site_dir=config_dir / "public")

        if not isinstance(data, dict):
            raise ValueError("output section must be a dictionary")

        site_dir = data.get("site_dir", "public")
        if not isinstance(site_dir, str):
            raise ValueError("output.site_dir must be a string")

        html_stubs = data.get("html_stubs", False)
        if not isinstance(html_stubs, bool):
            raise ValueError("output.html_stubs must be a boolean")

        return OutputConfig(site_dir=config_dir / site_dir, html_stubs=html_stubs)

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    def create_store(self) -> JsonSnapshotStore:
        """Create the snapshot store for the configured files."""
        return JsonSnapshotStore(
            self.snapshot.pages_file,
            self.snapshot.redirects_file,
        )

    def create_factory(self) -> RedirectFactory:
        """Create the configured redirect factory.

        Raises:
            ValueError: If redirects.factory cannot be loaded
        """
        if self.redirects.factory is not None:
            return load_factory(self.redirects.factory)
        return DefaultRedirectFactory(permanent=self.redirects.permanent)

    def with_overrides(
        self,
        *,
        id_property: str | None = None,
        site_dir: Path | None = None,
        html_stubs: bool | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            id_property: Override pages.id_property
            site_dir: Override output.site_dir
            html_stubs: Override output.html_stubs
            host: Override server.host
            port: Override server.port

        Returns:
            New Config instance with overrides applied
        """
        pages = self.pages
        if id_property is not None:
            pages = replace(self.pages, id_property=id_property)

        output = self.output
        if site_dir is not None or html_stubs is not None:
            output = replace(
                self.output,
                site_dir=site_dir if site_dir is not None else self.output.site_dir,
                html_stubs=html_stubs if html_stubs is not None else self.output.html_stubs,
            )

        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        return replace(self, pages=pages, output=output, server=server)
