"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest

from autoredirects.config import Config
from autoredirects.core.factory import CallableRedirectFactory, DefaultRedirectFactory


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "autoredirects.toml"
        config_file.write_text("""
[pages]
id_property = "contentfulId"

[snapshot]
pages_file = "data/pages.json"
redirects_file = "data/redirects.json"

[redirects]
permanent = false
factory = "tests.custom_factories:temporary_redirect"

[output]
site_dir = "dist"
html_stubs = true

[server]
host = "0.0.0.0"
port = 3000
""")

        config = Config.load(config_file)

        assert config.pages.id_property == "contentfulId"
        assert config.snapshot.pages_file == tmp_path / "data" / "pages.json"
        assert config.snapshot.redirects_file == tmp_path / "data" / "redirects.json"
        assert config.redirects.permanent is False
        assert config.redirects.factory == "tests.custom_factories:temporary_redirect"
        assert config.output.site_dir == tmp_path / "dist"
        assert config.output.html_stubs is True
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        """Load minimal config with defaults relative to config file."""
        config_file = tmp_path / "autoredirects.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.pages.id_property == "id"
        assert config.snapshot.pages_file == tmp_path / "pages.json"
        assert config.snapshot.redirects_file == tmp_path / "redirects.json"
        assert config.redirects.permanent is True
        assert config.redirects.factory is None
        assert config.output.site_dir == tmp_path / "public"
        assert config.output.html_stubs is False
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        """Raise FileNotFoundError for missing explicit config file."""
        config_file = tmp_path / "nonexistent.toml"

        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(config_file)

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        """Return defaults when no config file found."""
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.pages.id_property == "id"
        assert config.snapshot.pages_file == Path("pages.json")
        assert config.snapshot.redirects_file == Path("redirects.json")
        assert config.output.site_dir == Path("public")
        assert config.config_path is None

    def test__invalid_toml__raises_error(self, tmp_path: Path) -> None:
        """Raise ValueError for unparsable files."""
        config_file = tmp_path / "autoredirects.toml"
        config_file.write_text("[pages\n")

        with pytest.raises(ValueError, match="Invalid TOML"):
            Config.load(config_file)


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        """Find config in current directory."""
        config_file = tmp_path / "autoredirects.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        """Find config in parent directory."""
        config_file = tmp_path / "autoredirects.toml"
        config_file.write_text("[server]\nport = 9000")
        subdir = tmp_path / "site" / "src"
        subdir.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=subdir):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__no_config__returns_none(self, tmp_path: Path) -> None:
        """Return None when no config found."""
        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered is None


class TestSectionParsing:
    """Tests for section type validation."""

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("pages = 1", "pages section must be a dictionary"),
            ("[pages]\nid_property = 1", "pages.id_property must be a non-empty string"),
            ('[pages]\nid_property = ""', "pages.id_property must be a non-empty string"),
            ("[snapshot]\npages_file = 1", "snapshot.pages_file must be a string"),
            ("[snapshot]\nredirects_file = []", "snapshot.redirects_file must be a string"),
            ('[redirects]\npermanent = "yes"', "redirects.permanent must be a boolean"),
            ("[redirects]\nfactory = 1", "redirects.factory must be a string"),
            ("[output]\nsite_dir = 1", "output.site_dir must be a string"),
            ("[output]\nhtml_stubs = 1", "output.html_stubs must be a boolean"),
            ("[server]\nhost = 1", "server.host must be a string"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
        ],
    )
    def test__invalid_value__raises_error(
        self,
        tmp_path: Path,
        content: str,
        message: str,
    ) -> None:
        """Reject values of the wrong type."""
        config_file = tmp_path / "autoredirects.toml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestConfigFactories:
    """Tests for objects built from configuration."""

    def test__create_store__uses_snapshot_files(self, test_config: Config) -> None:
        """Point the store at the configured files."""
        store = test_config.create_store()

        assert store.pages_file == test_config.snapshot.pages_file
        assert store.redirects_file == test_config.snapshot.redirects_file

    def test__create_factory__default(self, test_config: Config) -> None:
        """Use the default factory when none is configured."""
        assert test_config.create_factory() == DefaultRedirectFactory(permanent=True)

    def test__create_factory__import_string(self, test_config: Config) -> None:
        """Load the configured factory."""
        test_config.redirects.factory = "tests.custom_factories:temporary_redirect"

        assert isinstance(test_config.create_factory(), CallableRedirectFactory)


class TestWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__no_overrides__returns_equal_config(self, test_config: Config) -> None:
        """Keep everything when nothing is overridden."""
        assert test_config.with_overrides() == test_config

    def test__overrides__are_applied(self, test_config: Config, tmp_path: Path) -> None:
        """Apply CLI values."""
        config = test_config.with_overrides(
            id_property="slugId",
            site_dir=tmp_path / "dist",
            html_stubs=True,
            host="0.0.0.0",
            port=9000,
        )

        assert config.pages.id_property == "slugId"
        assert config.output.site_dir == tmp_path / "dist"
        assert config.output.html_stubs is True
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9000

    def test__overrides__do_not_modify_original(self, test_config: Config) -> None:
        """Leave the original config untouched."""
        test_config.with_overrides(port=9000, html_stubs=True)

        assert test_config.server.port == 8080
        assert test_config.output.html_stubs is False
