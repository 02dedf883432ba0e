"""
Tests for configuration resolution.
"""

from pathlib import Path

import pytest

from browserfetch.config import (
    DEFAULT_CONFIG_FILE,
    FetcherConfig,
    load_yaml_config,
    resolve_config,
)
from browserfetch.core.exceptions import ConfigError, UnsupportedPlatform, UnsupportedProduct
from browserfetch.core.platform import Platform, Product


class TestLoadYamlConfig:
    def test_missing_optional(self, tmp_path):
        assert load_yaml_config(tmp_path / "missing.yaml") == {}

    def test_missing_required(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "missing.yaml", required=True)

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "browserfetch.yaml"
        config_file.write_text("")

        assert load_yaml_config(config_file) == {}

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "browserfetch.yaml"
        config_file.write_text("product: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml_config(config_file)

    def test_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "browserfetch.yaml"
        config_file.write_text("- chrome\n- firefox\n")

        with pytest.raises(ConfigError, match="Expected a mapping"):
            load_yaml_config(config_file)


class TestResolveConfig:
    """Precedence: explicit > environment > file > defaults."""

    def test_defaults(self, isolated_env):
        config = resolve_config(environ={})

        assert config == FetcherConfig()
        assert config.revision is None

    def test_reads_default_file_from_cwd(self, isolated_env):
        (isolated_env / DEFAULT_CONFIG_FILE).write_text(
            "product: firefox\n"
            "platform: mac\n"
            "host: http://mirror\n"
            "revisions:\n"
            "  firefox: 131.0a1\n"
            "  chrome: 1022525\n"
        )

        config = resolve_config(environ={})

        assert config.product is Product.FIREFOX
        assert config.platform is Platform.MAC
        assert config.host == "http://mirror"
        assert config.revision == "131.0a1"
        assert config.revisions[Product.CHROME] == "1022525"

    def test_environment_overrides_file(self, isolated_env):
        (isolated_env / DEFAULT_CONFIG_FILE).write_text("product: chrome\nplatform: mac\n")
        env = {
            "BROWSERFETCH_PRODUCT": "Firefox",
            "BROWSERFETCH_PLATFORM": "win64",
            "BROWSERFETCH_FIREFOX_REVISION": "130.0a1",
        }

        config = resolve_config(environ=env)

        assert config.product is Product.FIREFOX
        assert config.platform is Platform.WIN64
        assert config.revision == "130.0a1"

    def test_explicit_overrides_environment(self, isolated_env):
        env = {
            "BROWSERFETCH_PRODUCT": "firefox",
            "BROWSERFETCH_DOWNLOAD_HOST": "http://env-host",
            "BROWSERFETCH_CHROMIUM_REVISION": "1",
        }

        config = resolve_config(
            product="chrome", host="http://cli-host", revision="2", environ=env
        )

        assert config.product is Product.CHROME
        assert config.host == "http://cli-host"
        assert config.revision == "2"

    def test_unknown_env_product_falls_back(self, isolated_env, caplog):
        config = resolve_config(environ={"BROWSERFETCH_PRODUCT": "opera"})

        assert config.product is Product.CHROME
        assert "Unknown product 'opera'" in caplog.text

    def test_unknown_explicit_product_raises(self, isolated_env):
        with pytest.raises(UnsupportedProduct):
            resolve_config(product="opera", environ={})

    def test_unknown_platform_raises(self, isolated_env):
        with pytest.raises(UnsupportedPlatform):
            resolve_config(environ={"BROWSERFETCH_PLATFORM": "beos"})

    def test_path_expands_user(self, isolated_env, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))

        config = resolve_config(environ={"BROWSERFETCH_DOWNLOAD_PATH": "~/browsers"})

        assert config.path == tmp_path / "browsers"

    def test_explicit_config_file_must_exist(self, isolated_env, tmp_path):
        with pytest.raises(FileNotFoundError):
            resolve_config(config_file=tmp_path / "nope.yaml", environ={})

    def test_explicit_config_file(self, isolated_env, tmp_path):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(f"path: {tmp_path / 'store'}\n")

        config = resolve_config(config_file=config_file, environ={})

        assert config.path == tmp_path / "store"

    def test_revisions_must_be_mapping(self, isolated_env):
        (isolated_env / DEFAULT_CONFIG_FILE).write_text("revisions: [1, 2]\n")

        with pytest.raises(ConfigError, match="revisions"):
            resolve_config(environ={})

    def test_fetcher_options(self):
        config = FetcherConfig(product=Product.FIREFOX, path=Path("/x"))

        assert config.fetcher_options() == {
            "product": Product.FIREFOX,
            "platform": None,
            "path": Path("/x"),
            "host": None,
        }
