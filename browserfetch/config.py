"""
Configuration loading for browserfetch.

Settings are resolved in order of precedence:
    1. Explicit values (command-line flags or keyword arguments)
    2. Environment variables (BROWSERFETCH_*)
    3. YAML configuration file (browserfetch.yaml)
    4. Built-in defaults

Example browserfetch.yaml:

    product: firefox
    path: ~/.cache/my-browsers
    revisions:
      chrome: "1022525"
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from browserfetch.core.exceptions import ConfigError, UnsupportedProduct
from browserfetch.core.platform import Platform, Product

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "browserfetch.yaml"

ENV_PRODUCT = "BROWSERFETCH_PRODUCT"
ENV_PLATFORM = "BROWSERFETCH_PLATFORM"
ENV_PATH = "BROWSERFETCH_DOWNLOAD_PATH"
ENV_HOST = "BROWSERFETCH_DOWNLOAD_HOST"
ENV_REVISIONS = {
    Product.CHROME: "BROWSERFETCH_CHROMIUM_REVISION",
    Product.FIREFOX: "BROWSERFETCH_FIREFOX_REVISION",
}


@dataclass
class FetcherConfig:
    """Resolved fetcher settings."""

    product: Product = Product.CHROME
    platform: Optional[Platform] = None
    path: Optional[Path] = None
    host: Optional[str] = None
    revisions: Dict[Product, str] = field(default_factory=dict)

    @property
    def revision(self) -> Optional[str]:
        """Configured revision for the selected product, if any."""
        return self.revisions.get(self.product)

    def fetcher_options(self) -> Dict[str, Any]:
        """Keyword arguments for BrowserFetcher."""
        return {
            "product": self.product,
            "platform": self.platform,
            "path": self.path,
            "host": self.host,
        }


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ConfigError: If YAML parsing fails or the document is not a mapping
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Expected a mapping at the top of {config_file}")
    return config


def _product_from_env(value: str) -> Product:
    """Unknown products in the environment fall back to Chrome."""
    try:
        return Product.parse(value)
    except UnsupportedProduct:
        logger.warning(f"Unknown product '{value}', falling back to 'chrome'.")
        return Product.CHROME


def resolve_config(
    product: Optional[str] = None,
    platform: Optional[str] = None,
    path: Optional[Path] = None,
    host: Optional[str] = None,
    revision: Optional[str] = None,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> FetcherConfig:
    """
    Merge explicit values, environment and configuration file.

    Args:
        product, platform, path, host, revision: Explicit overrides
        config_file: YAML file to read. If None, ``browserfetch.yaml`` in
            the current directory is used when present.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        FetcherConfig

    Raises:
        UnsupportedProduct: If an explicit or configured product is unknown
        UnsupportedPlatform: If a platform value is unknown
        ConfigError: If the configuration file is invalid
    """
    env = os.environ if environ is None else environ

    if config_file is not None:
        file_config = load_yaml_config(Path(config_file), required=True)
    else:
        file_config = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    # Product
    if product:
        resolved_product = Product.parse(product)
    elif env.get(ENV_PRODUCT):
        resolved_product = _product_from_env(env[ENV_PRODUCT])
    else:
        resolved_product = Product.parse(file_config.get("product"))

    # Platform
    platform_value = platform or env.get(ENV_PLATFORM) or file_config.get("platform")
    resolved_platform = Platform.parse(platform_value) if platform_value else None

    # Download root
    path_value = path or env.get(ENV_PATH) or file_config.get("path")
    resolved_path = Path(path_value).expanduser() if path_value else None

    resolved_host = host or env.get(ENV_HOST) or file_config.get("host")

    # Revisions, keyed by product
    revisions: Dict[Product, str] = {}
    file_revisions = file_config.get("revisions") or {}
    if not isinstance(file_revisions, dict):
        raise ConfigError("'revisions' must be a mapping of product to revision")
    for key, value in file_revisions.items():
        revisions[Product.parse(key)] = str(value)
    for key, env_name in ENV_REVISIONS.items():
        if env.get(env_name):
            revisions[key] = env[env_name]
    if revision:
        revisions[resolved_product] = revision

    config = FetcherConfig(
        product=resolved_product,
        platform=resolved_platform,
        path=resolved_path,
        host=resolved_host,
        revisions=revisions,
    )
    logger.debug(f"Resolved configuration: {config}")
    return config
