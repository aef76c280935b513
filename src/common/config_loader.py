"""
Configuration Loader

Loads YAML configuration files. Marketplace settings for the partner catalog
live in ``config/catalog.yaml``; secrets come from the environment.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from . import constants

logger = logging.getLogger(__name__)


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'catalog.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@dataclass
class CatalogSettings:
    """Marketplace, batching and notification settings for one deployment."""

    host: str = constants.CATALOG_HOST
    region: str = constants.CATALOG_REGION
    service: str = constants.CATALOG_SERVICE
    path: str = constants.CATALOG_PATH
    target: str = constants.CATALOG_TARGET
    marketplace: str = constants.CATALOG_MARKETPLACE

    item_resources: List[str] = field(default_factory=lambda: list(constants.ITEM_RESOURCES))
    item_languages: List[str] = field(default_factory=lambda: list(constants.ITEM_LANGUAGES))
    batch_resources: List[str] = field(default_factory=lambda: list(constants.BATCH_RESOURCES))

    batch_size: int = constants.BATCH_SIZE
    max_items_per_request: int = constants.MAX_ITEMS_PER_REQUEST
    request_timeout: int = 30

    notify_timezone: str = constants.NOTIFY_TIMEZONE
    caption_max_length: int = constants.CAPTION_MAX_LENGTH

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError("batch_size must be positive")
        if self.max_items_per_request < 1:
            raise ValueError("max_items_per_request must be positive")


def catalog_settings_from_dict(config: Dict[str, Any]) -> CatalogSettings:
    """
    Build CatalogSettings from a parsed ``catalog.yaml`` document.

    Missing keys fall back to the defaults in ``constants``.

    Example:
        catalog:
          host: webservices.amazon.eg
          batch:
            size: 20
            max_items_per_request: 10
        notifications:
          timezone: Africa/Cairo
    """
    catalog = config.get('catalog') or {}
    item = catalog.get('item') or {}
    batch = catalog.get('batch') or {}
    notifications = config.get('notifications') or {}

    defaults = CatalogSettings()
    return CatalogSettings(
        host=catalog.get('host', defaults.host),
        region=catalog.get('region', defaults.region),
        service=catalog.get('service', defaults.service),
        path=catalog.get('path', defaults.path),
        target=catalog.get('target', defaults.target),
        marketplace=catalog.get('marketplace', defaults.marketplace),
        item_resources=list(item.get('resources', defaults.item_resources)),
        item_languages=list(item.get('languages', defaults.item_languages)),
        batch_resources=list(batch.get('resources', defaults.batch_resources)),
        batch_size=int(batch.get('size', defaults.batch_size)),
        max_items_per_request=int(batch.get('max_items_per_request', defaults.max_items_per_request)),
        request_timeout=int(catalog.get('request_timeout', defaults.request_timeout)),
        notify_timezone=notifications.get('timezone', defaults.notify_timezone),
        caption_max_length=int(notifications.get('caption_max_length', defaults.caption_max_length)),
    )


def load_catalog_settings(filename: str = 'catalog.yaml') -> CatalogSettings:
    """
    Load catalog settings from the config directory.

    Returns built-in defaults when the file is absent.
    """
    try:
        config = load_config(filename)
    except FileNotFoundError as e:
        logger.warning("%s - using built-in catalog defaults", e)
        return CatalogSettings()
    return catalog_settings_from_dict(config)
