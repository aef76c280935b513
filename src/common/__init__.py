# Common utilities
from .config_loader import (
    CatalogSettings,
    catalog_settings_from_dict,
    load_catalog_settings,
    load_config,
)
from .errors import (
    CatalogSyncError,
    NotificationError,
    PersistenceError,
    UpstreamError,
    ValidationError,
)
from .log_config import setup_logging
