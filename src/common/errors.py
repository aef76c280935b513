"""
Error taxonomy for catalog sync.

ValidationError    - required input missing or malformed
UpstreamError      - catalog API network or HTTP failure
PersistenceError   - read/write against the product store failed
NotificationError  - messaging delivery failed (always swallowed by callers)
"""

from typing import Optional


class CatalogSyncError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(CatalogSyncError):
    """Required input (identifier, credentials) is missing or invalid."""


class UpstreamError(CatalogSyncError):
    """Catalog API call failed at the network or HTTP level."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PersistenceError(CatalogSyncError):
    """Product store rejected or failed a read or write."""


class NotificationError(CatalogSyncError):
    """Change notice could not be delivered."""
