"""
Tenant configuration models.

One tenant owns a product list, a set of partner catalog credentials,
and optionally a Telegram channel for change notices.
"""

from dataclasses import dataclass
from typing import Any, Dict


def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ""


@dataclass
class CatalogCredentials:
    """Partner catalog credential triple, trimmed of surrounding whitespace."""
    access_key: str
    secret_key: str
    partner_tag: str

    def __post_init__(self):
        self.access_key = _clean(self.access_key)
        self.secret_key = _clean(self.secret_key)
        self.partner_tag = _clean(self.partner_tag)

    @property
    def complete(self) -> bool:
        return bool(self.access_key and self.secret_key and self.partner_tag)


@dataclass
class TenantConfig:
    """Per-tenant settings as stored in ``user_settings``."""
    tenant_id: str
    access_key: str = ""
    secret_key: str = ""
    partner_tag: str = ""
    bot_token: str = ""
    admin_chat_id: str = ""

    def __post_init__(self):
        self.tenant_id = _clean(self.tenant_id)
        self.access_key = _clean(self.access_key)
        self.secret_key = _clean(self.secret_key)
        self.partner_tag = _clean(self.partner_tag)
        self.bot_token = _clean(self.bot_token)
        self.admin_chat_id = _clean(self.admin_chat_id)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TenantConfig":
        """Build from a ``user_settings`` table row."""
        return cls(
            tenant_id=row.get("device_id"),
            access_key=row.get("amazon_access_key"),
            secret_key=row.get("amazon_secret_key"),
            partner_tag=row.get("amazon_partner_tag"),
            bot_token=row.get("tg_bot_token"),
            admin_chat_id=row.get("tg_admin_id"),
        )

    @property
    def credentials(self) -> CatalogCredentials:
        return CatalogCredentials(self.access_key, self.secret_key, self.partner_tag)

    @property
    def has_catalog_credentials(self) -> bool:
        return bool(self.tenant_id) and self.credentials.complete

    @property
    def has_notification_channel(self) -> bool:
        return bool(self.bot_token and self.admin_chat_id)
