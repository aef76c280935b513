"""
Supabase product store.

Talks to the PostgREST endpoint of a Supabase project over plain HTTP:
``user_settings`` holds tenant configuration, ``products`` the tracked items.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from ..common.errors import PersistenceError
from ..models import Product, TenantConfig
from .base import PersistenceGateway

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "user_settings"
PRODUCTS_TABLE = "products"


class SupabaseGateway(PersistenceGateway):
    """
    PostgREST-backed gateway.

    Usage:
        gateway = SupabaseGateway.from_env()
        for tenant in gateway.list_tenant_configs():
            products = gateway.list_stale_products(tenant.tenant_id, 20)
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        if not url or not api_key:
            raise ValueError("Supabase URL and API key are required")
        self.rest_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_env(cls, **kwargs) -> "SupabaseGateway":
        """Build from SUPABASE_URL and SUPABASE_ANON_KEY."""
        return cls(
            os.environ.get("SUPABASE_URL", ""),
            os.environ.get("SUPABASE_ANON_KEY", ""),
            **kwargs,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _request(
        self,
        method: str,
        table: str,
        params: Dict[str, str],
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = f"{self.rest_url}/{table}"
        try:
            response = self.session.request(
                method, url, params=params, json=data, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"{method} {table} failed: {e}") from e

        if response.status_code >= 400:
            raise PersistenceError(
                f"{method} {table} HTTP {response.status_code}: {response.text[:200]}"
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(f"{method} {table} returned a non-JSON body") from e

    def list_tenant_configs(self) -> List[TenantConfig]:
        rows = self._request("GET", SETTINGS_TABLE, {"select": "*"}) or []
        return [TenantConfig.from_row(row) for row in rows]

    def list_stale_products(self, tenant_id: str, limit: int) -> List[Product]:
        rows = self._request("GET", PRODUCTS_TABLE, {
            "select": "*",
            "user_id": f"eq.{tenant_id}",
            "order": "last_update.asc.nullsfirst",
            "limit": str(limit),
        }) or []

        products = []
        for row in rows:
            try:
                products.append(Product.from_row(row))
            except ValueError as e:
                logger.warning("Skipping malformed product row for %s: %s", tenant_id, e)
        return products

    def update_product(
        self,
        asin: str,
        tenant_id: str,
        fields: Dict[str, Any],
        expected_last_update: Optional[str] = None,
    ) -> bool:
        params = {
            "asin": f"eq.{asin}",
            "user_id": f"eq.{tenant_id}",
        }
        if expected_last_update is None:
            params["last_update"] = "is.null"
        else:
            params["last_update"] = f"eq.{expected_last_update}"

        rows = self._request(
            "PATCH",
            PRODUCTS_TABLE,
            params,
            data=fields,
            headers={"Prefer": "return=representation"},
        )
        return bool(rows)
