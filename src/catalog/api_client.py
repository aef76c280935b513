"""
Catalog API Client

Client for the partner product catalog (Product Advertising API 5, GetItems).
Signs each request, sends it once, and parses offers into prices.
"""

import json
import logging
import math
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import requests

from ..common.config_loader import CatalogSettings
from ..common.constants import PARTNER_TYPE
from ..common.errors import UpstreamError
from ..models import CatalogCredentials, TenantConfig
from .signing import SigningConfig, build_signed_headers

logger = logging.getLogger(__name__)


def build_payload(
    item_ids: List[str],
    partner_tag: str,
    marketplace: str,
    resources: List[str],
    languages: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build the GetItems request body."""
    payload: Dict[str, Any] = {
        "ItemIds": list(item_ids),
        "PartnerTag": partner_tag,
        "PartnerType": PARTNER_TYPE,
        "Marketplace": marketplace,
    }
    if languages:
        payload["LanguagesOfPreference"] = list(languages)
    payload["Resources"] = list(resources)
    return payload


def encode_payload(payload: Dict[str, Any]) -> bytes:
    """Compact JSON; these exact bytes are both signed and sent."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _offer_amount(item: Dict[str, Any]) -> Optional[float]:
    """OffersV2.Listings[0].Price.Money.Amount, or None."""
    try:
        listings = item["OffersV2"]["Listings"]
        amount = listings[0]["Price"]["Money"]["Amount"]
    except (KeyError, IndexError, TypeError):
        return None
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_prices(response: Any) -> Dict[str, float]:
    """
    Extract ASIN -> price from a GetItems response.

    Items without an offer are absent from the result. An empty or
    malformed item list yields an empty dict rather than an error.
    """
    if not isinstance(response, dict):
        return {}
    items = (response.get("ItemsResult") or {}).get("Items")
    if not isinstance(items, list):
        if response.get("Errors"):
            logger.warning("Catalog returned errors: %s", str(response["Errors"])[:200])
        return {}

    prices = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("ASIN"):
            continue
        amount = _offer_amount(item)
        if amount is not None:
            prices[str(item["ASIN"]).upper()] = amount
    return prices


class CatalogAPIClient:
    """
    Client for the partner catalog GetItems operation.

    Handles:
    - Payload construction and request signing
    - A single POST per call (no retries)
    - Response parsing into an ASIN -> price map

    Usage:
        with CatalogAPIClient(settings) as client:
            raw = client.get_items(["B0XXXXXXXX"], tenant.credentials)
            prices = client.fetch_prices(["B0XXXXXXXX"], tenant)
    """

    def __init__(
        self,
        settings: Optional[CatalogSettings] = None,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Marketplace and batching settings (defaults if None)
            session: Shared requests session (a new one if None)
            clock: Returns the signing timestamp; defaults to now (UTC)
        """
        self.settings = settings or CatalogSettings()
        self.signing_config = SigningConfig(
            host=self.settings.host,
            path=self.settings.path,
            region=self.settings.region,
            service=self.settings.service,
            target=self.settings.target,
        )
        self.url = f"https://{self.settings.host}{self.settings.path}"
        self.session = session or requests.Session()
        self.clock = clock

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def get_items(
        self,
        item_ids: List[str],
        credentials: CatalogCredentials,
        resources: Optional[List[str]] = None,
        languages: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Send one signed GetItems request.

        Args:
            item_ids: Catalog identifiers (at most max_items_per_request)
            credentials: Tenant's access key, secret key and partner tag
            resources: Response resources (batch resources if None)
            languages: Optional LanguagesOfPreference

        Returns:
            Raw response JSON

        Raises:
            ValueError: If more identifiers than the per-request ceiling
            UpstreamError: On network failure, non-2xx status or non-JSON body
        """
        if len(item_ids) > self.settings.max_items_per_request:
            raise ValueError(
                f"{len(item_ids)} items exceeds per-request limit of "
                f"{self.settings.max_items_per_request}"
            )

        payload = encode_payload(build_payload(
            item_ids,
            credentials.partner_tag,
            self.settings.marketplace,
            resources if resources is not None else self.settings.batch_resources,
            languages,
        ))
        now = self.clock() if self.clock else None
        headers = build_signed_headers(self.signing_config, credentials, payload, now)

        logger.debug("GetItems %s (%d items)", ",".join(item_ids), len(item_ids))
        try:
            response = self.session.post(
                self.url,
                data=payload,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
        except requests.exceptions.Timeout as e:
            raise UpstreamError(f"Catalog request timeout: {e}") from e
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"Catalog request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            body = response.text[:200]
            raise UpstreamError(
                f"Catalog API error {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "Catalog API returned a non-JSON body",
                status_code=response.status_code,
                body=response.text[:200],
            ) from e

    def get_item(self, asin: str, credentials: CatalogCredentials) -> Dict[str, Any]:
        """Full product card for a single identifier (item resources + languages)."""
        return self.get_items(
            [asin],
            credentials,
            resources=self.settings.item_resources,
            languages=self.settings.item_languages,
        )

    def fetch_prices(self, item_ids: List[str], tenant: TenantConfig) -> Dict[str, float]:
        """
        Fetch current prices for one batch of identifiers.

        Returns:
            Dict mapping upper-case ASIN -> price; items with no offer are absent
        """
        response = self.get_items(item_ids, tenant.credentials)
        prices = parse_prices(response)
        logger.debug("Tenant %s: %d/%d items priced", tenant.tenant_id, len(prices), len(item_ids))
        return prices
