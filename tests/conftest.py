"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from src.common.config_loader import CatalogSettings
from src.models import CatalogCredentials, Product, TenantConfig

FIXED_NOW = datetime(2024, 1, 31, 9, 45, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    """Fixed UTC instant used as the signing and write-back clock."""
    return FIXED_NOW


@pytest.fixture
def settings():
    """Default catalog settings (no YAML involved)."""
    return CatalogSettings()


@pytest.fixture
def credentials():
    return CatalogCredentials(
        access_key="AKIDEXAMPLE",
        secret_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        partner_tag="mystore-21",
    )


@pytest.fixture
def tenant():
    """Tenant with catalog credentials and a Telegram channel."""
    return TenantConfig(
        tenant_id="device-1",
        access_key="AKIDEXAMPLE",
        secret_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        partner_tag="mystore-21",
        bot_token="123:abc",
        admin_chat_id="-1001",
    )


@pytest.fixture
def make_product():
    """Factory for products owned by device-1."""
    def _make(asin="B0XXXXXXXX", price=250, last_update="2024-01-01T00:00:00+00:00", **kwargs):
        return Product(
            asin=asin,
            tenant_id=kwargs.pop("tenant_id", "device-1"),
            title=kwargs.pop("title", "Test Product"),
            price=price,
            image=kwargs.pop("image", "https://m.media-amazon.com/images/I/test.jpg"),
            affiliate_link=kwargs.pop("affiliate_link", "https://amzn.to/test"),
            last_update=last_update,
        )
    return _make


@pytest.fixture
def catalog_response():
    """Build a GetItems response body from {asin: amount}; None omits the offer."""
    def _build(prices):
        items = []
        for asin, amount in prices.items():
            item = {"ASIN": asin, "ItemInfo": {"Title": {"DisplayValue": f"Item {asin}"}}}
            if amount is not None:
                item["OffersV2"] = {"Listings": [{"Price": {"Money": {"Amount": amount, "Currency": "EGP"}}}]}
            items.append(item)
        return {"ItemsResult": {"Items": items}}
    return _build

