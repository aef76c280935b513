"""
Product data models.

Pure data classes for stored catalog products and the price deltas
produced when they are reconciled against the partner catalog.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..common.errors import ValidationError

ASIN_PATTERN = re.compile(r"^[A-Z0-9]{10}$")


def normalize_asin(value: Optional[str]) -> str:
    """
    Canonicalize a catalog item identifier.

    Identifiers are case-insensitive; the canonical form is upper-case.

    Raises:
        ValidationError: If the identifier is empty or not 10 alphanumerics
    """
    asin = (value or "").strip().upper()
    if not asin:
        raise ValidationError("ASIN is required")
    if not ASIN_PATTERN.match(asin):
        raise ValidationError(f"Invalid ASIN: {value!r}")
    return asin


def _to_price(value: Any) -> float:
    """Stored prices may be null or numeric strings; null means no offer."""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class PriceStatus:
    """Classification of a reconciled product."""
    MISSING = "missing"              # no offer in the catalog response
    UNCHANGED = "unchanged"
    PRICE_UPDATED = "price-updated"
    OUT_OF_STOCK = "out-of-stock"

    CHANGED = frozenset({PRICE_UPDATED, OUT_OF_STOCK})


@dataclass
class Product:
    """A tracked catalog product owned by one tenant."""
    asin: str
    tenant_id: str
    title: str = ""
    price: float = 0.0          # 0 means unknown / no offer
    image: str = ""
    affiliate_link: str = ""
    last_update: Optional[str] = None  # ISO-8601, None if never refreshed

    def __post_init__(self):
        self.asin = (self.asin or "").strip().upper()
        if not self.asin:
            raise ValueError("Product ASIN is required")
        self.price = _to_price(self.price)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        """Build from a ``products`` table row."""
        return cls(
            asin=row.get("asin") or "",
            tenant_id=row.get("user_id") or "",
            title=row.get("title") or "",
            price=row.get("price"),
            image=row.get("image") or "",
            affiliate_link=row.get("affiliate_link") or "",
            last_update=row.get("last_update"),
        )


@dataclass
class PriceDelta:
    """
    Outcome of comparing a stored product with the freshly fetched price.

    ``new_price`` is None when the catalog returned no offer for the item.
    Display fields are carried along for the change notice.
    """
    asin: str
    old_price: float
    new_price: Optional[float]
    status: str
    title: str = ""
    image: str = ""
    link: str = ""

    @property
    def changed(self) -> bool:
        return self.status in PriceStatus.CHANGED
