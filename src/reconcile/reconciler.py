"""
Price reconciliation.

Compares stored product prices with freshly fetched catalog prices.
Comparison is on whole currency units (floor) since prices are displayed
truncated; sub-unit moves are not changes.
"""

import math
from typing import Dict, Iterable, Iterator, List, Sequence, TypeVar

from ..models import PriceDelta, PriceStatus, Product

T = TypeVar("T")


def classify(product: Product, fetched_prices: Dict[str, float]) -> PriceDelta:
    """
    Classify one product against the fetched price map.

    Order matters:
    1. No fetched entry          -> MISSING (price untouched, timestamp refreshed)
    2. floor(new) == floor(old)  -> UNCHANGED
    3. new <= 0                  -> OUT_OF_STOCK
    4. otherwise                 -> PRICE_UPDATED
    """
    new_price = fetched_prices.get(product.asin.upper())

    if new_price is None:
        status = PriceStatus.MISSING
    elif math.floor(new_price) == math.floor(product.price):
        status = PriceStatus.UNCHANGED
    elif new_price <= 0:
        status = PriceStatus.OUT_OF_STOCK
    else:
        status = PriceStatus.PRICE_UPDATED

    return PriceDelta(
        asin=product.asin,
        old_price=product.price,
        new_price=new_price,
        status=status,
        title=product.title,
        image=product.image,
        link=product.affiliate_link,
    )


def reconcile(products: Iterable[Product], fetched_prices: Dict[str, float]) -> List[PriceDelta]:
    """One delta per product, in input order."""
    return [classify(p, fetched_prices) for p in products]


def select_stale(products: Iterable[Product], limit: int) -> List[Product]:
    """
    The ``limit`` products with the oldest freshness timestamp.

    Never-refreshed products (no timestamp) come first. Ties keep input order.
    """
    ordered = sorted(
        products,
        key=lambda p: (p.last_update is not None, p.last_update or ""),
    )
    return ordered[:max(limit, 0)]


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Split into consecutive batches of at most ``size`` items."""
    if size < 1:
        raise ValueError("size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
