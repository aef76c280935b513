"""In-process product store with the same contract as the Supabase gateway."""

import threading
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from ..common.errors import PersistenceError
from ..models import Product, TenantConfig
from ..reconcile import select_stale
from .base import PersistenceGateway


class InMemoryGateway(PersistenceGateway):
    """
    Dict-backed gateway keyed by (tenant_id, asin).

    ``writes`` records every applied update in order, for inspection.
    """

    def __init__(
        self,
        tenants: Iterable[TenantConfig] = (),
        products: Iterable[Product] = (),
    ):
        self.tenants: List[TenantConfig] = list(tenants)
        self.products: Dict[tuple, Product] = {}
        for product in products:
            self.products[(product.tenant_id, product.asin)] = product
        self.writes: List[tuple] = []
        self._lock = threading.Lock()

    def list_tenant_configs(self) -> List[TenantConfig]:
        return list(self.tenants)

    def list_stale_products(self, tenant_id: str, limit: int) -> List[Product]:
        with self._lock:
            owned = [replace(p) for (tid, _), p in self.products.items() if tid == tenant_id]
        return select_stale(owned, limit)

    def update_product(
        self,
        asin: str,
        tenant_id: str,
        fields: Dict[str, Any],
        expected_last_update: Optional[str] = None,
    ) -> bool:
        key = (tenant_id, asin.upper())
        with self._lock:
            current = self.products.get(key)
            if current is None:
                raise PersistenceError(f"No product {asin} for tenant {tenant_id}")
            if current.last_update != expected_last_update:
                return False

            unknown = set(fields) - {"price", "last_update"}
            if unknown:
                raise PersistenceError(f"Unknown product fields: {sorted(unknown)}")

            self.products[key] = replace(current, **fields)
            self.writes.append((tenant_id, key[1], dict(fields)))
        return True

    def get(self, tenant_id: str, asin: str) -> Optional[Product]:
        return self.products.get((tenant_id, asin.upper()))
