"""Base class for the product store."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import Product, TenantConfig


class PersistenceGateway(ABC):
    """
    Tenant settings and product rows.

    No transactional guarantee spans calls. Writes take an optional
    concurrency token: the ``last_update`` value read at selection time.
    A write whose token no longer matches is a lost race and is skipped.
    """

    @abstractmethod
    def list_tenant_configs(self) -> List[TenantConfig]:
        """All tenant settings rows."""

    @abstractmethod
    def list_stale_products(self, tenant_id: str, limit: int) -> List[Product]:
        """Up to ``limit`` of the tenant's products, oldest ``last_update`` first."""

    @abstractmethod
    def update_product(
        self,
        asin: str,
        tenant_id: str,
        fields: Dict[str, Any],
        expected_last_update: Optional[str] = None,
    ) -> bool:
        """
        Apply ``fields`` to one product.

        Returns:
            True if a row was written, False if the concurrency token no
            longer matched (another run refreshed the product first)

        Raises:
            PersistenceError: If the store rejected the write
        """
