"""
Scheduled product price refresh.

For every tenant: take the stalest products, fetch current catalog prices,
classify, write back, and notify the tenant's admin chat about changes.

WORKFLOW (per tenant):
1. Skip tenants without complete catalog credentials
2. Select up to batch_size products, oldest last_update first
3. Fetch prices in chunks of at most max_items_per_request (one call each)
4. Changed items: write price + timestamp, then notify
   Unchanged / missing-offer items: write timestamp only

Failures are absorbed at the narrowest level that keeps the run going:
a failed chunk fetch skips that chunk, a failed write skips that product,
an unexpected error skips the rest of that tenant.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from ..common.config_loader import CatalogSettings
from ..common.errors import PersistenceError, UpstreamError
from ..models import PriceDelta, PriceStatus, Product, TenantConfig
from ..notify import TelegramNotifier
from ..persistence import PersistenceGateway
from ..reconcile import chunked, reconcile

logger = logging.getLogger(__name__)


@dataclass
class UpdateSummary:
    """Counters for one run."""
    tenants: int = 0
    tenants_processed: int = 0
    tenants_skipped: int = 0
    tenants_failed: int = 0
    products_checked: int = 0
    prices_updated: int = 0
    out_of_stock: int = 0
    unchanged: int = 0
    missing_offers: int = 0
    notifications_sent: int = 0
    upstream_failures: int = 0
    write_failures: int = 0
    write_conflicts: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_notifier_factory(settings: CatalogSettings) -> Callable[[TenantConfig], Optional[TelegramNotifier]]:
    def factory(tenant: TenantConfig) -> Optional[TelegramNotifier]:
        return TelegramNotifier.for_tenant(
            tenant,
            tz=settings.notify_timezone,
            max_length=settings.caption_max_length,
        )
    return factory


class ProductUpdater:
    """
    Runs the multi-tenant price refresh once.

    Attributes:
        gateway: Product store
        catalog_client: Anything with ``fetch_prices(item_ids, tenant)``
        settings: Batch size, per-request ceiling, notification settings
        fail_fast: Re-raise unexpected tenant errors instead of moving on
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        catalog_client,
        settings: Optional[CatalogSettings] = None,
        notifier_factory: Optional[Callable[[TenantConfig], Optional[TelegramNotifier]]] = None,
        clock: Callable[[], datetime] = _utc_now,
        fail_fast: bool = False,
    ):
        self.gateway = gateway
        self.catalog_client = catalog_client
        self.settings = settings or CatalogSettings()
        self.notifier_factory = notifier_factory or default_notifier_factory(self.settings)
        self.clock = clock
        self.fail_fast = fail_fast

    def run(self) -> UpdateSummary:
        """
        Process every tenant sequentially.

        Raises:
            PersistenceError: If tenant settings cannot be listed at all
        """
        summary = UpdateSummary()
        tenants = self.gateway.list_tenant_configs()
        summary.tenants = len(tenants)
        logger.info("Price refresh started for %d tenants", len(tenants))

        for tenant in tenants:
            if not tenant.has_catalog_credentials:
                logger.info("Skipping tenant %s: catalog credentials missing", tenant.tenant_id or "?")
                summary.tenants_skipped += 1
                continue

            try:
                self.process_tenant(tenant, summary)
            except Exception:
                summary.tenants_failed += 1
                logger.exception("Tenant %s failed", tenant.tenant_id)
                if self.fail_fast:
                    raise
            else:
                summary.tenants_processed += 1

        logger.info(
            "Price refresh done: %d checked, %d updated, %d out of stock, %d notified",
            summary.products_checked, summary.prices_updated,
            summary.out_of_stock, summary.notifications_sent,
        )
        return summary

    def process_tenant(self, tenant: TenantConfig, summary: UpdateSummary) -> None:
        products = self.gateway.list_stale_products(tenant.tenant_id, self.settings.batch_size)
        if not products:
            logger.debug("Tenant %s has no products", tenant.tenant_id)
            return

        notifier = self.notifier_factory(tenant)
        logger.info("Tenant %s: refreshing %d products", tenant.tenant_id, len(products))

        for chunk in chunked(products, self.settings.max_items_per_request):
            asins = [p.asin for p in chunk]
            try:
                prices = self.catalog_client.fetch_prices(asins, tenant)
            except UpstreamError as e:
                summary.upstream_failures += 1
                logger.error("Tenant %s: catalog fetch failed for %s: %s",
                             tenant.tenant_id, ",".join(asins), e)
                continue

            for product, delta in zip(chunk, reconcile(chunk, prices)):
                self.apply_delta(tenant, product, delta, notifier, summary)

    def apply_delta(
        self,
        tenant: TenantConfig,
        product: Product,
        delta: PriceDelta,
        notifier: Optional[TelegramNotifier],
        summary: UpdateSummary,
    ) -> None:
        """Write back one reconciled product and notify if its price changed."""
        summary.products_checked += 1
        now = self.clock()

        fields = {"last_update": now.isoformat()}
        if delta.changed:
            price = delta.new_price
            if delta.status == PriceStatus.OUT_OF_STOCK:
                price = max(price, 0)
            fields["price"] = price

        try:
            written = self.gateway.update_product(
                product.asin,
                tenant.tenant_id,
                fields,
                expected_last_update=product.last_update,
            )
        except PersistenceError as e:
            summary.write_failures += 1
            logger.error("Tenant %s: write failed for %s: %s", tenant.tenant_id, product.asin, e)
            return

        if not written:
            summary.write_conflicts += 1
            logger.info("Tenant %s: %s refreshed by another run, skipped",
                        tenant.tenant_id, product.asin)
            return

        if delta.status == PriceStatus.MISSING:
            summary.missing_offers += 1
        elif delta.status == PriceStatus.UNCHANGED:
            summary.unchanged += 1
        elif delta.status == PriceStatus.OUT_OF_STOCK:
            summary.out_of_stock += 1
        else:
            summary.prices_updated += 1

        if delta.changed:
            logger.info("Tenant %s: %s %s -> %s (%s)", tenant.tenant_id, product.asin,
                        delta.old_price, delta.new_price, delta.status)
            if notifier and notifier.notify(delta, now=now):
                summary.notifications_sent += 1
