"""Inventory ledger: tenant-scoped stock bookkeeping per variant.

Every operation is a read-modify-write of one Variant executed while
holding that variant's row lock, so two concurrent reservations can never
both pass the availability check. Crossing the low-stock threshold or zero
publishes a ``stock.*`` event to the event sink.
"""

import threading
import zlib

import structlog
from protean.utils.globals import current_domain

from commerce.inventory.variant import Variant
from commerce.shared.tenancy import store_errors
from commerce.sink.envelope import publish_event

logger = structlog.get_logger(__name__)


class _RowLocks:
    """A fixed pool of locks; each variant id always maps to the same one."""

    def __init__(self, size: int = 64):
        self._locks = [threading.Lock() for _ in range(size)]

    def for_variant(self, variant_id) -> threading.Lock:
        return self._locks[zlib.crc32(str(variant_id).encode()) % len(self._locks)]


_row_locks = _RowLocks()


class InventoryLedger:
    def __init__(self):
        self.repo = current_domain.repository_for(Variant)

    def _mutate(self, tenant_id, variant_id, operation: str, mutation):
        with _row_locks.for_variant(variant_id):
            with store_errors("load variant", variant_id=str(variant_id)):
                variant = self.repo.get_for_tenant(tenant_id, variant_id)
            previous_available = variant.available
            mutation(variant)
            with store_errors("save variant", variant_id=str(variant_id)):
                self.repo.add(variant)

        logger.info(
            operation,
            tenant_id=str(tenant_id),
            variant_id=str(variant_id),
            stock=variant.stock,
            reserved=variant.reserved,
        )
        self._signal_threshold(variant, previous_available)
        return variant

    def _signal_threshold(self, variant: Variant, previous_available: int):
        threshold = variant.low_stock_threshold or 0
        current = variant.available
        payload = {
            "variantId": str(variant.id),
            "productId": str(variant.product_id),
            "sku": variant.sku,
            "available": current,
            "threshold": threshold,
        }

        if current <= 0 < previous_available:
            publish_event("stock.out", variant.tenant_id, payload, source="inventory")
        elif 0 < current <= threshold < previous_available:
            publish_event("stock.low", variant.tenant_id, payload, source="inventory")
        elif previous_available <= threshold < current:
            publish_event("stock.replenished", variant.tenant_id, payload, source="inventory")

    def adjust_stock(self, tenant_id, variant_id, delta: int, reason: str | None = None) -> Variant:
        """Change on-hand stock by ``delta``. Fails if stock would go negative."""
        return self._mutate(tenant_id, variant_id, "stock_adjusted", lambda v: v.adjust(delta, reason=reason))

    def reserve_stock(self, tenant_id, variant_id, quantity: int) -> Variant:
        """Hold units for a checkout. Fails when fewer than ``quantity`` are available."""
        return self._mutate(tenant_id, variant_id, "stock_reserved", lambda v: v.reserve(quantity))

    def release_stock(self, tenant_id, variant_id, quantity: int) -> Variant:
        """Return held units. Clamped at zero, never fails for an existing variant."""
        return self._mutate(tenant_id, variant_id, "stock_released", lambda v: v.release(quantity))

    def commit_reservation(self, tenant_id, variant_id, quantity: int) -> Variant:
        """Convert a hold into a sale: stock and reserved both drop by ``quantity``."""
        return self._mutate(tenant_id, variant_id, "reservation_committed", lambda v: v.commit(quantity))
