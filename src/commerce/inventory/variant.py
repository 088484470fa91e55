"""Variant aggregate: a sellable option of a product with its stock.

Stock Model:
    stock:     Physical units on the shelf
    reserved:  Units held for checkouts in progress
    available: stock - reserved (what can still be sold)
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from commerce.domain import commerce
from commerce.exceptions import InsufficientStock, ValidationFailed
from commerce.inventory.events import ReservationCommitted, StockAdjusted, StockReleased, StockReserved
from commerce.shared.tenancy import TenantScopedRepository


@commerce.aggregate
class Variant:
    tenant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    sku = String(max_length=100)
    attributes = Text()  # JSON: {"size": "M", "colour": "Black"}
    price = Float(min_value=0.0)  # Overrides the product price when set
    stock = Integer(default=0, min_value=0)
    reserved = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=5, min_value=0)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime()

    @invariant.post
    def reserved_cannot_exceed_stock(self):
        if (self.reserved or 0) > (self.stock or 0):
            raise ValidationError({"reserved": ["Reserved units cannot exceed stock"]})

    @property
    def available(self) -> int:
        return (self.stock or 0) - (self.reserved or 0)

    @property
    def attribute_map(self) -> dict:
        return json.loads(self.attributes) if self.attributes else {}

    @staticmethod
    def _require_positive(quantity):
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise ValidationFailed("Quantity must be a positive whole number", field="quantity")

    def adjust(self, delta: int, reason: str | None = None):
        """Add ``delta`` units to stock (negative to remove)."""
        if not isinstance(delta, int) or isinstance(delta, bool) or delta == 0:
            raise ValidationFailed("Adjustment must be a non-zero whole number", field="adjustment")

        new_stock = self.stock + delta
        if new_stock < 0:
            raise InsufficientStock(str(self.id), self.available, -delta, message="Insufficient stock")
        if new_stock < self.reserved:
            raise InsufficientStock(
                str(self.id),
                self.available,
                -delta,
                message=f"Insufficient stock. {self.reserved} units are reserved",
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock = new_stock
            self.updated_at = now

        self.raise_(
            StockAdjusted(
                variant_id=str(self.id),
                tenant_id=str(self.tenant_id),
                delta=delta,
                new_stock=new_stock,
                reason=reason,
                adjusted_at=now,
            )
        )

    def reserve(self, quantity: int):
        """Hold ``quantity`` units for a checkout."""
        self._require_positive(quantity)
        if self.available < quantity:
            raise InsufficientStock(str(self.id), self.available, quantity)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.reserved = self.reserved + quantity
            self.updated_at = now

        self.raise_(
            StockReserved(
                variant_id=str(self.id),
                tenant_id=str(self.tenant_id),
                quantity=quantity,
                new_reserved=self.reserved,
                reserved_at=now,
            )
        )

    def release(self, quantity: int):
        """Give back up to ``quantity`` held units. Never goes below zero."""
        self._require_positive(quantity)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.reserved = max(0, self.reserved - quantity)
            self.updated_at = now

        self.raise_(
            StockReleased(
                variant_id=str(self.id),
                tenant_id=str(self.tenant_id),
                quantity=quantity,
                new_reserved=self.reserved,
                released_at=now,
            )
        )

    def commit(self, quantity: int):
        """Take ``quantity`` units off the shelf, consuming their hold."""
        self._require_positive(quantity)

        new_stock = self.stock - quantity
        new_reserved = max(0, self.reserved - quantity)
        if new_stock < 0 or new_stock < new_reserved:
            raise InsufficientStock(str(self.id), self.available, quantity)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock = new_stock
            self.reserved = new_reserved
            self.updated_at = now

        self.raise_(
            ReservationCommitted(
                variant_id=str(self.id),
                tenant_id=str(self.tenant_id),
                quantity=quantity,
                new_stock=new_stock,
                new_reserved=new_reserved,
                committed_at=now,
            )
        )


@commerce.repository(part_of=Variant)
class VariantRepository(TenantScopedRepository):
    entity_label = "Variant"

    def for_product(self, tenant_id, product_id) -> list[Variant]:
        return self.list_for_tenant(tenant_id, product_id=str(product_id))
