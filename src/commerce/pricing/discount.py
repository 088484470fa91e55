"""Discount aggregate: a tenant's promotional code."""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from commerce.domain import commerce
from commerce.exceptions import ValidationFailed
from commerce.shared.tenancy import TenantScopedRepository


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"
    BOGO = "bogo"


@commerce.aggregate
class Discount:
    """A redeemable code. Codes are stored upper-cased and unique per tenant."""

    tenant_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    type = String(required=True, choices=DiscountType)
    value = Float(required=True, min_value=0.0)
    min_order_value = Float(min_value=0.0)
    max_discount = Float(min_value=0.0)
    usage_limit = Integer(min_value=1)
    used_count = Integer(default=0, min_value=0)
    starts_at = DateTime(default=lambda: datetime.now(UTC))
    ends_at = DateTime()
    is_active = Boolean(default=True)
    whatsapp_only = Boolean(default=False)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def usage_cannot_exceed_limit(self):
        if self.usage_limit is not None and (self.used_count or 0) > self.usage_limit:
            raise ValidationError({"used_count": ["Usage cannot exceed the usage limit"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.type == DiscountType.PERCENTAGE.value and self.value is not None and self.value > 100:
            raise ValidationError({"value": ["Percentage discounts cannot exceed 100"]})

    @classmethod
    def create(cls, tenant_id, code, **kwargs):
        code = (code or "").strip().upper()
        if not code:
            raise ValidationFailed("Discount code cannot be empty", field="code")
        return cls(tenant_id=str(tenant_id), code=code, **kwargs)

    def redeem(self):
        """Count one successful redemption."""
        if self.usage_limit is not None and self.used_count >= self.usage_limit:
            raise ValidationFailed(f"Code {self.code} has reached its usage limit", field="code")
        with atomic_change(self):
            self.used_count = (self.used_count or 0) + 1

    def deactivate(self):
        self.is_active = False


@commerce.repository(part_of=Discount)
class DiscountRepository(TenantScopedRepository):
    entity_label = "Discount"

    def find_by_code(self, tenant_id, code: str) -> Discount | None:
        if not code:
            return None
        matches = self.list_for_tenant(tenant_id, code=code.strip().upper())
        return matches[0] if matches else None
