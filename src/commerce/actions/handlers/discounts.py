"""Discount actions."""

from datetime import datetime

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.exceptions import ValidationFailed
from commerce.pricing.discount import Discount, DiscountType
from commerce.shared.payloads import CamelModel


class CreateDiscountPayload(CamelModel):
    code: str
    type: DiscountType
    value: float
    min_order_value: float | None = None
    max_discount: float | None = None
    usage_limit: int | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    whatsapp_only: bool = False


class DiscountRefPayload(CamelModel):
    discount_id: str


def summary(discount: Discount) -> dict:
    return {
        "id": str(discount.id),
        "code": discount.code,
        "type": discount.type,
        "value": discount.value,
        "minOrderValue": discount.min_order_value,
        "maxDiscount": discount.max_discount,
        "usageLimit": discount.usage_limit,
        "usedCount": discount.used_count,
        "endsAt": discount.ends_at.isoformat() if discount.ends_at else None,
        "isActive": discount.is_active,
    }


@action_handler("discount.create", payload=CreateDiscountPayload)
def create(tenant_id, payload: CreateDiscountPayload):
    repo = current_domain.repository_for(Discount)
    if repo.find_by_code(tenant_id, payload.code) is not None:
        raise ValidationFailed(f"A discount with code {payload.code.strip().upper()} already exists", field="code")
    if payload.value <= 0:
        raise ValidationFailed("Discount value must be greater than 0", field="value")

    details = payload.model_dump(exclude={"code", "type", "starts_at"}, exclude_none=True)
    if payload.starts_at is not None:
        details["starts_at"] = payload.starts_at

    discount = Discount.create(tenant_id, payload.code, type=payload.type.value, **details)
    repo.add(discount)
    return summary(discount)


@action_handler("discount.deactivate", payload=DiscountRefPayload)
def deactivate(tenant_id, payload: DiscountRefPayload):
    repo = current_domain.repository_for(Discount)
    discount = repo.get_for_tenant(tenant_id, payload.discount_id)
    discount.deactivate()
    repo.add(discount)
    return summary(discount)
