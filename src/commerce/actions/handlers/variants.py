"""Variant and stock actions."""

import json
from typing import Any

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.catalogue.product import Product
from commerce.config import setting
from commerce.exceptions import ValidationFailed
from commerce.inventory.ledger import InventoryLedger
from commerce.inventory.variant import Variant
from commerce.ordering.order import Order
from commerce.shared.payloads import CamelModel


class CreateVariantPayload(CamelModel):
    product_id: str
    attributes: dict[str, Any] = {}
    price: float | None = None
    stock: int = 0
    sku: str | None = None
    low_stock_threshold: int | None = None


class UpdateVariantPayload(CamelModel):
    variant_id: str
    attributes: dict[str, Any] | None = None
    price: float | None = None
    sku: str | None = None
    low_stock_threshold: int | None = None


class VariantRefPayload(CamelModel):
    variant_id: str


class StockUpdatePayload(CamelModel):
    variant_id: str
    adjustment: int
    reason: str | None = None


def _summary(variant: Variant) -> dict:
    return {
        "id": str(variant.id),
        "productId": str(variant.product_id),
        "sku": variant.sku,
        "attributes": variant.attribute_map,
        "price": variant.price,
        "stock": variant.stock,
        "reserved": variant.reserved,
        "available": variant.available,
    }


@action_handler("variant.create", payload=CreateVariantPayload)
def create(tenant_id, payload: CreateVariantPayload):
    current_domain.repository_for(Product).get_for_tenant(tenant_id, payload.product_id)
    if payload.stock < 0:
        raise ValidationFailed("Stock cannot be negative", field="stock")

    variant = Variant(
        tenant_id=tenant_id,
        product_id=payload.product_id,
        sku=payload.sku,
        attributes=json.dumps(payload.attributes),
        price=payload.price,
        stock=payload.stock,
        low_stock_threshold=(
            payload.low_stock_threshold
            if payload.low_stock_threshold is not None
            else setting("LOW_STOCK_THRESHOLD")
        ),
    )
    current_domain.repository_for(Variant).add(variant)
    return _summary(variant)


@action_handler("variant.update", payload=UpdateVariantPayload)
def update(tenant_id, payload: UpdateVariantPayload):
    repo = current_domain.repository_for(Variant)
    variant = repo.get_for_tenant(tenant_id, payload.variant_id)

    changes = payload.changes()
    changes.pop("variant_id")
    if "attributes" in changes:
        changes["attributes"] = json.dumps(changes["attributes"] or {})

    for field_name, value in changes.items():
        setattr(variant, field_name, value)
    repo.add(variant)
    return _summary(variant)


@action_handler("variant.delete", payload=VariantRefPayload)
def delete(tenant_id, payload: VariantRefPayload):
    """Delete a variant no order refers to."""
    repo = current_domain.repository_for(Variant)
    variant = repo.get_for_tenant(tenant_id, payload.variant_id)

    if current_domain.repository_for(Order).referencing_variant(tenant_id, variant.id):
        raise ValidationFailed(
            "This variant is part of existing orders and can't be deleted. Set its stock to 0 instead.",
            field="variantId",
        )

    repo.remove(variant)
    return {"deleted": True, "variantId": payload.variant_id}


@action_handler("stock.update", payload=StockUpdatePayload)
def update_stock(tenant_id, payload: StockUpdatePayload):
    variant = InventoryLedger().adjust_stock(tenant_id, payload.variant_id, payload.adjustment, reason=payload.reason)
    return _summary(variant)
