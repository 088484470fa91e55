"""Order aggregate: a placed checkout and its lifecycle.

Line item prices are a snapshot taken at checkout and never follow later
catalogue changes. Status changes go through ``transition_to``, which
enforces the lifecycle rules in ``commerce.ordering.transitions``.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from commerce.domain import commerce
from commerce.ordering.events import OrderPlaced, OrderStatusChanged
from commerce.ordering.transitions import (
    FulfillmentStatus,
    OrderStatus,
    assert_transition,
    fulfillment_status_for,
)
from commerce.shared.money import round_currency
from commerce.shared.tenancy import TenantScopedRepository


@commerce.entity(part_of="Order")
class LineItem:
    """One product (optionally one variant of it) at a locked unit price."""

    product_id = Identifier(required=True)
    variant_id = Identifier()
    name = String(required=True, max_length=255)
    sku = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)
    hsn_code = String(max_length=20)
    gst_rate = Float(min_value=0.0)
    attributes = Text()  # JSON


@commerce.aggregate
class Order:
    tenant_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    order_month = String(max_length=6)  # YYYYMM, drives the monthly sequence
    buyer_name = String(max_length=255)
    buyer_phone = String(required=True, max_length=20)
    buyer_email = String(max_length=254)
    shipping_address = Text()  # JSON
    billing_address = Text()  # JSON
    line_items = HasMany(LineItem)
    subtotal = Float(default=0.0, min_value=0.0)
    discount_amount = Float(default=0.0, min_value=0.0)
    tax_amount = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.CREATED.value)
    fulfillment_status = String(choices=FulfillmentStatus, default=FulfillmentStatus.UNFULFILLED.value)
    payment_method = String(max_length=50)
    payment_status = String(max_length=50, default="pending")
    payment_reference = String(max_length=255)
    shipping_mode = String(max_length=50, default="self_managed")
    tracking_number = String(max_length=255)
    tracking_url = String(max_length=1000)
    awb_number = String(max_length=100)
    discount_code = String(max_length=50)
    cod_otp_verified_at = DateTime()
    cancellation_reason = Text()
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place(
        cls,
        tenant_id,
        order_number,
        buyer_phone,
        items,
        pricing,
        buyer_name=None,
        buyer_email=None,
        shipping_address=None,
        billing_address=None,
        payment_method=None,
        discount_code=None,
        notes=None,
    ):
        """Record a checkout.

        Args:
            items: List of dicts with product_id, variant_id, name, sku,
                   quantity, unit_price and optional hsn_code, gst_rate, attributes.
            pricing: Dict with subtotal, discount_amount, tax_amount,
                     shipping_cost, total.
        """
        now = datetime.now(UTC)

        order = cls(
            tenant_id=str(tenant_id),
            order_number=order_number,
            order_month=now.strftime("%Y%m"),
            buyer_name=buyer_name,
            buyer_phone=buyer_phone,
            buyer_email=buyer_email,
            shipping_address=json.dumps(shipping_address) if shipping_address else None,
            billing_address=json.dumps(billing_address) if billing_address else None,
            subtotal=pricing["subtotal"],
            discount_amount=pricing.get("discount_amount", 0.0),
            tax_amount=pricing.get("tax_amount", 0.0),
            shipping_cost=pricing.get("shipping_cost", 0.0),
            total=pricing["total"],
            payment_method=payment_method,
            discount_code=discount_code,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        for item in items:
            order.add_line_items(
                LineItem(
                    product_id=str(item["product_id"]),
                    variant_id=str(item["variant_id"]) if item.get("variant_id") else None,
                    name=item["name"],
                    sku=item.get("sku"),
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    total_price=round_currency(item["unit_price"] * item["quantity"]),
                    hsn_code=item.get("hsn_code"),
                    gst_rate=item.get("gst_rate"),
                    attributes=json.dumps(item["attributes"]) if item.get("attributes") else None,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                tenant_id=str(tenant_id),
                order_number=order_number,
                line_items=json.dumps(order.line_item_dicts()),
                subtotal=order.subtotal,
                discount_amount=order.discount_amount,
                tax_amount=order.tax_amount,
                shipping_cost=order.shipping_cost,
                total=order.total,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    def line_item_dicts(self) -> list[dict]:
        return [
            {
                "product_id": str(item.product_id),
                "variant_id": str(item.variant_id) if item.variant_id else None,
                "name": item.name,
                "sku": item.sku,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total_price": item.total_price,
            }
            for item in self.line_items
        ]

    def transition_to(self, target_status: str, notes: str | None = None, **details):
        """Move to ``target_status`` and record the accompanying details.

        Recognised details: tracking_number, tracking_url, awb_number,
        payment_status, payment_reference, cancellation_reason.
        """
        previous = self.status
        assert_transition(previous, target_status)

        now = datetime.now(UTC)
        self.status = target_status
        self.fulfillment_status = fulfillment_status_for(target_status, self.fulfillment_status)

        for name in ("tracking_number", "tracking_url", "awb_number", "payment_status", "payment_reference", "cancellation_reason"):
            if details.get(name) is not None:
                setattr(self, name, details[name])

        if target_status == OrderStatus.PAID.value and details.get("payment_status") is None:
            self.payment_status = "paid"
        if target_status == OrderStatus.COD_OTP_VERIFIED.value:
            self.cod_otp_verified_at = now
        if notes:
            self.notes = notes
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                tenant_id=str(self.tenant_id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target_status,
                fulfillment_status=self.fulfillment_status,
                notes=notes,
                changed_at=now,
            )
        )


@commerce.repository(part_of=Order)
class OrderRepository(TenantScopedRepository):
    entity_label = "Order"

    def count_in_month(self, tenant_id, order_month: str) -> int:
        return self.count_for_tenant(tenant_id, order_month=order_month)

    def referencing_variant(self, tenant_id, variant_id) -> list[Order]:
        return [
            order
            for order in self.list_for_tenant(tenant_id)
            if any(str(item.variant_id) == str(variant_id) for item in order.line_items if item.variant_id)
        ]
