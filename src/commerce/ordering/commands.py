"""Order placement and lifecycle — commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text

from commerce.domain import commerce
from commerce.ordering.order import Order
from commerce.ordering.service import OrderService


@commerce.command(part_of="Order")
class PlaceOrder:
    """Record a buyer's checkout."""

    tenant_id = Identifier(required=True)
    buyer_phone = String(required=True, max_length=20)
    buyer_name = String(max_length=255)
    buyer_email = String(max_length=254)
    line_items = Text(required=True)  # JSON: list of line item dicts
    shipping_address = Text()  # JSON
    billing_address = Text()  # JSON
    payment_method = String(max_length=50, default="cod")
    discount_code = String(max_length=50)
    tax_amount = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    apply_gst = Boolean(default=False)
    seller_state = String(max_length=100)
    notes = Text()


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    """Move an order one step through its lifecycle."""

    tenant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    tracking_number = String(max_length=255)
    tracking_url = String(max_length=1000)
    awb_number = String(max_length=100)
    payment_status = String(max_length=50)
    payment_reference = String(max_length=255)
    cancellation_reason = Text()
    notes = Text()


@commerce.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = OrderService().create_order(
            tenant_id=command.tenant_id,
            buyer_phone=command.buyer_phone,
            buyer_name=command.buyer_name,
            buyer_email=command.buyer_email,
            line_items=json.loads(command.line_items),
            shipping_address=json.loads(command.shipping_address) if command.shipping_address else None,
            billing_address=json.loads(command.billing_address) if command.billing_address else None,
            payment_method=command.payment_method,
            discount_code=command.discount_code,
            tax_amount=command.tax_amount or 0.0,
            shipping_cost=command.shipping_cost or 0.0,
            apply_gst=bool(command.apply_gst),
            seller_state=command.seller_state,
            notes=command.notes,
        )
        return {"order_id": str(order.id), "order_number": order.order_number, "total": order.total}

    @handle(UpdateOrderStatus)
    def update_status(self, command):
        order = OrderService().update_status(
            command.tenant_id,
            command.order_id,
            command.status,
            notes=command.notes,
            tracking_number=command.tracking_number,
            tracking_url=command.tracking_url,
            awb_number=command.awb_number,
            payment_status=command.payment_status,
            payment_reference=command.payment_reference,
            cancellation_reason=command.cancellation_reason,
        )
        return {"order_id": str(order.id), "status": order.status, "fulfillment_status": order.fulfillment_status}
