"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A buyer checked out and the order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    order_number = String(required=True)
    line_items = Text(required=True)  # JSON: list of line item dicts
    subtotal = Float(required=True)
    discount_amount = Float()
    tax_amount = Float()
    shipping_cost = Float()
    total = Float(required=True)
    payment_method = String()
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderStatusChanged:
    """The order moved one step through its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    fulfillment_status = String(required=True)
    notes = Text()
    changed_at = DateTime(required=True)
