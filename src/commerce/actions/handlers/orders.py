"""Order lifecycle actions.

All three go through the order service so the state machine and its side
effects apply exactly as they do for API-driven status changes.
"""

from commerce.actions.registry import action_handler
from commerce.ordering.service import OrderService
from commerce.shared.payloads import CamelModel


class UpdateStatusPayload(CamelModel):
    order_id: str
    status: str
    tracking_number: str | None = None
    tracking_url: str | None = None
    awb_number: str | None = None
    notes: str | None = None


class ShipPayload(CamelModel):
    order_id: str
    tracking_number: str | None = None
    tracking_url: str | None = None
    awb_number: str | None = None


class CancelPayload(CamelModel):
    order_id: str
    reason: str | None = None


def _summary(order) -> dict:
    return {
        "id": str(order.id),
        "orderNumber": order.order_number,
        "status": order.status,
        "fulfillmentStatus": order.fulfillment_status,
        "trackingNumber": order.tracking_number,
        "trackingUrl": order.tracking_url,
    }


@action_handler("order.update_status", payload=UpdateStatusPayload)
def update_status(tenant_id, payload: UpdateStatusPayload):
    order = OrderService().update_status(
        tenant_id,
        payload.order_id,
        payload.status,
        notes=payload.notes,
        tracking_number=payload.tracking_number,
        tracking_url=payload.tracking_url,
        awb_number=payload.awb_number,
    )
    return _summary(order)


@action_handler("order.ship", payload=ShipPayload)
def ship(tenant_id, payload: ShipPayload):
    order = OrderService().update_status(
        tenant_id,
        payload.order_id,
        "shipped",
        tracking_number=payload.tracking_number,
        tracking_url=payload.tracking_url,
        awb_number=payload.awb_number,
    )
    return _summary(order)


@action_handler("order.cancel", payload=CancelPayload)
def cancel(tenant_id, payload: CancelPayload):
    order = OrderService().update_status(
        tenant_id,
        payload.order_id,
        "cancelled",
        notes=payload.reason,
        cancellation_reason=payload.reason,
    )
    return _summary(order)
