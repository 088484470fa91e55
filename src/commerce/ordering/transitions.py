"""Order lifecycle rules.

State Machine:
    CREATED → PAYMENT_PENDING → PAID → PROCESSING → SHIPPED → OUT_FOR_DELIVERY → DELIVERED
    CREATED → COD_CONFIRMED → COD_OTP_VERIFIED → PROCESSING
    SHIPPED/OUT_FOR_DELIVERY → RTO (returned to origin)
    PAID/PROCESSING/DELIVERED → REFUNDED
    CANCELLED (from any pre-shipment state), REFUNDED and RTO are terminal
"""

from enum import Enum

from commerce.exceptions import InvalidTransition


class OrderStatus(Enum):
    CREATED = "created"
    PAYMENT_PENDING = "payment_pending"
    PAID = "paid"
    COD_CONFIRMED = "cod_confirmed"
    COD_OTP_VERIFIED = "cod_otp_verified"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    RTO = "rto"


class FulfillmentStatus(Enum):
    UNFULFILLED = "unfulfilled"
    PARTIALLY_FULFILLED = "partially_fulfilled"
    FULFILLED = "fulfilled"
    RETURNED = "returned"


ORDER_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "created": ("payment_pending", "cod_confirmed", "cancelled"),
    "payment_pending": ("paid", "cancelled"),
    "paid": ("processing", "cancelled", "refunded"),
    "cod_confirmed": ("cod_otp_verified", "cancelled"),
    "cod_otp_verified": ("processing", "cancelled"),
    "processing": ("shipped", "cancelled", "refunded"),
    "shipped": ("out_for_delivery", "delivered", "rto"),
    "out_for_delivery": ("delivered", "rto"),
    "delivered": ("refunded",),
    "cancelled": (),
    "refunded": (),
    "rto": (),
}

_FULFILLMENT_BY_STATUS = {
    "shipped": FulfillmentStatus.PARTIALLY_FULFILLED.value,
    "out_for_delivery": FulfillmentStatus.PARTIALLY_FULFILLED.value,
    "delivered": FulfillmentStatus.FULFILLED.value,
    "rto": FulfillmentStatus.RETURNED.value,
}

# Statuses whose goods never reach the buyer; stock goes back on the shelf.
STOCK_RESTORING_STATUSES = frozenset({"cancelled", "rto"})

# Statuses that count as earned revenue.
REVENUE_STATUSES = frozenset({"paid", "processing", "shipped", "out_for_delivery", "delivered"})

FRIENDLY_STATUS = {
    "created": "just been placed",
    "payment_pending": "waiting for payment",
    "paid": "paid",
    "cod_confirmed": "a confirmed cash-on-delivery order",
    "cod_otp_verified": "a verified cash-on-delivery order",
    "processing": "being packed",
    "shipped": "already shipped",
    "out_for_delivery": "out for delivery",
    "delivered": "already delivered",
    "cancelled": "cancelled",
    "refunded": "refunded",
    "rto": "returned to origin",
}


def allowed_transitions(current_status: str) -> tuple[str, ...]:
    return ORDER_TRANSITIONS.get(current_status, ())


def can_transition(current_status: str, target_status: str) -> bool:
    return target_status in allowed_transitions(current_status)


def assert_transition(current_status: str, target_status: str) -> None:
    """Raise InvalidTransition unless ``target_status`` is reachable in one step."""
    if not can_transition(current_status, target_status):
        raise InvalidTransition(current_status, target_status, allowed_transitions(current_status))


def fulfillment_status_for(target_status: str, current_fulfillment: str | None = None) -> str:
    """Fulfillment status that accompanies a move to ``target_status``."""
    return _FULFILLMENT_BY_STATUS.get(
        target_status,
        current_fulfillment or FulfillmentStatus.UNFULFILLED.value,
    )
