"""Discount pricing.

``calculate_discount`` is the pure arithmetic used at checkout: a code
that does not apply yields zero, never an error. ``validate_discount_code``
answers the shopper-facing question "does my code work?" with a reason.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from commerce.pricing.discount import Discount, DiscountType
from commerce.shared.money import format_inr, round_currency
from commerce.shared.periods import as_aware

logger = structlog.get_logger(__name__)


def _ineligibility(discount: Discount, order_subtotal: float, now: datetime) -> str | None:
    """Return the reason a code cannot be applied, or None when it can."""
    starts_at = as_aware(discount.starts_at)
    ends_at = as_aware(discount.ends_at)

    if not discount.is_active:
        return "This discount is no longer active"
    if starts_at and now < starts_at:
        return "This discount has not started yet"
    if ends_at and now > ends_at:
        return "This discount has expired"
    if discount.usage_limit is not None and (discount.used_count or 0) >= discount.usage_limit:
        return "This discount has reached its usage limit"
    if discount.min_order_value and order_subtotal < discount.min_order_value:
        return f"Minimum order of ₹{format_inr(discount.min_order_value)} required"
    return None


def calculate_discount(discount: Discount, order_subtotal: float, now: datetime | None = None) -> float:
    """Amount to take off ``order_subtotal``; 0 when the code does not apply."""
    now = as_aware(now) or datetime.now(UTC)

    if _ineligibility(discount, order_subtotal, now):
        return 0.0

    if discount.type == DiscountType.PERCENTAGE.value:
        amount = order_subtotal * discount.value / 100
    elif discount.type == DiscountType.FLAT.value:
        amount = discount.value
    else:
        # Buy-one-get-one needs line-level pricing; codes of this type price at zero.
        logger.info("bogo_discount_not_priced", discount_id=str(discount.id), code=discount.code)
        amount = 0.0

    if discount.max_discount is not None:
        amount = min(amount, discount.max_discount)
    amount = min(amount, order_subtotal)

    return round_currency(max(amount, 0.0))


@dataclass
class DiscountQuote:
    valid: bool
    discount_amount: float = 0.0
    message: str = ""
    discount_id: str | None = None
    code: str | None = None


def validate_discount_code(tenant_id, code: str, order_total: float, now: datetime | None = None) -> DiscountQuote:
    """Check a shopper-entered code against the tenant's discounts."""
    now = as_aware(now) or datetime.now(UTC)
    discount = current_domain.repository_for(Discount).find_by_code(tenant_id, code)

    if discount is None:
        return DiscountQuote(valid=False, message="Invalid discount code")

    reason = _ineligibility(discount, order_total, now)
    if reason:
        return DiscountQuote(valid=False, message=reason, discount_id=str(discount.id), code=discount.code)

    amount = calculate_discount(discount, order_total, now=now)
    if discount.type == DiscountType.PERCENTAGE.value:
        message = f"{format_inr(discount.value)}% off, you save ₹{format_inr(amount)}"
    else:
        message = f"₹{format_inr(amount)} off applied"

    return DiscountQuote(
        valid=True,
        discount_amount=amount,
        message=message,
        discount_id=str(discount.id),
        code=discount.code,
    )
