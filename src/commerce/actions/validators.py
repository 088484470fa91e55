"""Pre-execution checks for proposed actions.

Validators are pure: they look only at the action and the (possibly
stale) store snapshot. Each returns a ``ValidationResult`` that is either
valid-unchanged, valid with a corrected action to run instead, or invalid
with a reason. The executor's own checks stay authoritative.
"""

import structlog

from commerce.actions.models import Action, StoreSnapshot, ValidationResult
from commerce.config import setting
from commerce.ordering.transitions import FRIENDLY_STATUS, allowed_transitions, can_transition
from commerce.shared.money import format_inr
from commerce.store.contrast import fix_palette, is_hex_colour

logger = structlog.get_logger(__name__)

PALETTE_KEYS = ("primary", "secondary", "accent", "background", "surface", "text", "textMuted", "seed")

ORDER_TARGETS = {
    "order.ship": "shipped",
    "order.cancel": "cancelled",
}


# ---------------------------------------------------------------------------
# Design
# ---------------------------------------------------------------------------
def _check_palette(palette) -> tuple[dict | None, str | None, list[str]]:
    if not isinstance(palette, dict):
        return None, "Palette must be an object of colours.", []

    invalid = [key for key in PALETTE_KEYS if key in palette and not is_hex_colour(palette[key])]
    if invalid:
        return None, f"These colours aren't valid hex values: {', '.join(invalid)}.", []

    fixed, changed = fix_palette(palette)
    return fixed, None, changed


def validate_design(action: Action, snapshot: StoreSnapshot | None = None) -> ValidationResult:
    payload = action.payload

    if action.type == "store.update_palette":
        fixed, error, changed = _check_palette(payload.get("palette"))
        if error:
            return ValidationResult.rejected(error)
        if changed:
            logger.info("palette_contrast_corrected", slots=changed)
            return ValidationResult.corrected(
                action.with_payload({**payload, "palette": fixed}),
                notes=[f"Adjusted {slot} for readability" for slot in changed],
            )
        return ValidationResult.ok()

    if action.type == "store.update_design_bulk":
        design = payload.get("design") or {}
        if not isinstance(design, dict):
            return ValidationResult.rejected("Design must be an object of design groups.")
        if "palette" not in design:
            return ValidationResult.ok()
        fixed, error, changed = _check_palette(design["palette"])
        if error:
            return ValidationResult.rejected(error)
        if changed:
            logger.info("palette_contrast_corrected", slots=changed)
            return ValidationResult.corrected(
                action.with_payload({**payload, "design": {**design, "palette": fixed}}),
                notes=[f"Adjusted {slot} for readability" for slot in changed],
            )
        return ValidationResult.ok()

    if action.type == "store.update_fonts":
        fonts = payload.get("fonts") or {}
        if not isinstance(fonts, dict):
            return ValidationResult.rejected("Fonts must name a display and a body font.")
        if not str(fonts.get("display") or "").strip() or not str(fonts.get("body") or "").strip():
            return ValidationResult.rejected("Font names cannot be empty.")

    return ValidationResult.ok()


# ---------------------------------------------------------------------------
# Product pricing
# ---------------------------------------------------------------------------
def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _price_problem(price, compare_at_price=None) -> str | None:
    max_price = setting("MAX_PRODUCT_PRICE")
    if price is not None:
        if not _is_number(price):
            return "Price must be a number."
        if price <= 0:
            return "Price must be greater than ₹0."
        if price > max_price:
            return f"Price can't exceed ₹{format_inr(max_price)}."
    if compare_at_price is not None and not _is_number(compare_at_price):
        return "Compare-at price must be a number."
    if compare_at_price is not None and price is not None and compare_at_price <= price:
        return "Compare-at price must be higher than the selling price."
    return None


def validate_product(action: Action, snapshot: StoreSnapshot | None = None) -> ValidationResult:
    payload = action.payload

    if action.type in ("product.create", "product.update", "variant.create", "variant.update"):
        if action.type == "product.create" and payload.get("price") is None:
            return ValidationResult.rejected("Price must be greater than ₹0.")
        problem = _price_problem(payload.get("price"), payload.get("compareAtPrice"))
        if problem:
            return ValidationResult.rejected(problem)

    if action.type == "product.bulk_update_price":
        adjustment_type = payload.get("adjustmentType")
        value = payload.get("adjustmentValue")
        if not _is_number(value):
            return ValidationResult.rejected("Adjustment value must be a number.")

        if adjustment_type == "percentage" and value <= -100:
            return ValidationResult.rejected("Can't reduce prices by 100% or more. Try a smaller percentage.")

        if adjustment_type == "flat" and snapshot is not None:
            if any(product.price + value <= 0 for product in snapshot.recent_products):
                return ValidationResult.rejected(
                    "This adjustment would make some products free or negative. Try a smaller reduction."
                )

    return ValidationResult.ok()


# ---------------------------------------------------------------------------
# Order transitions
# ---------------------------------------------------------------------------
def validate_order(action: Action, snapshot: StoreSnapshot | None = None) -> ValidationResult:
    if action.type == "order.update_status":
        target = action.payload.get("status")
    elif action.type in ORDER_TARGETS:
        target = ORDER_TARGETS[action.type]
    else:
        return ValidationResult.ok()

    if snapshot is None:
        return ValidationResult.ok()
    order = snapshot.find_order(action.payload.get("orderId"))
    if order is None:
        return ValidationResult.ok()

    if not allowed_transitions(order.status):
        return ValidationResult.rejected(f'Order #{order.order_number} has status "{order.status}" which can\'t be changed.')

    if not can_transition(order.status, target):
        friendly = FRIENDLY_STATUS.get(order.status, order.status)
        return ValidationResult.rejected(f'Can\'t change order #{order.order_number} to "{target}", it\'s {friendly}.')

    return ValidationResult.ok()


VALIDATORS = (validate_design, validate_product, validate_order)


def validate_action(action: Action, snapshot: StoreSnapshot | None = None) -> ValidationResult:
    """Run every validator; the first rejection wins and fixes accumulate."""
    current = action
    notes: list[str] = []

    for validator in VALIDATORS:
        result = validator(current, snapshot)
        if not result.valid:
            return result
        if result.fixed is not None:
            current = result.fixed
            notes.extend(result.notes)

    if current is action:
        return ValidationResult.ok()
    return ValidationResult.corrected(current, notes=notes)
