"""Currency arithmetic for rupee amounts."""

from decimal import ROUND_HALF_UP, Decimal


def round_currency(amount) -> float:
    """Round to 2 decimal places, halves away from zero."""
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_inr(amount) -> str:
    """Format an amount with Indian digit grouping, e.g. ``10,00,000``.

    Whole amounts are rendered without paise.
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, paise = f"{abs(value):.2f}".partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    if paise == "00":
        return f"{sign}{whole}"
    return f"{sign}{whole}.{paise}"
