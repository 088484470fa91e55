"""GST computation for an order.

An order shipped within the seller's state pays CGST and SGST in equal
halves; an inter-state order pays IGST. An order-level discount is spread
over the lines in proportion to their value before tax is applied.
"""

from dataclasses import dataclass, field

from commerce.config import setting
from commerce.shared.money import round_currency


@dataclass
class LineTax:
    product_id: str
    taxable_value: float
    gst_rate: float
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0

    @property
    def total_tax(self) -> float:
        return round_currency(self.cgst + self.sgst + self.igst)


@dataclass
class OrderTax:
    inter_state: bool
    lines: list[LineTax] = field(default_factory=list)

    @property
    def cgst(self) -> float:
        return round_currency(sum(line.cgst for line in self.lines))

    @property
    def sgst(self) -> float:
        return round_currency(sum(line.sgst for line in self.lines))

    @property
    def igst(self) -> float:
        return round_currency(sum(line.igst for line in self.lines))

    @property
    def total_tax(self) -> float:
        return round_currency(self.cgst + self.sgst + self.igst)


def calculate_order_tax(line_items, seller_state: str | None, buyer_state: str | None, discount_amount: float = 0.0):
    """Compute GST for ``line_items``.

    Each line item is a mapping with ``product_id``, ``unit_price``,
    ``quantity`` and optionally ``gst_rate``. A missing state on either side
    is treated as intra-state.
    """
    default_rate = float(setting("DEFAULT_GST_RATE"))
    inter_state = bool(seller_state and buyer_state and seller_state.strip().lower() != buyer_state.strip().lower())

    gross = [item["unit_price"] * item["quantity"] for item in line_items]
    gross_total = sum(gross)

    result = OrderTax(inter_state=inter_state)
    for item, line_value in zip(line_items, gross):
        share = discount_amount * line_value / gross_total if gross_total else 0.0
        taxable = round_currency(max(line_value - share, 0.0))
        rate = item.get("gst_rate")
        rate = default_rate if rate is None else float(rate)
        tax = taxable * rate / 100

        line = LineTax(product_id=str(item.get("product_id")), taxable_value=taxable, gst_rate=rate)
        if inter_state:
            line.igst = round_currency(tax)
        else:
            line.cgst = round_currency(tax / 2)
            line.sgst = round_currency(tax / 2)
        result.lines.append(line)

    return result
