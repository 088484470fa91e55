"""Tests for GST computation over order line items."""

import pytest

from commerce.pricing.tax import calculate_order_tax


def _lines():
    return [
        {"product_id": "prod-1", "unit_price": 500.0, "quantity": 2, "gst_rate": 5.0},
        {"product_id": "prod-2", "unit_price": 1000.0, "quantity": 1, "gst_rate": 12.0},
    ]


class TestIntraState:
    def test_splits_into_cgst_and_sgst(self):
        tax = calculate_order_tax(_lines(), "Karnataka", "Karnataka")
        assert not tax.inter_state
        assert tax.cgst == 85.0
        assert tax.sgst == 85.0
        assert tax.igst == 0.0
        assert tax.total_tax == 170.0

    def test_state_comparison_ignores_case(self):
        assert not calculate_order_tax(_lines(), "karnataka ", "KARNATAKA").inter_state

    def test_missing_buyer_state_is_intra_state(self):
        assert not calculate_order_tax(_lines(), "Karnataka", None).inter_state


class TestInterState:
    def test_charges_igst(self):
        tax = calculate_order_tax(_lines(), "Karnataka", "Maharashtra")
        assert tax.inter_state
        assert tax.igst == 170.0
        assert tax.cgst == 0.0


class TestDiscountAllocation:
    def test_discount_spread_proportionally(self):
        tax = calculate_order_tax(_lines(), "Karnataka", "Maharashtra", discount_amount=200.0)
        first, second = tax.lines
        assert first.taxable_value == 900.0
        assert second.taxable_value == 900.0
        assert tax.igst == pytest.approx(45.0 + 108.0)


class TestDefaultRate:
    def test_missing_rate_uses_default(self):
        tax = calculate_order_tax([{"product_id": "p", "unit_price": 100.0, "quantity": 1}], "Delhi", "Goa")
        assert tax.lines[0].gst_rate == 18.0
        assert tax.igst == 18.0
