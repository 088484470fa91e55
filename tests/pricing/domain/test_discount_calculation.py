"""Tests for discount arithmetic and eligibility."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from commerce.exceptions import ValidationFailed
from commerce.pricing.discount import Discount
from commerce.pricing.engine import calculate_discount

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


def _discount(code="save10", **overrides):
    defaults = {
        "type": "percentage",
        "value": 10.0,
        "starts_at": NOW - timedelta(days=1),
    }
    defaults.update(overrides)
    return Discount.create("tenant-001", code, **defaults)


class TestDiscountCreation:
    def test_code_is_upper_cased(self):
        assert _discount(code="  diwali20 ").code == "DIWALI20"

    def test_blank_code_is_rejected(self):
        with pytest.raises(ValidationFailed):
            Discount.create("tenant-001", "   ", type="flat", value=50.0)

    def test_percentage_above_hundred_is_rejected(self):
        with pytest.raises(ValidationError):
            _discount(value=120.0)

    def test_redeem_counts_usage(self):
        discount = _discount(usage_limit=2)
        discount.redeem()
        assert discount.used_count == 1

    def test_redeem_beyond_limit_fails(self):
        discount = _discount(usage_limit=1, used_count=1)
        with pytest.raises(ValidationFailed):
            discount.redeem()


class TestPercentageDiscount:
    def test_percentage_of_subtotal(self):
        assert calculate_discount(_discount(value=10.0), 1000.0, now=NOW) == 100.0

    def test_percentage_is_capped_by_max_discount(self):
        discount = _discount(value=20.0, max_discount=100.0)
        assert calculate_discount(discount, 1000.0, now=NOW) == 100.0

    def test_rounds_to_two_decimals_half_up(self):
        discount = _discount(value=12.5)
        assert calculate_discount(discount, 99.99, now=NOW) == 12.5


class TestFlatDiscount:
    def test_flat_amount(self):
        assert calculate_discount(_discount(type="flat", value=150.0), 1000.0, now=NOW) == 150.0

    def test_flat_never_exceeds_subtotal(self):
        assert calculate_discount(_discount(type="flat", value=500.0), 300.0, now=NOW) == 300.0


class TestIneligibleDiscounts:
    def test_expired_code_yields_zero(self):
        discount = _discount(ends_at=NOW - timedelta(hours=1))
        assert calculate_discount(discount, 1000.0, now=NOW) == 0.0

    def test_future_code_yields_zero(self):
        discount = _discount(starts_at=NOW + timedelta(days=2))
        assert calculate_discount(discount, 1000.0, now=NOW) == 0.0

    def test_inactive_code_yields_zero(self):
        discount = _discount()
        discount.deactivate()
        assert calculate_discount(discount, 1000.0, now=NOW) == 0.0

    def test_exhausted_code_yields_zero(self):
        discount = _discount(usage_limit=5, used_count=5)
        assert calculate_discount(discount, 1000.0, now=NOW) == 0.0

    def test_below_minimum_order_yields_zero(self):
        discount = _discount(min_order_value=500.0)
        assert calculate_discount(discount, 499.0, now=NOW) == 0.0
        assert calculate_discount(discount, 500.0, now=NOW) == 50.0

    def test_bogo_prices_at_zero(self):
        assert calculate_discount(_discount(type="bogo", value=1.0), 1000.0, now=NOW) == 0.0
