import pytest

from commerce.shared.money import format_inr, round_currency
from commerce.shared.payloads import CamelModel, slugify


class TestFormatInr:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "0"),
            (999, "999"),
            (1000, "1,000"),
            (150000, "1,50,000"),
            (1000000, "10,00,000"),
            (12345678.5, "1,23,45,678.50"),
            (-2500, "-2,500"),
        ],
    )
    def test_indian_grouping(self, amount, expected):
        assert format_inr(amount) == expected


class TestRoundCurrency:
    def test_halves_round_up(self):
        assert round_currency(2.675) == 2.68
        assert round_currency(0.125) == 0.13

    def test_whole_amounts_unchanged(self):
        assert round_currency(1200) == 1200.0


class TestPayloadHelpers:
    def test_slug_without_suffix(self):
        assert slugify("Festive Picks!", suffix=False) == "festive-picks"

    def test_slug_suffix_is_random(self):
        assert slugify("Mug") != slugify("Mug")

    def test_empty_name_falls_back(self):
        assert slugify("***", suffix=False) == "item"

    def test_payload_accepts_either_key_case(self):
        class Price(CamelModel):
            compare_at_price: float | None = None

        assert Price(compareAtPrice=1).changes() == {"compare_at_price": 1}
        assert Price(compare_at_price=1).changes() == {"compare_at_price": 1}
        assert Price().changes() == {}
