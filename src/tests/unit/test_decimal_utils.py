"""
Unit tests for decimal_utils.

Covers currency quantization, conversion to and from integer cents, and the
summary JSON encoder.
"""

import json
from datetime import date
from decimal import Decimal

from decimal_utils import (
    TWO_PLACES,
    ZERO,
    FinancialJsonEncoder,
    from_cents,
    to_cents,
    to_currency,
)


class TestToCurrency:
    """Tests for to_currency()."""

    def test_two_places_value(self) -> None:
        assert TWO_PLACES == Decimal("0.01")
        assert ZERO == Decimal("0")

    def test_string_input(self) -> None:
        assert to_currency("123.45") == Decimal("123.45")

    def test_float_input_goes_through_string(self) -> None:
        """0.1 + 0.2 style float noise must not leak into the amount."""
        assert to_currency(0.1 + 0.2) == Decimal("0.30")

    def test_rounds_half_up(self) -> None:
        assert to_currency("5.505") == Decimal("5.51")
        assert to_currency(Decimal("123.445")) == Decimal("123.45")


class TestToCents:
    """Tests for to_cents() and from_cents()."""

    def test_whole_and_fractional_amounts(self) -> None:
        assert to_cents(Decimal("10.00")) == 1000
        assert to_cents(Decimal("5.50")) == 550
        assert to_cents("0.01") == 1

    def test_returns_int(self) -> None:
        assert isinstance(to_cents(Decimal("20")), int)

    def test_sub_cent_amount_rounds(self) -> None:
        assert to_cents("19.995") == 2000

    def test_large_amount(self) -> None:
        assert to_cents("99999999.99") == 9999999999

    def test_from_cents(self) -> None:
        assert from_cents(1550) == Decimal("15.50")
        assert from_cents(0) == Decimal("0.00")


class TestFinancialJsonEncoder:
    """Tests for FinancialJsonEncoder."""

    def test_decimal_serialized_as_string(self) -> None:
        result = json.dumps({"total_amount": Decimal("35.50")}, cls=FinancialJsonEncoder)
        assert result == '{"total_amount": "35.50"}'

    def test_date_serialized_iso(self) -> None:
        result = json.dumps(
            {"effective_date": date(2024, 1, 16)}, cls=FinancialJsonEncoder
        )
        assert result == '{"effective_date": "2024-01-16"}'
