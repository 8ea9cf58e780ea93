"""
Decimal helpers for ACH amounts.

Transaction amounts arrive as currency Decimals and leave as integer cents in
the fixed-width records. Never route them through float.

Example usage:
    from decimal_utils import to_cents, to_currency, FinancialJsonEncoder

    to_cents("10.00")  # 1000
    json.dumps(summary, cls=FinancialJsonEncoder)
"""

import json
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

TWO_PLACES = Decimal(10) ** -2
ZERO = Decimal("0")
CENTS_PER_UNIT = 100


def to_currency(value: str | int | float | Decimal) -> Decimal:
    """
    Quantize a numeric value to two places using ROUND_HALF_UP.

    Floats are converted through their string form first.

    Example:
        >>> to_currency("5.505")
        Decimal('5.51')
    """
    if isinstance(value, Decimal):
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_cents(value: str | int | float | Decimal) -> int:
    """
    Convert a currency amount to integer minor units.

    Example:
        >>> to_cents(Decimal("5.50"))
        550
    """
    return int(to_currency(value) * CENTS_PER_UNIT)


def from_cents(cents: int) -> Decimal:
    """Inverse of to_cents, used when reporting amounts read from a file."""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(TWO_PLACES)


class FinancialJsonEncoder(json.JSONEncoder):
    """
    JSON encoder for export/import summaries.

    Decimal is written as a string so totals survive a round trip exactly;
    dates and datetimes are written in ISO-8601.
    """

    def default(self, o: Any) -> Any:
        if isinstance(o, Decimal):
            return str(o)
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return super().default(o)
