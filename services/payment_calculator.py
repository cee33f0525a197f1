"""
Amortized monthly payment for a fixed-rate loan.

    payment = P * r * (1 + r)^n / ((1 + r)^n - 1),  r = annual_rate / 100 / 12

Computed with Decimal and rounded to cents half away from zero.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

CENTS = Decimal("0.01")


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 7.5 from picking up binary noise
    return Decimal(str(value))


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_monthly_payment(principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
    principal = _to_decimal(principal)
    annual_rate = _to_decimal(annual_rate_percent)

    if term_months <= 0 or principal <= 0:
        return Decimal("0")

    if annual_rate <= 0:
        return round_currency(principal / term_months)

    monthly_rate = annual_rate / 100 / 12
    growth = (1 + monthly_rate) ** term_months
    payment = principal * monthly_rate * growth / (growth - 1)
    return round_currency(payment)
