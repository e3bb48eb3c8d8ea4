"""Presentation-time currency rounding"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round to cents, half up. Only apply to values leaving the engine."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def round_percentage(value: float) -> float:
    """Percentages are shown with two decimals, same rule as cents"""
    return round_money(value)
