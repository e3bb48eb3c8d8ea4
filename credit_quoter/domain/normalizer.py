"""Coerce raw user input into a LoanRequest and per-lender RateOverrides"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence
from credit_quoter.domain.models import LoanRequest, RateOverride

DEFAULT_DOWN_PAYMENT_PERCENTAGE = 20.0

_NON_NUMERIC = re.compile(r"[^\d.]")


@dataclass
class RawLoanInput:
    """Loan fields as typed by the user (strings, numbers or blanks)"""

    vehicle_value: Any = None
    vehicle_prices: Sequence[Any] = ()
    down_payment_percentage: Any = None
    down_payment_amount: Any = None
    term_months: Any = None
    last_edited: str = "percentage"  # "percentage" | "amount"
    client_reference: Optional[str] = None


@dataclass
class RawOverride:
    """Per-lender custom configuration as entered in the form"""

    use_custom_rate: bool = False
    custom_rate: Any = None
    use_custom_cat: bool = False
    custom_cat: Any = None
    term_months: Any = None
    down_payment_amount: Any = None
    financing_amount: Any = None


@dataclass(frozen=True)
class NormalizedInput:
    request: LoanRequest
    overrides: Mapping[int, RateOverride] = field(default_factory=dict)


def parse_amount(raw: Any) -> Optional[float]:
    """
    Parse a money / percentage field.

    Accepts numbers and strings such as "250000", "$250,000.50" or "12.5%".
    Only the first decimal point is kept ("1.2.3" -> 1.23). A leading minus
    sign survives so that negative entries reach validation.

    Returns None for blank or unparsable input.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = str(raw).strip()
    negative = text.startswith("-")
    digits = _NON_NUMERIC.sub("", text)
    if not digits:
        return None

    parts = digits.split(".")
    if len(parts) > 2:
        digits = parts[0] + "." + "".join(parts[1:])
    if digits == ".":
        return None

    value = float(digits)
    if not math.isfinite(value):
        return None
    return -value if negative else value


def parse_term(raw: Any) -> Optional[int]:
    """Parse a term in months; fractional input is truncated"""
    value = parse_amount(raw)
    if value is None:
        return None
    return int(value)


def normalize_request(raw: RawLoanInput) -> LoanRequest:
    """
    Build a LoanRequest keeping down payment percentage and amount consistent.

    The field edited last wins and the other is derived from it:
    - percentage: amount = value * pct / 100
    - amount:     pct = amount * 100 / value (2 decimals, 0 when value is 0)

    Nothing is clamped here; out-of-range values are left for validation.
    """
    vehicle_value = parse_amount(raw.vehicle_value)
    if vehicle_value is None:
        prices = [parse_amount(price) for price in raw.vehicle_prices]
        vehicle_value = sum(price for price in prices if price is not None)

    percentage = parse_amount(raw.down_payment_percentage)
    amount = parse_amount(raw.down_payment_amount)

    if raw.last_edited == "amount" and amount is not None:
        percentage = round(amount * 100 / vehicle_value, 2) if vehicle_value else 0.0
    else:
        if percentage is None and amount is None:
            percentage = DEFAULT_DOWN_PAYMENT_PERCENTAGE
        if percentage is not None:
            amount = vehicle_value * percentage / 100
        else:
            percentage = round(amount * 100 / vehicle_value, 2) if vehicle_value else 0.0

    term = parse_term(raw.term_months)

    return LoanRequest(
        vehicle_value=vehicle_value,
        down_payment_percentage=percentage,
        down_payment_amount=amount,
        term_months=term if term is not None else 0,
    )


def normalize_override(raw: RawOverride) -> Optional[RateOverride]:
    """
    Build a RateOverride from a custom configuration.

    A disabled custom rate / CAT toggle discards its value. Returns None when
    nothing is overridden.
    """
    override = RateOverride(
        nominal_annual_rate=parse_amount(raw.custom_rate) if raw.use_custom_rate else None,
        cat=parse_amount(raw.custom_cat) if raw.use_custom_cat else None,
        term_months=parse_term(raw.term_months),
        down_payment_amount=parse_amount(raw.down_payment_amount),
        financing_amount=parse_amount(raw.financing_amount),
    )
    return None if override.is_empty else override


def normalize(
    raw_loan: RawLoanInput,
    raw_overrides: Mapping[int, RawOverride] | None = None,
) -> NormalizedInput:
    """Normalize the whole pricing input; empty overrides are dropped"""
    overrides: Dict[int, RateOverride] = {}
    for lender_id, raw_override in (raw_overrides or {}).items():
        override = normalize_override(raw_override)
        if override is not None:
            overrides[lender_id] = override

    return NormalizedInput(request=normalize_request(raw_loan), overrides=overrides)
