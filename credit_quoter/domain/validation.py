"""Validation engine - single active input error, fixed rule precedence"""

from typing import Iterable, List, Mapping, Optional, Tuple
from credit_quoter.domain.catalog import ALLOWED_TERMS
from credit_quoter.domain.models import (
    LoanRequest,
    RateOverride,
    ValidationCode,
    ValidationError,
    ValidationResult,
)

MAX_CUSTOM_RATE = 99.0
MAX_CUSTOM_CAT = 100.0

MESSAGES = {
    ValidationCode.DOWN_PAYMENT_EXCEEDS_VALUE: "Down payment exceeds vehicle value",
    ValidationCode.PERCENTAGE_EXCEEDS_100: "Down payment percentage exceeds 100",
    ValidationCode.NEGATIVE_VALUE: "Negative values are not allowed",
    ValidationCode.RATE_OUT_OF_RANGE: f"Custom rate must be between 0% and {MAX_CUSTOM_RATE:g}%",
    ValidationCode.CAT_OUT_OF_RANGE: f"Custom CAT must be between 0% and {MAX_CUSTOM_CAT:g}%",
    ValidationCode.TERM_NOT_OFFERED: "Term is not offered",
}

OK = ValidationResult()


def _error(code: ValidationCode, field: str, lender_id: Optional[int] = None) -> ValidationResult:
    return ValidationResult(
        error=ValidationError(code=code, message=MESSAGES[code], field=field, lender_id=lender_id)
    )


def _override_down_payment(request: LoanRequest, override: RateOverride) -> Optional[float]:
    """Down payment implied by an override, if it sets one"""
    if override.financing_amount is not None:
        return request.vehicle_value - override.financing_amount
    return override.down_payment_amount


def _check_down_payment(request: LoanRequest, items: List[Tuple[int, RateOverride]]) -> Optional[ValidationResult]:
    if request.vehicle_value <= 0:
        return None
    if request.down_payment_amount > request.vehicle_value:
        return _error(ValidationCode.DOWN_PAYMENT_EXCEEDS_VALUE, "down_payment_amount")
    for lender_id, override in items:
        down_payment = _override_down_payment(request, override)
        if down_payment is not None and down_payment > request.vehicle_value:
            return _error(ValidationCode.DOWN_PAYMENT_EXCEEDS_VALUE, "down_payment_amount", lender_id)
    return None


def _check_percentage(request: LoanRequest) -> Optional[ValidationResult]:
    if request.down_payment_percentage > 100:
        return _error(ValidationCode.PERCENTAGE_EXCEEDS_100, "down_payment_percentage")
    return None


def _check_negative(request: LoanRequest, items: List[Tuple[int, RateOverride]]) -> Optional[ValidationResult]:
    for field in ("down_payment_amount", "down_payment_percentage", "vehicle_value"):
        if getattr(request, field) < 0:
            return _error(ValidationCode.NEGATIVE_VALUE, field)
    for lender_id, override in items:
        for field in ("down_payment_amount", "financing_amount"):
            value = getattr(override, field)
            if value is not None and value < 0:
                return _error(ValidationCode.NEGATIVE_VALUE, field, lender_id)
        # Financing more than the vehicle is worth implies a negative down payment
        down_payment = _override_down_payment(request, override)
        if down_payment is not None and down_payment < 0:
            return _error(ValidationCode.NEGATIVE_VALUE, "financing_amount", lender_id)
    return None


def _check_rate(items: List[Tuple[int, RateOverride]]) -> Optional[ValidationResult]:
    for lender_id, override in items:
        rate = override.nominal_annual_rate
        if rate is not None and not 0 <= rate <= MAX_CUSTOM_RATE:
            return _error(ValidationCode.RATE_OUT_OF_RANGE, "nominal_annual_rate", lender_id)
    return None


def _check_cat(items: List[Tuple[int, RateOverride]]) -> Optional[ValidationResult]:
    for lender_id, override in items:
        cat = override.cat
        if cat is not None and not 0 <= cat <= MAX_CUSTOM_CAT:
            return _error(ValidationCode.CAT_OUT_OF_RANGE, "cat", lender_id)
    return None


def _check_term(
    request: LoanRequest,
    items: List[Tuple[int, RateOverride]],
    allowed_terms: Iterable[int],
) -> Optional[ValidationResult]:
    allowed = set(allowed_terms)
    if request.term_months > 0 and request.term_months not in allowed:
        return _error(ValidationCode.TERM_NOT_OFFERED, "term_months")
    for lender_id, override in items:
        term = override.term_months
        if term is not None and term > 0 and term not in allowed:
            return _error(ValidationCode.TERM_NOT_OFFERED, "term_months", lender_id)
    return None


def validate(
    request: LoanRequest,
    overrides: Mapping[int, RateOverride] | None = None,
    allowed_terms: Iterable[int] = ALLOWED_TERMS,
) -> ValidationResult:
    """
    Validate a request and its overrides; the first violated rule wins.

    Precedence:
    1. Down payment greater than vehicle value (only when value > 0)
    2. Down payment percentage above 100
    3. Negative amount, percentage or vehicle value
    4. Custom rate outside [0, 99]
    5. Custom CAT outside [0, 100]
    6. Term outside the offered set

    Within a rule the global request is checked before the overrides, which are
    checked in map order. Every call starts again from rule 1.
    """
    items = list((overrides or {}).items())

    checks = (
        lambda: _check_down_payment(request, items),
        lambda: _check_percentage(request),
        lambda: _check_negative(request, items),
        lambda: _check_rate(items),
        lambda: _check_cat(items),
        lambda: _check_term(request, items, allowed_terms),
    )
    for check in checks:
        result = check()
        if result is not None:
            return result

    return OK
