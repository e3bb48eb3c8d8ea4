"""Offer resolution, aggregation and ranking across lenders"""

from dataclasses import dataclass
from datetime import date
from typing import Collection, Dict, List, Mapping, Optional, Sequence
from credit_quoter.domain.amortization import compute_schedule
from credit_quoter.domain.models import (
    EffectiveParameters,
    LoanRequest,
    Lender,
    OfferResult,
    RateOverride,
)

# Indicative CAT when only a custom rate is given. Not a regulated disclosure
# figure; keep the factor as is unless the disclosure method is specified.
CAT_ESTIMATE_FACTOR = 1.3


@dataclass(frozen=True)
class OfferSavings:
    """Savings of one offer against the most expensive computable offer"""

    lender_id: int
    monthly_savings: float
    savings_percentage: float


def resolve_offer(
    lender: Lender,
    request: LoanRequest,
    override: Optional[RateOverride],
) -> EffectiveParameters:
    """
    Merge global parameters with a lender's override.

    Precedence per field: override value -> global request -> lender catalog.
    An override financing amount wins over an override down payment.
    A custom rate with no custom CAT estimates CAT as rate * 1.3.
    """
    if override is None:
        override = RateOverride()

    if override.financing_amount is not None:
        financing_amount = override.financing_amount
        down_payment_amount = request.vehicle_value - financing_amount
    elif override.down_payment_amount is not None:
        down_payment_amount = override.down_payment_amount
        financing_amount = request.vehicle_value - down_payment_amount
    else:
        down_payment_amount = request.down_payment_amount
        financing_amount = request.financing_amount

    term_months = override.term_months if override.term_months is not None else request.term_months

    cat_is_estimated = False
    if override.nominal_annual_rate is not None:
        annual_rate = override.nominal_annual_rate
        if override.cat is not None:
            cat = override.cat
        else:
            cat = annual_rate * CAT_ESTIMATE_FACTOR
            cat_is_estimated = True
    else:
        annual_rate = lender.nominal_annual_rate
        cat = override.cat if override.cat is not None else lender.cat

    return EffectiveParameters(
        lender_id=lender.id,
        lender_name=lender.name,
        vehicle_value=request.vehicle_value,
        down_payment_amount=down_payment_amount,
        financing_amount=financing_amount,
        term_months=term_months,
        annual_rate=annual_rate,
        cat=cat,
        cat_is_estimated=cat_is_estimated,
        origination_fee_percentage=lender.origination_fee_percentage,
        has_override=not override.is_empty,
    )


def price_offer(lender: Lender, parameters: EffectiveParameters, start_date: date | None = None) -> OfferResult:
    """Run the calculator for resolved parameters and attach summary metrics"""
    result = compute_schedule(
        parameters.financing_amount,
        parameters.annual_rate,
        parameters.term_months,
        start_date=start_date,
    )

    if result.is_computable:
        total_paid = result.monthly_payment * parameters.term_months
        total_interest = total_paid - parameters.financing_amount
    else:
        total_paid = 0.0
        total_interest = 0.0

    origination_fee = max(parameters.financing_amount, 0.0) * parameters.origination_fee_percentage / 100

    return OfferResult(
        lender=lender,
        parameters=parameters,
        monthly_payment=result.monthly_payment,
        total_paid=total_paid,
        total_interest=total_interest,
        origination_fee=origination_fee,
        schedule=result.schedule,
        has_override=parameters.has_override,
    )


def rank_offers(offers: Sequence[OfferResult]) -> List[OfferResult]:
    """
    Sort ascending by monthly payment, then total paid.

    Offers that are not yet computable go last. sorted() is stable, so exact
    ties keep catalog order.
    """
    return sorted(
        offers,
        key=lambda offer: (not offer.is_computable, offer.monthly_payment, offer.total_paid),
    )


def aggregate_offers(
    lenders: Sequence[Lender],
    request: LoanRequest,
    overrides: Mapping[int, RateOverride] | None = None,
    selected_ids: Collection[int] | None = None,
    start_date: date | None = None,
) -> List[OfferResult]:
    """
    Price every lender (or only selected_ids) and return offers ranked best first.

    Each lender sees only its own override, so a custom rate for one lender
    never changes another lender's offer.
    """
    overrides = overrides or {}
    if start_date is None:
        start_date = date.today()

    offers = []
    for lender in lenders:
        if selected_ids is not None and lender.id not in selected_ids:
            continue
        override: Optional[RateOverride] = overrides.get(lender.id)
        parameters = resolve_offer(lender, request, override)
        offers.append(price_offer(lender, parameters, start_date=start_date))

    return rank_offers(offers)


def best_offer(offers: Sequence[OfferResult]) -> Optional[OfferResult]:
    """First computable offer of a ranked list"""
    return next((offer for offer in offers if offer.is_computable), None)


def compare_to_highest(offers: Sequence[OfferResult]) -> Dict[int, OfferSavings]:
    """
    Monthly savings of each computable offer against the most expensive one.

    Fewer than two computable offers means nothing to compare; all savings are 0.
    """
    computable = [offer for offer in offers if offer.is_computable]
    highest = max((offer.monthly_payment for offer in computable), default=0.0)

    savings: Dict[int, OfferSavings] = {}
    for offer in computable:
        if len(computable) < 2:
            monthly, percentage = 0.0, 0.0
        else:
            monthly = highest - offer.monthly_payment
            percentage = monthly / highest * 100
        savings[offer.lender.id] = OfferSavings(
            lender_id=offer.lender.id,
            monthly_savings=monthly,
            savings_percentage=percentage,
        )
    return savings
