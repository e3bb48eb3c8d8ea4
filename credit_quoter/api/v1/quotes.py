"""POST /v1/quotes - multi-lender financing comparison endpoints"""

import time
import logging
from typing import Dict, Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from credit_quoter.api.v1.schemas import (
    AmortizationRowSchema,
    EvolutionPointSchema,
    EvolutionSchema,
    LoanRequestSchema,
    OfferSchema,
    QuoteRequest,
    QuoteResponse,
    RatingSchema,
    ScheduleResponse,
    ValidationErrorSchema,
)
from credit_quoter.api.dependencies import get_catalog_client, get_request_id, load_lenders
from credit_quoter.config import settings
from credit_quoter.domain.catalog import find_lender
from credit_quoter.domain.evolution import build_evolution
from credit_quoter.domain.exceptions import CatalogAPIError, LenderNotFoundError
from credit_quoter.domain.models import OfferResult, PricingSnapshot
from credit_quoter.domain.normalizer import RawLoanInput, RawOverride
from credit_quoter.domain.offers import OfferSavings, compare_to_highest
from credit_quoter.domain.pricing import price
from credit_quoter.domain.ratings import rate_offer
from credit_quoter.infrastructure.clients.catalog import CatalogClient
from credit_quoter.infrastructure.observability.logging import log_quote
from credit_quoter.infrastructure.observability.metrics import (
    catalog_fetch_failures_counter,
    record_quote,
    schedule_counter,
)

router = APIRouter()


def _raw_input(body: QuoteRequest) -> Tuple[RawLoanInput, Dict[int, RawOverride]]:
    """Map the request body onto normalizer input"""
    raw_loan = RawLoanInput(
        vehicle_value=body.vehicle_value,
        vehicle_prices=body.vehicle_prices,
        down_payment_percentage=body.down_payment_percentage,
        down_payment_amount=body.down_payment_amount,
        term_months=body.term_months,
        last_edited=body.last_edited,
        client_reference=body.client_reference,
    )
    raw_overrides = {
        item.lender_id: RawOverride(
            use_custom_rate=item.use_custom_rate,
            custom_rate=item.custom_rate,
            use_custom_cat=item.use_custom_cat,
            custom_cat=item.custom_cat,
            term_months=item.term_months,
            down_payment_amount=item.down_payment_amount,
            financing_amount=item.financing_amount,
        )
        for item in body.overrides
    }
    return raw_loan, raw_overrides


def _offer_schema(offer: OfferResult, rank: int, savings: Optional[OfferSavings]) -> OfferSchema:
    parameters = offer.parameters
    return OfferSchema(
        rank=rank,
        lender_id=offer.lender.id,
        lender_name=offer.lender.name,
        annual_rate=parameters.annual_rate,
        cat=parameters.cat,
        cat_is_estimated=parameters.cat_is_estimated,
        term_months=parameters.term_months,
        down_payment_amount=parameters.down_payment_amount,
        financing_amount=parameters.financing_amount,
        monthly_payment=offer.monthly_payment,
        total_paid=offer.total_paid,
        total_interest=offer.total_interest,
        origination_fee=offer.origination_fee,
        origination_fee_percentage=parameters.origination_fee_percentage,
        has_override=offer.has_override,
        is_computable=offer.is_computable,
        monthly_savings=savings.monthly_savings if savings else 0.0,
        savings_percentage=savings.savings_percentage if savings else 0.0,
    )


def _request_schema(snapshot: PricingSnapshot) -> LoanRequestSchema:
    request = snapshot.request
    return LoanRequestSchema(
        vehicle_value=request.vehicle_value,
        down_payment_percentage=request.down_payment_percentage,
        down_payment_amount=request.down_payment_amount,
        financing_amount=request.financing_amount,
        term_months=request.term_months,
    )


def _error_schema(snapshot: PricingSnapshot) -> Optional[ValidationErrorSchema]:
    error = snapshot.validation.error
    if error is None:
        return None
    return ValidationErrorSchema(
        code=error.code.value,
        message=error.message,
        field=error.field,
        lender_id=error.lender_id,
    )


async def _priced_snapshot(body: QuoteRequest, catalog_client: Optional[CatalogClient], request_id: str):
    """Load the catalog and run one pricing pass; returns (lenders, snapshot)"""
    try:
        lenders = await load_lenders(catalog_client)
    except CatalogAPIError as e:
        catalog_fetch_failures_counter.inc()
        logging.error(f"Catalog error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Lender catalog unavailable")

    raw_loan, raw_overrides = _raw_input(body)
    try:
        snapshot = price(
            raw_loan,
            lenders,
            raw_overrides,
            include_offers=True,
            selected_ids=set(body.selected_lender_ids) if body.selected_lender_ids is not None else None,
            start_date=body.start_date,
            allowed_terms=settings.allowed_terms,
        )
    except Exception as e:
        logging.error(f"Unexpected pricing error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
    return lenders, snapshot


@router.post("/quotes", response_model=QuoteResponse)
async def create_quote(
    body: QuoteRequest,
    request: Request,
    catalog_client: Optional[CatalogClient] = Depends(get_catalog_client),
):
    """
    Compare financing offers across lenders.

    Flow:
    1. Load lender catalog (bank service or built-in)
    2. Normalize raw input and validate (first violated rule only)
    3. Price every selected lender with its own override
    4. Return offers ranked by monthly payment, cheapest first

    A validation failure is not an HTTP error: the response carries the error
    and no offers.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    _, snapshot = await _priced_snapshot(body, catalog_client, request_id)

    savings = compare_to_highest(snapshot.offers)
    offers = [
        _offer_schema(offer, rank, savings.get(offer.lender.id))
        for rank, offer in enumerate(snapshot.offers, start=1)
    ]
    best = snapshot.best_offer

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    error = snapshot.validation.error
    record_quote(snapshot.validation.ok, len(offers), error.code.value if error else None)
    log_quote(
        request_id,
        len(offers),
        snapshot.validation.ok,
        best.lender.id if best else None,
        duration_ms,
        client_reference=body.client_reference,
    )

    return QuoteResponse(
        valid=snapshot.validation.ok,
        error=_error_schema(snapshot),
        request=_request_schema(snapshot),
        offers=offers,
        best_lender_id=best.lender.id if best else None,
        client_reference=body.client_reference,
    )


@router.post("/quotes/{lender_id}/schedule", response_model=ScheduleResponse)
async def get_schedule(
    lender_id: int,
    body: QuoteRequest,
    request: Request,
    include_insights: bool = Query(False, description="Add credit rating and evolution"),
    catalog_client: Optional[CatalogClient] = Depends(get_catalog_client),
):
    """
    Full amortization schedule for one lender's offer.

    Returns:
        The ranked offer, its month-by-month schedule and, on request,
        the advisory rating and credit evolution
    """
    request_id = get_request_id(request)
    lenders, snapshot = await _priced_snapshot(body, catalog_client, request_id)

    try:
        find_lender(lenders, lender_id)
    except LenderNotFoundError as e:
        logging.warning(f"Schedule lookup failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Lender not found")

    if not snapshot.validation.ok:
        raise HTTPException(status_code=422, detail=_error_schema(snapshot).model_dump())

    position = next(
        (i for i, offer in enumerate(snapshot.offers) if offer.lender.id == lender_id),
        None,
    )
    if position is None:
        raise HTTPException(status_code=404, detail="Lender not among selected lenders")

    offer = snapshot.offers[position]
    savings = compare_to_highest(snapshot.offers)
    schedule_counter.inc()

    rating = None
    evolution = None
    if include_insights and offer.is_computable:
        rating = RatingSchema(**vars(rate_offer(offer)))
        credit_evolution = build_evolution(offer)
        evolution = EvolutionSchema(
            points=[EvolutionPointSchema(**vars(point)) for point in credit_evolution.points],
            key_months=list(credit_evolution.key_months),
            break_even_month=credit_evolution.break_even_month,
        )

    return ScheduleResponse(
        offer=_offer_schema(offer, position + 1, savings.get(lender_id)),
        schedule=[AmortizationRowSchema(**vars(row)) for row in offer.schedule],
        rating=rating,
        evolution=evolution,
        client_reference=body.client_reference,
    )
