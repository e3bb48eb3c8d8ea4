"""Pricing pipeline: normalize -> validate -> aggregate"""

import logging
from datetime import date
from typing import Collection, Iterable, Mapping, Sequence
from credit_quoter.domain.catalog import ALLOWED_TERMS
from credit_quoter.domain.models import Lender, PricingSnapshot
from credit_quoter.domain.normalizer import RawLoanInput, RawOverride, normalize
from credit_quoter.domain.offers import aggregate_offers
from credit_quoter.domain.validation import validate

logger = logging.getLogger(__name__)


def price(
    raw_loan: RawLoanInput,
    lenders: Sequence[Lender],
    raw_overrides: Mapping[int, RawOverride] | None = None,
    include_offers: bool = True,
    selected_ids: Collection[int] | None = None,
    start_date: date | None = None,
    allowed_terms: Iterable[int] = ALLOWED_TERMS,
    generation: int = 0,
) -> PricingSnapshot:
    """
    Run one full pricing pass.

    Offers are only aggregated when include_offers is set and validation
    passes; an invalid input yields a snapshot carrying the error and no offers.
    """
    normalized = normalize(raw_loan, raw_overrides)
    validation = validate(normalized.request, normalized.overrides, allowed_terms)

    offers = ()
    if validation.ok and include_offers:
        offers = tuple(
            aggregate_offers(
                lenders,
                normalized.request,
                normalized.overrides,
                selected_ids=selected_ids,
                start_date=start_date,
            )
        )
    elif not validation.ok:
        logger.debug(
            "Pricing blocked by validation",
            extra={"code": validation.error.code.value, "lender_id": validation.error.lender_id},
        )

    return PricingSnapshot(
        generation=generation,
        request=normalized.request,
        overrides=normalized.overrides,
        validation=validation,
        offers=offers,
    )
