"""GET /v1/lenders - Lender catalog used for comparisons"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from credit_quoter.api.v1.schemas import LenderListResponse, LenderSchema
from credit_quoter.api.dependencies import get_catalog_client, get_request_id, load_lenders
from credit_quoter.config import settings
from credit_quoter.domain.exceptions import CatalogAPIError
from credit_quoter.infrastructure.clients.catalog import CatalogClient
from credit_quoter.infrastructure.observability.metrics import catalog_fetch_failures_counter

router = APIRouter()


@router.get("/lenders", response_model=LenderListResponse)
async def list_lenders(
    request: Request,
    catalog_client: Optional[CatalogClient] = Depends(get_catalog_client),
):
    """
    Retrieve the active lender catalog and the terms on offer.

    Returns:
        Lenders in catalog order with nominal rate, CAT and origination fee
    """
    try:
        lenders = await load_lenders(catalog_client)
    except CatalogAPIError as e:
        catalog_fetch_failures_counter.inc()
        logging.error(f"Catalog error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Lender catalog unavailable")

    return LenderListResponse(
        lenders=[
            LenderSchema(
                id=lender.id,
                name=lender.name,
                nominal_annual_rate=lender.nominal_annual_rate,
                cat=lender.cat,
                origination_fee_percentage=lender.origination_fee_percentage,
            )
            for lender in lenders
        ],
        allowed_terms=settings.allowed_terms,
    )
