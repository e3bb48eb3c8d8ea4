"""Dependency injection for FastAPI endpoints"""

from typing import List, Optional
from fastapi import Request
from credit_quoter.config import settings
from credit_quoter.domain.catalog import default_lenders
from credit_quoter.domain.models import Lender
from credit_quoter.infrastructure.clients.catalog import CatalogClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_catalog_client() -> Optional[CatalogClient]:
    """Provide bank service catalog client, or None to use the built-in catalog"""
    if settings.lender_catalog_url:
        return CatalogClient()
    return None


async def load_lenders(catalog_client: Optional[CatalogClient]) -> List[Lender]:
    """
    Lender catalog in use.

    Raises:
        CatalogAPIError: When the bank service is configured but fails
    """
    if catalog_client is None:
        return default_lenders()
    return await catalog_client.get_lenders()
