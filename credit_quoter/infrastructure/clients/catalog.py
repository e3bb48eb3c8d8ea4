"""Bank service HTTP client for fetching the lender catalog"""

import httpx
from typing import List
from credit_quoter.domain.models import Lender
from credit_quoter.domain.exceptions import CatalogAPIError
from credit_quoter.config import settings


class CatalogClient:
    """Client for the bank service lender catalog (GET /api/bancos)"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.lender_catalog_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_lenders(self) -> List[Lender]:
        """
        Fetch active lenders in catalog order.

        Raises:
            CatalogAPIError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/api/bancos")
                response.raise_for_status()
                data = response.json()

                if not data.get("success", False):
                    raise CatalogAPIError(f"Bank service refused catalog request: {data.get('mensaje')}")

                # Parse and validate catalog entries
                lenders = [
                    Lender(
                        id=int(bank["banco_id"]),
                        name=bank["nombre"],
                        nominal_annual_rate=float(bank["tasa"]),
                        cat=float(bank["cat"]),
                        origination_fee_percentage=float(bank["comision"]),
                        active=bool(bank.get("activo", True)),
                    )
                    for bank in data.get("data", [])
                ]
                return [lender for lender in lenders if lender.active]

            except httpx.TimeoutException as e:
                raise CatalogAPIError(f"Bank service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise CatalogAPIError(f"Bank service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise CatalogAPIError(f"Bank service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise CatalogAPIError(f"Invalid catalog data from bank service: {e}") from e
