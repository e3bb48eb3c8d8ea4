"""Unit tests for the bank service catalog client"""

import httpx
import pytest
from credit_quoter.domain.exceptions import CatalogAPIError
from credit_quoter.infrastructure.clients.catalog import CatalogClient

BANCOS = {
    "success": True,
    "data": [
        {"banco_id": 1, "nombre": "BBVA", "tasa": "12.50", "cat": "16.20", "comision": "2.00", "logo": "bbva.png"},
        {"banco_id": 2, "nombre": "Banorte", "tasa": 13.2, "cat": 17.1, "comision": 1.8},
        {"banco_id": 3, "nombre": "Retired", "tasa": 20, "cat": 25, "comision": 3, "activo": False},
    ],
}


def make_client(handler) -> CatalogClient:
    return CatalogClient(base_url="http://bank.test", timeout=1.0, transport=httpx.MockTransport(handler))


async def test_get_lenders_parses_active_banks():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=BANCOS)

    lenders = await make_client(handler).get_lenders()

    assert requested == ["http://bank.test/api/bancos"]
    assert [lender.name for lender in lenders] == ["BBVA", "Banorte"]
    assert lenders[0].nominal_annual_rate == 12.5
    assert lenders[0].cat == 16.2
    assert lenders[1].origination_fee_percentage == 1.8


async def test_unsuccessful_payload_raises():
    client = make_client(lambda request: httpx.Response(200, json={"success": False, "mensaje": "mantenimiento"}))

    with pytest.raises(CatalogAPIError, match="mantenimiento"):
        await client.get_lenders()


async def test_http_error_raises():
    client = make_client(lambda request: httpx.Response(500, json={}))

    with pytest.raises(CatalogAPIError, match="500"):
        await client.get_lenders()


async def test_timeout_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(CatalogAPIError, match="timeout"):
        await make_client(handler).get_lenders()


async def test_connection_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(CatalogAPIError, match="unreachable"):
        await make_client(handler).get_lenders()


async def test_malformed_entry_raises():
    payload = {"success": True, "data": [{"banco_id": 1, "nombre": "BBVA"}]}
    client = make_client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(CatalogAPIError, match="Invalid catalog data"):
        await client.get_lenders()
