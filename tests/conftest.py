"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, List
from fastapi.testclient import TestClient
from credit_quoter.api.main import create_app
from credit_quoter.domain.catalog import default_lenders
from credit_quoter.domain.models import Lender, LoanRequest


class FakeTimerHandle:
    """Handle returned by FakeTimer; mirrors asyncio.TimerHandle.cancel()"""

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimer:
    """Manual clock standing in for loop.call_later"""

    def __init__(self):
        self.now = 0.0
        self.handles: List[FakeTimerHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimerHandle:
        handle = FakeTimerHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeTimerHandle]:
        return [h for h in self.handles if not h.cancelled and h.when > self.now]

    def advance(self, seconds: float) -> None:
        """Move the clock forward and fire every timer that came due"""
        self.now += seconds
        due = [h for h in self.handles if not h.cancelled and h.when <= self.now]
        self.handles = [h for h in self.handles if h not in due and not h.cancelled]
        for handle in sorted(due, key=lambda h: h.when):
            handle.callback()


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def lenders() -> List[Lender]:
    """Built-in catalog of ten lenders"""
    return default_lenders()


@pytest.fixture
def start_date() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def loan_request() -> LoanRequest:
    """$300k vehicle, 20% down, 36 months"""
    return LoanRequest(
        vehicle_value=300_000.0,
        down_payment_percentage=20.0,
        down_payment_amount=60_000.0,
        term_months=36,
    )


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client using the built-in lender catalog"""
    app = create_app()
    return TestClient(app)
