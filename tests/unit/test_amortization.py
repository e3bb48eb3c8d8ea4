"""Unit tests for amortization schedule generation"""

import pytest
from datetime import date
from credit_quoter.domain.amortization import compute_schedule, monthly_payment


def test_monthly_payment_matches_closed_form():
    """100000 at 12% over 36 months"""
    r = 0.12 / 12
    expected = 100_000 * r * (1 + r) ** 36 / ((1 + r) ** 36 - 1)

    result = compute_schedule(100_000, 12, 36)

    assert abs(result.monthly_payment - expected) < 0.01
    assert round(result.monthly_payment, 2) == 3321.43


@pytest.mark.parametrize(
    "principal,rate,term",
    [
        (100_000, 12, 36),
        (240_000, 12.5, 60),
        (15_000.55, 33.3, 12),
        (1_000_000, 0.5, 48),
    ],
)
def test_principal_is_conserved(principal, rate, term):
    """Principal components add back to the financed amount"""
    result = compute_schedule(principal, rate, term)

    assert len(result.schedule) == term
    total_principal = sum(row.principal_component for row in result.schedule)
    assert abs(total_principal - principal) <= term * 0.01


def test_balance_is_non_increasing_and_closes_at_zero():
    result = compute_schedule(240_000, 12.5, 60)

    balances = [row.remaining_balance for row in result.schedule]
    assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))
    assert all(balance >= 0 for balance in balances)
    assert result.schedule[-1].remaining_balance == 0.0


def test_first_row_split():
    """First interest is the full principal times the monthly rate"""
    result = compute_schedule(100_000, 12, 36)
    first = result.schedule[0]

    assert first.payment_index == 1
    assert first.interest_component == pytest.approx(1000.0)
    assert first.principal_component == pytest.approx(result.monthly_payment - 1000.0)
    assert first.remaining_balance == pytest.approx(100_000 - first.principal_component)


def test_every_row_pays_the_level_payment():
    result = compute_schedule(100_000, 12, 36)

    for row in result.schedule:
        assert row.payment_amount == pytest.approx(result.monthly_payment, abs=0.01)
        assert row.payment_amount == pytest.approx(row.principal_component + row.interest_component)


@pytest.mark.parametrize(
    "principal,rate,term",
    [
        (0, 12, 36),
        (100_000, 0, 36),
        (100_000, 12, 0),
        (-5_000, 12, 36),
        (100_000, -1, 36),
    ],
)
def test_degenerate_input_returns_empty_schedule(principal, rate, term):
    """Not-yet-computable input never raises"""
    result = compute_schedule(principal, rate, term)

    assert result.monthly_payment == 0.0
    assert result.schedule == ()
    assert result.is_computable is False
    assert monthly_payment(principal, rate, term) == 0.0


def test_due_dates_use_calendar_months():
    """Month-end start clamps to each month's last day without drifting"""
    result = compute_schedule(10_000, 10, 4, start_date=date(2024, 1, 31))

    assert [row.due_date for row in result.schedule] == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
        date(2024, 5, 31),
    ]


def test_due_dates_default_to_today():
    result = compute_schedule(10_000, 10, 1)
    today = date.today()

    due = result.schedule[0].due_date
    assert (due.year * 12 + due.month) - (today.year * 12 + today.month) == 1


def test_vanishing_rate_falls_back_to_straight_line():
    """A rate that leaves (1 + r) at 1.0 still prices without dividing by zero"""
    result = compute_schedule(240_000, 1e-14, 36)

    assert result.monthly_payment == pytest.approx(240_000 / 36)
    assert len(result.schedule) == 36
    assert result.schedule[-1].remaining_balance == 0.0
    assert sum(row.principal_component for row in result.schedule) == pytest.approx(240_000)
