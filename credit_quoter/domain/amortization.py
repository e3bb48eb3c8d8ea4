"""Amortization schedule generation for fixed-rate auto loans"""

from datetime import date
from typing import List
from credit_quoter.domain.models import AmortizationResult, AmortizationRow
from credit_quoter.utils.date_utils import monthly_due_dates

# Balances below one cent are floating-point residue
BALANCE_EPSILON = 0.01


def monthly_payment(principal: float, annual_rate_percent: float, term_months: int) -> float:
    """
    Level monthly payment of a fully amortizing loan.

    payment = P * r * (1+r)^n / ((1+r)^n - 1), with r = annual% / 100 / 12

    Returns 0.0 when any input is not positive. A rate too small to move
    (1 + r) off 1.0 yields the zero-rate limit principal / term_months.
    """
    if principal <= 0 or annual_rate_percent <= 0 or term_months <= 0:
        return 0.0

    monthly_rate = annual_rate_percent / 100 / 12
    factor = (1 + monthly_rate) ** term_months
    if factor - 1 <= 0:
        return principal / term_months
    return principal * monthly_rate * factor / (factor - 1)


def compute_schedule(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    start_date: date | None = None,
) -> AmortizationResult:
    """
    Generate the monthly payment and full amortization schedule.

    Requirements:
    - Degenerate input (principal, rate or term <= 0) returns an empty schedule
      and a payment of 0; callers treat that as "not yet computable"
    - Interest accrues on the unrounded running balance
    - Balances under one cent are clamped to 0; the last row always closes at 0
    - Period i is due start_date + i calendar months

    Args:
        principal: Amount financed
        annual_rate_percent: Nominal annual rate, e.g. 12.5 for 12.5%
        term_months: Number of monthly payments
        start_date: Session start date (default: today)

    Returns:
        AmortizationResult with unrounded values

    Example:
        100000 at 12% for 36 months -> 3321.43 per month
    """
    payment = monthly_payment(principal, annual_rate_percent, term_months)
    if payment == 0.0:
        return AmortizationResult(monthly_payment=0.0, schedule=())

    if start_date is None:
        start_date = date.today()

    monthly_rate = annual_rate_percent / 100 / 12
    due_dates = monthly_due_dates(start_date, term_months)

    rows: List[AmortizationRow] = []
    balance = principal
    for i in range(1, term_months + 1):
        interest = balance * monthly_rate

        if i == term_months:
            # Final payment retires whatever drift is left
            principal_part = balance
            balance = 0.0
        else:
            principal_part = min(payment - interest, balance)
            balance -= principal_part
            if balance < BALANCE_EPSILON:
                balance = 0.0

        rows.append(
            AmortizationRow(
                payment_index=i,
                due_date=due_dates[i - 1],
                payment_amount=principal_part + interest,
                principal_component=principal_part,
                interest_component=interest,
                remaining_balance=balance,
            )
        )

    return AmortizationResult(monthly_payment=payment, schedule=tuple(rows))
