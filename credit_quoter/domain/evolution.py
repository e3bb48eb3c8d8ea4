"""Credit evolution over the life of an offer"""

from dataclasses import dataclass
from typing import List, Tuple
from credit_quoter.domain.models import OfferResult

# Indicative new-vehicle depreciation, compounded monthly
FIRST_YEAR_DEPRECIATION = 0.15
LATER_YEARS_DEPRECIATION = 0.10


@dataclass(frozen=True)
class EvolutionPoint:
    """Position at the end of a month (month 0 = signing)"""

    month: int
    total_paid: float  # down payment plus payments so far
    principal_paid: float
    interest_paid: float
    remaining_balance: float
    vehicle_value: float


@dataclass(frozen=True)
class CreditEvolution:
    points: Tuple[EvolutionPoint, ...]
    key_months: Tuple[int, ...]
    break_even_month: int  # first month total paid reaches the vehicle value


def depreciated_values(vehicle_value: float, term_months: int) -> List[float]:
    """Vehicle value for months 0..term_months"""
    values = [vehicle_value]
    current = vehicle_value
    for month in range(1, term_months + 1):
        annual = FIRST_YEAR_DEPRECIATION if month <= 12 else LATER_YEARS_DEPRECIATION
        current = current * (1 - annual / 12)
        values.append(current)
    return values


def key_months(term_months: int) -> Tuple[int, ...]:
    """Start, quarter points and end of the term"""
    return (
        0,
        int(term_months * 0.25),
        int(term_months * 0.5),
        int(term_months * 0.75),
        term_months,
    )


def build_evolution(offer: OfferResult) -> CreditEvolution:
    """
    Cumulative payments, balance and vehicle value month by month.

    The down payment counts as paid at signing. When total paid never reaches
    the vehicle value, the break-even month is the term.
    """
    parameters = offer.parameters
    if not offer.is_computable:
        return CreditEvolution(points=(), key_months=(), break_even_month=0)

    term = len(offer.schedule)
    values = depreciated_values(parameters.vehicle_value, term)

    total_paid = parameters.down_payment_amount
    principal_paid = 0.0
    interest_paid = 0.0
    points = [
        EvolutionPoint(
            month=0,
            total_paid=total_paid,
            principal_paid=0.0,
            interest_paid=0.0,
            remaining_balance=parameters.financing_amount,
            vehicle_value=values[0],
        )
    ]
    for row in offer.schedule:
        total_paid += row.payment_amount
        principal_paid += row.principal_component
        interest_paid += row.interest_component
        points.append(
            EvolutionPoint(
                month=row.payment_index,
                total_paid=total_paid,
                principal_paid=principal_paid,
                interest_paid=interest_paid,
                remaining_balance=row.remaining_balance,
                vehicle_value=values[row.payment_index],
            )
        )

    break_even = next(
        (point.month for point in points if point.total_paid >= parameters.vehicle_value),
        term,
    )

    return CreditEvolution(
        points=tuple(points),
        key_months=key_months(term),
        break_even_month=break_even,
    )
