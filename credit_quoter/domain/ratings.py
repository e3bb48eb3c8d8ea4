"""Optional credit quality rating, layered on top of priced offers.

Not part of ranking: the aggregator orders offers by payment only. Ratings are
an advisory view for the sales floor.
"""

from dataclasses import dataclass
from credit_quoter.domain.models import OfferResult

GOOD = "good"
FAIR = "fair"
POOR = "poor"
BAD = "bad"


@dataclass(frozen=True)
class CreditRating:
    """Qualitative bands and 0-100 scores for one offer"""

    cost_rating: str
    rate_rating: str
    term_rating: str
    overall_rating: str
    cost_score: float
    rate_score: float
    term_score: float
    overall_score: float
    cost_percentage: float  # (interest + origination fee) / financed amount
    cat_rate_spread: float  # CAT minus nominal rate, percentage points
    total_cost: float


def _band(value: float, good: float, fair: float, poor: float) -> str:
    """Lower is better"""
    if value <= good:
        return GOOD
    elif value <= fair:
        return FAIR
    elif value <= poor:
        return POOR
    else:
        return BAD


def _clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


def rate_offer(offer: OfferResult) -> CreditRating:
    """
    Rate an offer on cost, CAT spread and term.

    Bands:
    - cost %:     <=15 good, <=25 fair, <=35 poor, else bad
    - CAT spread: <=3  good, <=5  fair, <=8  poor, else bad
    - term:       <=36 good, <=48 fair, <=60 poor, else bad

    Overall score = 50% cost + 30% spread + 20% term, banded at 75 / 50 / 25.
    """
    parameters = offer.parameters
    total_cost = offer.total_interest + offer.origination_fee
    financing = parameters.financing_amount
    cost_percentage = total_cost / financing * 100 if financing > 0 else 0.0
    spread = parameters.cat - parameters.annual_rate
    term = parameters.term_months

    cost_score = _clamp_score(100 - cost_percentage * 2)
    rate_score = _clamp_score(100 - spread * 10)
    term_score = _clamp_score(100 - term / 60 * 100)
    overall_score = cost_score * 0.5 + rate_score * 0.3 + term_score * 0.2

    if overall_score >= 75:
        overall_rating = GOOD
    elif overall_score >= 50:
        overall_rating = FAIR
    elif overall_score >= 25:
        overall_rating = POOR
    else:
        overall_rating = BAD

    return CreditRating(
        cost_rating=_band(cost_percentage, 15, 25, 35),
        rate_rating=_band(spread, 3, 5, 8),
        term_rating=_band(term, 36, 48, 60),
        overall_rating=overall_rating,
        cost_score=cost_score,
        rate_score=rate_score,
        term_score=term_score,
        overall_score=overall_score,
        cost_percentage=cost_percentage,
        cat_rate_spread=spread,
        total_cost=total_cost,
    )
