"""Domain models - pure Python dataclasses representing pricing entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class Lender:
    """Catalog entry for a financing institution"""

    id: int
    name: str
    nominal_annual_rate: float  # % per year
    cat: float  # % annual total cost indicator
    origination_fee_percentage: float  # % of financed amount
    active: bool = True


@dataclass(frozen=True)
class LoanRequest:
    """Global loan parameters entered for a pricing session"""

    vehicle_value: float
    down_payment_percentage: float
    down_payment_amount: float
    term_months: int  # 0 until a term is chosen

    @property
    def financing_amount(self) -> float:
        return self.vehicle_value - self.down_payment_amount


@dataclass(frozen=True)
class RateOverride:
    """Per-lender replacement of global parameters (negotiated offer)"""

    nominal_annual_rate: Optional[float] = None
    cat: Optional[float] = None
    term_months: Optional[int] = None
    down_payment_amount: Optional[float] = None
    financing_amount: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.nominal_annual_rate,
                self.cat,
                self.term_months,
                self.down_payment_amount,
                self.financing_amount,
            )
        )


OverrideMap = Mapping[int, RateOverride]


@dataclass(frozen=True)
class EffectiveParameters:
    """Parameters actually used to price one lender"""

    lender_id: int
    lender_name: str
    vehicle_value: float
    down_payment_amount: float
    financing_amount: float
    term_months: int
    annual_rate: float
    cat: float
    cat_is_estimated: bool
    origination_fee_percentage: float
    has_override: bool


@dataclass(frozen=True)
class AmortizationRow:
    """Single monthly payment in an amortization schedule"""

    payment_index: int
    due_date: date
    payment_amount: float
    principal_component: float
    interest_component: float
    remaining_balance: float


@dataclass(frozen=True)
class AmortizationResult:
    """Calculator output: level payment plus the row-by-row schedule"""

    monthly_payment: float
    schedule: Tuple[AmortizationRow, ...] = ()

    @property
    def is_computable(self) -> bool:
        return len(self.schedule) > 0


@dataclass(frozen=True)
class OfferResult:
    """Priced offer for one lender"""

    lender: Lender
    parameters: EffectiveParameters
    monthly_payment: float
    total_paid: float
    total_interest: float
    origination_fee: float
    schedule: Tuple[AmortizationRow, ...]
    has_override: bool

    @property
    def is_computable(self) -> bool:
        return len(self.schedule) > 0


class ValidationCode(str, Enum):
    """Validation rules in precedence order"""

    DOWN_PAYMENT_EXCEEDS_VALUE = "down_payment_exceeds_value"
    PERCENTAGE_EXCEEDS_100 = "percentage_exceeds_100"
    NEGATIVE_VALUE = "negative_value"
    RATE_OUT_OF_RANGE = "rate_out_of_range"
    CAT_OUT_OF_RANGE = "cat_out_of_range"
    TERM_NOT_OFFERED = "term_not_offered"


@dataclass(frozen=True)
class ValidationError:
    """The single active input error"""

    code: ValidationCode
    message: str
    field: str
    lender_id: Optional[int] = None


@dataclass(frozen=True)
class ValidationResult:
    """Either ok (no error) or exactly one error"""

    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PricingSnapshot:
    """One committed output of the pricing pipeline"""

    generation: int
    request: LoanRequest
    overrides: OverrideMap
    validation: ValidationResult
    offers: Tuple[OfferResult, ...] = ()
    computed_at: datetime = field(default_factory=datetime.now)

    @property
    def best_offer(self) -> Optional[OfferResult]:
        for offer in self.offers:
            if offer.is_computable:
                return offer
        return None
