"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator
from datetime import date
from typing import List, Literal, Optional, Union

from credit_quoter.utils.money import round_money, round_percentage

# Raw form fields arrive as numbers or free text ("$250,000")
RawNumber = Optional[Union[float, str]]


class OverrideSchema(BaseModel):
    """Custom configuration for one lender"""

    lender_id: int
    use_custom_rate: bool = False
    custom_rate: RawNumber = None
    use_custom_cat: bool = False
    custom_cat: RawNumber = None
    term_months: RawNumber = None
    down_payment_amount: RawNumber = None
    financing_amount: RawNumber = None


class QuoteRequest(BaseModel):
    """Request body for POST /v1/quotes"""

    vehicle_value: RawNumber = Field(None, description="Total vehicle value; overrides vehicle_prices")
    vehicle_prices: List[RawNumber] = Field(default_factory=list, description="Prices of the selected vehicles")
    down_payment_percentage: RawNumber = None
    down_payment_amount: RawNumber = None
    term_months: RawNumber = None
    last_edited: Literal["percentage", "amount"] = "percentage"
    overrides: List[OverrideSchema] = Field(default_factory=list)
    selected_lender_ids: Optional[List[int]] = None
    start_date: Optional[date] = None
    client_reference: Optional[str] = Field(None, description="Opaque client record id, echoed back")


class ValidationErrorSchema(BaseModel):
    code: str
    message: str
    field: str
    lender_id: Optional[int] = None


class LoanRequestSchema(BaseModel):
    vehicle_value: float
    down_payment_percentage: float
    down_payment_amount: float
    financing_amount: float
    term_months: int

    @field_validator("vehicle_value", "down_payment_amount", "financing_amount")
    @classmethod
    def _cents(cls, value: float) -> float:
        return round_money(value)

    @field_validator("down_payment_percentage")
    @classmethod
    def _percent(cls, value: float) -> float:
        return round_percentage(value)


class LenderSchema(BaseModel):
    id: int
    name: str
    nominal_annual_rate: float
    cat: float
    origination_fee_percentage: float


class LenderListResponse(BaseModel):
    """Response for GET /v1/lenders"""

    lenders: List[LenderSchema]
    allowed_terms: List[int]


class OfferSchema(BaseModel):
    """Ranked offer summary (money rounded to cents)"""

    rank: int
    lender_id: int
    lender_name: str
    annual_rate: float
    cat: float
    cat_is_estimated: bool
    term_months: int
    down_payment_amount: float
    financing_amount: float
    monthly_payment: float
    total_paid: float
    total_interest: float
    origination_fee: float
    origination_fee_percentage: float
    has_override: bool
    is_computable: bool
    monthly_savings: float = 0.0
    savings_percentage: float = 0.0

    @field_validator(
        "down_payment_amount",
        "financing_amount",
        "monthly_payment",
        "total_paid",
        "total_interest",
        "origination_fee",
        "monthly_savings",
    )
    @classmethod
    def _cents(cls, value: float) -> float:
        return round_money(value)

    @field_validator("cat", "savings_percentage")
    @classmethod
    def _percent(cls, value: float) -> float:
        return round_percentage(value)


class QuoteResponse(BaseModel):
    """Response for POST /v1/quotes"""

    valid: bool
    error: Optional[ValidationErrorSchema] = None
    request: LoanRequestSchema
    offers: List[OfferSchema]
    best_lender_id: Optional[int] = None
    client_reference: Optional[str] = None


class AmortizationRowSchema(BaseModel):
    payment_index: int
    due_date: date
    payment_amount: float
    principal_component: float
    interest_component: float
    remaining_balance: float

    @field_validator("payment_amount", "principal_component", "interest_component", "remaining_balance")
    @classmethod
    def _cents(cls, value: float) -> float:
        return round_money(value)


class RatingSchema(BaseModel):
    cost_rating: str
    rate_rating: str
    term_rating: str
    overall_rating: str
    cost_score: float
    rate_score: float
    term_score: float
    overall_score: float
    cost_percentage: float
    cat_rate_spread: float
    total_cost: float


class EvolutionPointSchema(BaseModel):
    month: int
    total_paid: float
    principal_paid: float
    interest_paid: float
    remaining_balance: float
    vehicle_value: float

    @field_validator("total_paid", "principal_paid", "interest_paid", "remaining_balance", "vehicle_value")
    @classmethod
    def _cents(cls, value: float) -> float:
        return round_money(value)


class EvolutionSchema(BaseModel):
    points: List[EvolutionPointSchema]
    key_months: List[int]
    break_even_month: int


class ScheduleResponse(BaseModel):
    """Response for POST /v1/quotes/{lender_id}/schedule"""

    offer: OfferSchema
    schedule: List[AmortizationRowSchema]
    rating: Optional[RatingSchema] = None
    evolution: Optional[EvolutionSchema] = None
    client_reference: Optional[str] = None
