"""Built-in lender catalog and offered terms"""

from typing import List, Sequence, Tuple
from credit_quoter.domain.exceptions import LenderNotFoundError
from credit_quoter.domain.models import Lender

# Approximate published rates for Mexican auto-loan lenders
DEFAULT_LENDERS: Tuple[Lender, ...] = (
    Lender(id=1, name="BBVA", nominal_annual_rate=12.5, cat=16.2, origination_fee_percentage=2.0),
    Lender(id=2, name="Banorte", nominal_annual_rate=13.2, cat=17.1, origination_fee_percentage=1.8),
    Lender(id=3, name="Santander", nominal_annual_rate=13.8, cat=17.5, origination_fee_percentage=2.2),
    Lender(id=4, name="Scotiabank", nominal_annual_rate=14.2, cat=18.3, origination_fee_percentage=1.5),
    Lender(id=5, name="Citibanamex", nominal_annual_rate=13.5, cat=17.8, origination_fee_percentage=2.0),
    Lender(id=6, name="HSBC", nominal_annual_rate=14.5, cat=18.9, origination_fee_percentage=1.7),
    Lender(id=7, name="Inbursa", nominal_annual_rate=12.8, cat=16.5, origination_fee_percentage=1.9),
    Lender(id=8, name="Afirme", nominal_annual_rate=14.8, cat=19.2, origination_fee_percentage=2.1),
    Lender(id=9, name="BanRegio", nominal_annual_rate=13.9, cat=18.0, origination_fee_percentage=1.6),
    Lender(id=10, name="Hey Banco", nominal_annual_rate=12.9, cat=16.8, origination_fee_percentage=1.8),
)

ALLOWED_TERMS: Tuple[int, ...] = (12, 24, 36, 48, 60)


def default_lenders() -> List[Lender]:
    """Active lenders from the built-in catalog, in catalog order"""
    return [lender for lender in DEFAULT_LENDERS if lender.active]


def find_lender(lenders: Sequence[Lender], lender_id: int) -> Lender:
    """Look up a lender by id; raises LenderNotFoundError when absent"""
    for lender in lenders:
        if lender.id == lender_id:
            return lender
    raise LenderNotFoundError(f"Lender {lender_id} is not in the catalog")
