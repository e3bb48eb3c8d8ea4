"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CatalogAPIError(DomainException):
    """Lender catalog service returned an error or is unavailable"""

    pass


class LenderNotFoundError(DomainException):
    """Requested lender is not part of the catalog in use"""

    pass
