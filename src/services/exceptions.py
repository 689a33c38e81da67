"""
Domain exceptions for the commission pipeline.

Hierarchy:
    SpendboardError (base)
    ├── InvalidPeriodError      - bad date range or month string
    ├── InvalidRateError        - non-positive exchange rate
    ├── UnknownOperatorError    - operator outside the configured roster
    └── CommissionRefreshError  - replacing stored commission records failed
"""

from typing import Optional


class SpendboardError(Exception):
    """Base exception for all Spendboard domain errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidPeriodError(SpendboardError):
    """Period start is after period end, or a month string is malformed."""


class InvalidRateError(SpendboardError):
    """Exchange rate is zero or negative."""


class UnknownOperatorError(SpendboardError):
    """Operator is not part of the configured roster."""

    def __init__(self, operator: str):
        super().__init__("Unknown operator", operator)
        self.operator = operator


class CommissionRefreshError(SpendboardError):
    """
    Delete-then-insert of stored commission records failed.

    The nested transaction is rolled back before this is raised, so the
    previously stored records for the scope are still in place.
    """

    def __init__(self, message: str, details: Optional[str] = None, day=None, advertiser=None):
        super().__init__(message, details)
        self.day = day
        self.advertiser = advertiser
