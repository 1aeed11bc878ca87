"""
Domain-specific exceptions for bill generation.

Services raise these; the Streamlit pages catch BillingError and turn it
into a single user-visible notification.
"""


class BillingError(Exception):
    """Base exception for all bill generation errors."""
    pass


class FetchError(BillingError):
    """Raised when the data store is unreachable or a query fails."""
    pass


class PersistError(BillingError):
    """Raised when issued bills could not be written back to the data store."""
    pass


class NoCustomersError(BillingError):
    """Raised when the bar has no customers to attach to bills."""
    pass


class InvalidTaxPercentError(BillingError, ValueError):
    """Raised when the tax percentage is not a number between 0 and 100."""
    pass


class InvalidDateRangeError(BillingError, ValueError):
    """Raised when the start date is after the end date."""
    pass


class RenderError(BillingError):
    """Raised when a bill could not be rendered during export."""

    def __init__(self, bill_number: str, message: str):
        super().__init__(f"Failed to render bill {bill_number}: {message}")
        self.bill_number = bill_number
