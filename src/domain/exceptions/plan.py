"""Plan-related domain exceptions."""

from .base import DomainException


class PlanNotFoundException(DomainException):
    """Raised when a product has no installment plan configured."""

    def __init__(self, product_id: str | None = None, message: str | None = None):
        super().__init__(
            message=message or f"No installment plan for product: {product_id}",
            code="PLAN_NOT_FOUND",
        )
        self.product_id = product_id


class PlanValidationError(DomainException):
    """
    Base class for plan configuration violations.

    These are resolved locally and never reach the system of record.
    """

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, code=code)


class DepositTooLowError(PlanValidationError):
    """Raised when the initial deposit is below the allowed minimum."""

    def __init__(
        self,
        deposit_percent: float | None = None,
        minimum: float | None = None,
        message: str | None = None,
    ):
        super().__init__(
            message=message
            or f"Initial deposit must be at least {minimum:g}% (got {deposit_percent:g}%)",
            code="DEPOSIT_TOO_LOW",
        )
        self.deposit_percent = deposit_percent


class SchedulePercentMismatchError(PlanValidationError):
    """Raised when deposit plus schedule does not add up to 100%."""

    def __init__(self, total_percent: float | None = None, message: str | None = None):
        super().__init__(
            message=message or f"Total percentage must be 100%. Current: {total_percent:.2f}%",
            code="SCHEDULE_PERCENT_MISMATCH",
        )
        self.total_percent = total_percent


class NegativeMinPaymentError(PlanValidationError):
    """Raised when the minimum payment amount is negative."""

    def __init__(self, min_payment_cents: int | None = None, message: str | None = None):
        super().__init__(
            message=message or "Minimum payment amount cannot be negative",
            code="NEGATIVE_MIN_PAYMENT",
        )
        self.min_payment_cents = min_payment_cents


class InvalidPlanParameterError(PlanValidationError):
    """Raised when a plan parameter is outside its allowed range."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_PLAN_PARAMETER")
