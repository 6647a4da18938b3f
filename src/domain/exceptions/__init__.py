"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .network import NetworkError, NetworkTimeoutError
from .order import (
    ConcurrentModificationException,
    IdempotencyKeyReusedException,
    InsufficientFundsException,
    InvalidAmountException,
    NoPendingPaymentsException,
    OrderAlreadyCompletedException,
    OrderNotFoundException,
    PaymentInProgressException,
    PaymentMethodNotAllowedException,
    RescheduleLimitExceededException,
    RescheduleNotAllowedException,
)
from .plan import (
    DepositTooLowError,
    InvalidPlanParameterError,
    NegativeMinPaymentError,
    PlanNotFoundException,
    PlanValidationError,
    SchedulePercentMismatchError,
)

__all__ = [
    "DomainException",
    "NetworkError",
    "NetworkTimeoutError",
    "ConcurrentModificationException",
    "IdempotencyKeyReusedException",
    "InsufficientFundsException",
    "InvalidAmountException",
    "NoPendingPaymentsException",
    "OrderAlreadyCompletedException",
    "OrderNotFoundException",
    "PaymentInProgressException",
    "PaymentMethodNotAllowedException",
    "RescheduleLimitExceededException",
    "RescheduleNotAllowedException",
    "DepositTooLowError",
    "InvalidPlanParameterError",
    "NegativeMinPaymentError",
    "PlanNotFoundException",
    "PlanValidationError",
    "SchedulePercentMismatchError",
]
