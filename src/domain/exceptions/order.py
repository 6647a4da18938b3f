"""
Order ledger and payment domain exceptions.

Every constructor accepts an optional ``message`` so that an error
reported by the gateway API can be rebuilt with the server's wording.
"""

from .base import DomainException


class OrderNotFoundException(DomainException):
    """Raised when an order does not exist or belongs to another buyer."""

    def __init__(self, order_id: str | None = None, message: str | None = None):
        super().__init__(
            message=message or f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
        )
        self.order_id = order_id


class InsufficientFundsException(DomainException):
    """Raised when the wallet cannot cover the payment."""

    def __init__(
        self,
        required_cents: int | None = None,
        available_cents: int | None = None,
        message: str | None = None,
    ):
        super().__init__(
            message=message or "Insufficient wallet balance. Please top up.",
            code="INSUFFICIENT_FUNDS",
        )
        self.required_cents = required_cents
        self.available_cents = available_cents


class OrderAlreadyCompletedException(DomainException):
    def __init__(self, order_id: str | None = None, message: str | None = None):
        super().__init__(
            message=message or f"Order {order_id} is already fully paid",
            code="ORDER_COMPLETED",
        )
        self.order_id = order_id


class NoPendingPaymentsException(DomainException):
    def __init__(self, order_id: str | None = None, message: str | None = None):
        super().__init__(
            message=message or f"No pending installment found for order {order_id}",
            code="NO_PENDING_PAYMENTS",
        )
        self.order_id = order_id


class InvalidAmountException(DomainException):
    """Raised for non-positive, excessive or below-minimum amounts."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_AMOUNT")


class PaymentMethodNotAllowedException(DomainException):
    """Raised when the plan does not permit the requested payment method."""

    def __init__(self, method: str | None = None, message: str | None = None):
        super().__init__(
            message=message or f"Payment method '{method}' is not allowed by this plan",
            code="PAYMENT_METHOD_NOT_ALLOWED",
        )
        self.method = method


class PaymentInProgressException(DomainException):
    """Raised when another payment for the same order is still in flight."""

    def __init__(self, order_id: str | None = None, message: str | None = None):
        super().__init__(
            message=message or f"A payment for order {order_id} is already being processed",
            code="PAYMENT_IN_PROGRESS",
        )
        self.order_id = order_id


class IdempotencyKeyReusedException(DomainException):
    """Raised when an idempotency key is reused for a different request."""

    def __init__(self, idempotency_key: str | None = None, message: str | None = None):
        super().__init__(
            message=message
            or f"Idempotency key {idempotency_key} was used for a different request",
            code="IDEMPOTENCY_KEY_REUSED",
        )
        self.idempotency_key = idempotency_key


class ConcurrentModificationException(DomainException):
    """Raised when the order row changed under a concurrent transaction."""

    def __init__(self, order_id: str | None = None, message: str | None = None):
        super().__init__(
            message=message
            or f"Order {order_id} was modified concurrently. Re-fetch and retry.",
            code="CONCURRENT_MODIFICATION",
        )
        self.order_id = order_id


class RescheduleLimitExceededException(DomainException):
    def __init__(
        self,
        order_id: str | None = None,
        limit: int | None = None,
        message: str | None = None,
    ):
        super().__init__(
            message=message or f"Order {order_id} has already been rescheduled {limit} times",
            code="RESCHEDULE_LIMIT_EXCEEDED",
        )
        self.order_id = order_id


class RescheduleNotAllowedException(DomainException):
    """Raised when a reschedule violates the notice or grace-period policy."""

    def __init__(self, message: str):
        super().__init__(message=message, code="RESCHEDULE_NOT_ALLOWED")
