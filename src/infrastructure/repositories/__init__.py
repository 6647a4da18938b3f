"""Repository implementations."""

from .order_repository import PostgresOrderRepository
from .payment_request_repository import PostgresPaymentRequestRepository
from .plan_repository import PostgresPlanRepository
from .wallet_repository import PostgresWalletRepository

__all__ = [
    "PostgresOrderRepository",
    "PostgresPaymentRequestRepository",
    "PostgresPlanRepository",
    "PostgresWalletRepository",
]
