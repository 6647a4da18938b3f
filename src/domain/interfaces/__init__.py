"""
Domain Interfaces (Ports)
"""

from .cache import KeyValueCache
from .clients import InstallmentGatewayClient, ReminderNotifier
from .repositories import (
    OrderRepository,
    PaymentRequestRepository,
    PlanRepository,
    WalletRepository,
)

__all__ = [
    "KeyValueCache",
    "InstallmentGatewayClient",
    "ReminderNotifier",
    "OrderRepository",
    "PaymentRequestRepository",
    "PlanRepository",
    "WalletRepository",
]
