"""Client-side sync and cache layer for buyers and sellers."""

from .payment_client import PaymentClient
from .plan_builder import PlanBuilder
from .reminders import ReminderDispatcher
from .synchronizer import AccountSynchronizer

__all__ = [
    "AccountSynchronizer",
    "PaymentClient",
    "PlanBuilder",
    "ReminderDispatcher",
]
