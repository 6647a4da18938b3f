"""Application services (use cases)."""

from .account_service import AccountService
from .order_service import OrderService
from .payment_service import PaymentService
from .plan_service import PlanService
from .reschedule_service import RescheduleService

__all__ = [
    "AccountService",
    "OrderService",
    "PaymentService",
    "PlanService",
    "RescheduleService",
]
