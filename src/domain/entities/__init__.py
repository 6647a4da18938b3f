"""Domain Entities - Core business objects."""

from .analytics import SellerAnalytics
from .health import FinancialHealth, HealthSource, HealthStatus
from .order import (
    InstallmentOrder,
    InstallmentPayment,
    OrderStatus,
    PaymentMethod,
    PaymentRequestRecord,
    PaymentStatus,
)
from .plan import InstallmentPlan, PaymentFrequency, ScheduleStep
from .reminder import Reminder, ReminderKind
from .wallet import Wallet

__all__ = [
    "SellerAnalytics",
    "FinancialHealth",
    "HealthSource",
    "HealthStatus",
    "InstallmentOrder",
    "InstallmentPayment",
    "OrderStatus",
    "PaymentMethod",
    "PaymentRequestRecord",
    "PaymentStatus",
    "InstallmentPlan",
    "PaymentFrequency",
    "ScheduleStep",
    "Reminder",
    "ReminderKind",
    "Wallet",
]
