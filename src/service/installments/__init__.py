"""
Installment Engine for Lipa Mdogo Mdogo plans
"""

from .settings import InstallmentSettings, installment_settings
from .schedule import (
    PaymentBreakdown,
    ScheduledAmount,
    days_for,
    generate_schedule,
    materialize_payments,
)
from .validation import collect_violations, find_violation, validate_plan
from .ledger import (
    LedgerUpdate,
    apply_to_ledger,
    next_pending_payment,
    pending_payments,
    resolve_payment_amount,
)
from .reschedule import apply_reschedule, check_reschedule
from .health import (
    assess_financial_health,
    calculate_health_score,
    health_status,
    order_penalty,
)
from .reminders import classify_reminder, collect_reminders
from .analytics import summarize_seller_orders

__all__ = [
    # Settings
    "InstallmentSettings",
    "installment_settings",
    # Schedule
    "PaymentBreakdown",
    "ScheduledAmount",
    "days_for",
    "generate_schedule",
    "materialize_payments",
    # Validation
    "collect_violations",
    "find_violation",
    "validate_plan",
    # Ledger
    "LedgerUpdate",
    "apply_to_ledger",
    "next_pending_payment",
    "pending_payments",
    "resolve_payment_amount",
    # Reschedule
    "apply_reschedule",
    "check_reschedule",
    # Health
    "assess_financial_health",
    "calculate_health_score",
    "health_status",
    "order_penalty",
    # Reminders
    "classify_reminder",
    "collect_reminders",
    # Analytics
    "summarize_seller_orders",
]
