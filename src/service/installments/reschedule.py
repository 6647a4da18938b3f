"""Reschedule policy for an order's next due date."""

from datetime import date, timedelta
from typing import Optional, Sequence

from src.domain.entities import InstallmentOrder, InstallmentPayment, InstallmentPlan
from src.domain.exceptions import (
    OrderAlreadyCompletedException,
    RescheduleLimitExceededException,
    RescheduleNotAllowedException,
)

from .ledger import next_pending_payment
from .settings import InstallmentSettings, installment_settings


def check_reschedule(
    order: InstallmentOrder,
    plan: InstallmentPlan,
    new_due_date: date,
    today: date | None = None,
    settings: InstallmentSettings = installment_settings,
) -> None:
    """
    Raise if the order may not move its due date to ``new_due_date``.

    Raises:
        OrderAlreadyCompletedException: Order is no longer active
        RescheduleLimitExceededException: Reschedule budget is used up
        RescheduleNotAllowedException: Too little notice, or the current due
            date is already past the plan's grace period
    """
    today = today or date.today()

    if order.is_completed:
        raise OrderAlreadyCompletedException(str(order.id))

    if order.reschedule_count >= settings.max_reschedules:
        raise RescheduleLimitExceededException(str(order.id), settings.max_reschedules)

    earliest = today + timedelta(days=settings.min_reschedule_notice_days)
    if new_due_date < earliest:
        raise RescheduleNotAllowedException(
            f"New due date must be on or after {earliest.isoformat()}"
        )

    if settings.enforce_grace_on_reschedule and order.next_due_date is not None:
        days_overdue = (today - order.next_due_date).days
        if days_overdue > plan.grace_period_days:
            raise RescheduleNotAllowedException(
                f"Order is {days_overdue} days overdue, beyond the "
                f"{plan.grace_period_days}-day grace period"
            )


def apply_reschedule(
    order: InstallmentOrder,
    payments: Sequence[InstallmentPayment],
    new_due_date: date,
) -> Optional[InstallmentPayment]:
    """
    Move the next due date and spend one reschedule.

    The next pending payment moves with the order. Returns that payment,
    or None if the order has no pending payment.
    """
    upcoming = next_pending_payment(payments)
    if upcoming is not None:
        upcoming.due_date = new_due_date

    order.next_due_date = new_due_date
    order.reschedule_count += 1

    return upcoming
