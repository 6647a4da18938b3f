"""Due-date reminder classification."""

from datetime import date
from typing import Iterable, List, Optional

from src.domain.entities import InstallmentOrder, Reminder, ReminderKind

from .settings import InstallmentSettings, installment_settings


def classify_reminder(
    order: InstallmentOrder,
    today: date,
    settings: InstallmentSettings = installment_settings,
) -> Optional[Reminder]:
    """
    Decide whether an order needs a reminder today.

    Returns:
        An overdue, due-today or due-soon reminder, or None
    """
    if order.is_completed or order.next_due_date is None:
        return None

    days_until_due = (order.next_due_date - today).days

    if days_until_due < 0:
        kind = ReminderKind.OVERDUE
    elif days_until_due == 0:
        kind = ReminderKind.DUE_TODAY
    elif days_until_due <= settings.due_soon_days:
        kind = ReminderKind.DUE_SOON
    else:
        return None

    return Reminder(
        order_id=order.id,
        kind=kind,
        due_date=order.next_due_date,
        days_until_due=days_until_due,
        amount_cents=min(order.installment_amount_cents, order.remaining_cents),
    )


def collect_reminders(
    orders: Iterable[InstallmentOrder],
    today: date | None = None,
    settings: InstallmentSettings = installment_settings,
) -> List[Reminder]:
    today = today or date.today()
    reminders = []
    for order in orders:
        reminder = classify_reminder(order, today, settings)
        if reminder is not None:
            reminders.append(reminder)
    return reminders
