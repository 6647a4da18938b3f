"""Reminder notifier that writes reminders to the structured log."""

import structlog

from src.domain.entities import Reminder
from src.domain.interfaces import ReminderNotifier

logger = structlog.get_logger(__name__)


class LoggingReminderNotifier(ReminderNotifier):
    """Default notifier: push/SMS delivery is left to downstream consumers of the log."""

    async def notify(self, buyer_id: str, reminder: Reminder) -> None:
        logger.info(
            "payment_reminder",
            buyer_id=buyer_id,
            order_id=str(reminder.order_id),
            kind=reminder.kind.value,
            due_date=reminder.due_date.isoformat(),
            days_until_due=reminder.days_until_due,
            amount_cents=reminder.amount_cents,
            message=reminder.message,
        )
