"""Payment reminder entity."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID


class ReminderKind(str, Enum):
    DUE_SOON = "due_soon"
    DUE_TODAY = "due_today"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class Reminder:
    """A reminder that an order's next installment needs attention."""

    order_id: UUID
    kind: ReminderKind
    due_date: date
    days_until_due: int
    amount_cents: int

    def dedup_key(self, today: date) -> str:
        """Cache key marking this order as reminded for ``today``."""
        return f"reminder_sent:{self.order_id}:{today.isoformat()}"

    @property
    def message(self) -> str:
        short_id = str(self.order_id)[:8]
        if self.kind == ReminderKind.OVERDUE:
            return f"Order {short_id} is overdue by {abs(self.days_until_due)} day(s)."
        if self.kind == ReminderKind.DUE_TODAY:
            return f"Order {short_id} has an installment due today."
        return f"Order {short_id} is due in {self.days_until_due} day(s)."
