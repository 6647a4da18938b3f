"""De-duplicated due-date reminders for a buyer's orders."""

from datetime import date
from typing import Iterable, List

import structlog

from src.core.config import settings
from src.core.metrics import record_reminder_sent
from src.domain.entities import InstallmentOrder, Reminder
from src.domain.interfaces import KeyValueCache, ReminderNotifier
from src.service.installments import InstallmentSettings, collect_reminders, installment_settings

logger = structlog.get_logger(__name__)


class ReminderDispatcher:
    """
    Sends at most one reminder per order per day.

    The "already sent" flag lives in the cache under
    ``reminder_sent:{order_id}:{date}`` and expires after a day.
    """

    def __init__(
        self,
        buyer_id: str,
        notifier: ReminderNotifier,
        cache: KeyValueCache,
        ttl_seconds: float | None = None,
        policy: InstallmentSettings = installment_settings,
    ):
        self._buyer_id = buyer_id
        self._notifier = notifier
        self._cache = cache
        self._ttl = ttl_seconds or settings.reminder_ttl_seconds
        self._policy = policy

    async def dispatch(
        self,
        orders: Iterable[InstallmentOrder],
        today: date | None = None,
    ) -> List[Reminder]:
        """Notify for every order that needs it and has not been reminded today."""
        today = today or date.today()
        sent = []

        for reminder in collect_reminders(orders, today, self._policy):
            key = reminder.dedup_key(today)
            if self._cache.contains(key):
                continue

            await self._notifier.notify(self._buyer_id, reminder)
            self._cache.set(key, True, ttl_seconds=self._ttl)
            record_reminder_sent(reminder.kind.value)
            sent.append(reminder)

        if sent:
            logger.info("reminders_sent", buyer_id=self._buyer_id, count=len(sent))
        return sent

    async def on_refresh(self, synchronizer) -> None:
        await self.dispatch(synchronizer.orders)
