"""Installment plan domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List
from uuid import UUID, uuid4


class PaymentFrequency(str, Enum):
    """How often a scheduled installment falls due."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @property
    def days(self) -> int:
        """Days between two consecutive installments."""
        return _FREQUENCY_DAYS[self]


_FREQUENCY_DAYS = {
    PaymentFrequency.DAILY: 1,
    PaymentFrequency.WEEKLY: 7,
    PaymentFrequency.BIWEEKLY: 14,
    PaymentFrequency.MONTHLY: 30,
}


@dataclass(frozen=True)
class ScheduleStep:
    """One installment step of a plan, expressed as a share of the price."""

    step_number: int
    percent_of_total: float
    due_offset_days: int

    def to_dict(self) -> dict:
        return {
            "step_number": self.step_number,
            "percent_of_total": self.percent_of_total,
            "due_offset_days": self.due_offset_days,
        }


@dataclass
class InstallmentPlan:
    """
    A seller's buy-now-pay-later configuration for a product.

    Plans are immutable once saved. Re-configuring a product stores a new
    plan with a higher version; orders keep the plan they were created with.
    """

    product_id: str
    seller_id: str
    initial_deposit_percent: float
    frequency: PaymentFrequency
    duration_periods: int
    schedule: List[ScheduleStep] = field(default_factory=list)
    min_payment_cents: int = 0
    grace_period_days: int = 3
    allow_partial_payments: bool = True
    allow_early_completion: bool = True
    id: UUID = field(default_factory=uuid4)
    version: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def schedule_percent_total(self) -> float:
        """Sum of all step percentages, excluding the deposit."""
        return sum(step.percent_of_total for step in self.schedule)

    @property
    def total_percent(self) -> float:
        return self.initial_deposit_percent + self.schedule_percent_total

    def to_dict(self) -> dict:
        return {
            "plan_id": str(self.id),
            "product_id": self.product_id,
            "seller_id": self.seller_id,
            "version": self.version,
            "initial_deposit_percent": self.initial_deposit_percent,
            "frequency": self.frequency.value,
            "duration_periods": self.duration_periods,
            "min_payment_cents": self.min_payment_cents,
            "grace_period_days": self.grace_period_days,
            "allow_partial_payments": self.allow_partial_payments,
            "allow_early_completion": self.allow_early_completion,
            "schedule": [step.to_dict() for step in self.schedule],
            "created_at": self.created_at.isoformat() + "Z",
        }
