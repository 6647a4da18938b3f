"""Data transfer objects for installment plan operations."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ScheduleStepDTO:
    step_number: int
    percent_of_total: float
    due_offset_days: int


@dataclass(frozen=True)
class PlanConfigRequest:
    """Seller input for attaching a plan to a product."""

    product_id: str
    seller_id: str
    initial_deposit_percent: float
    frequency: str
    duration_periods: int
    min_payment_cents: int = 0
    grace_period_days: int = 3
    allow_partial_payments: bool = True
    allow_early_completion: bool = True
    schedule: Optional[List[ScheduleStepDTO]] = None


@dataclass(frozen=True)
class PlanPreviewRequest:
    initial_deposit_percent: float
    frequency: str
    duration_periods: int
    total_cents: Optional[int] = None


@dataclass(frozen=True)
class ScheduledAmountDTO:
    step_number: int
    due_date: str
    amount_cents: int


@dataclass(frozen=True)
class PlanPreviewResponse:
    """Generated schedule, plus cent amounts when a price was given."""

    initial_deposit_percent: float
    frequency: str
    duration_periods: int
    schedule: List[ScheduleStepDTO]
    total_percent: float
    deposit_cents: Optional[int] = None
    installments: List[ScheduledAmountDTO] = field(default_factory=list)


@dataclass(frozen=True)
class PlanResponse:
    """Response data for a stored plan version."""

    plan_id: str
    product_id: str
    seller_id: str
    version: int
    initial_deposit_percent: float
    frequency: str
    duration_periods: int
    min_payment_cents: int
    grace_period_days: int
    allow_partial_payments: bool
    allow_early_completion: bool
    schedule: List[ScheduleStepDTO]
    created_at: str

    @classmethod
    def from_entity(cls, plan) -> "PlanResponse":
        return cls(
            plan_id=str(plan.id),
            product_id=plan.product_id,
            seller_id=plan.seller_id,
            version=plan.version,
            initial_deposit_percent=plan.initial_deposit_percent,
            frequency=plan.frequency.value,
            duration_periods=plan.duration_periods,
            min_payment_cents=plan.min_payment_cents,
            grace_period_days=plan.grace_period_days,
            allow_partial_payments=plan.allow_partial_payments,
            allow_early_completion=plan.allow_early_completion,
            schedule=[
                ScheduleStepDTO(
                    step_number=s.step_number,
                    percent_of_total=s.percent_of_total,
                    due_offset_days=s.due_offset_days,
                )
                for s in plan.schedule
            ],
            created_at=plan.created_at.isoformat() + "Z",
        )
