"""
Schedule generation for installment plans.

Turns a seller's plan parameters into percentage steps, and turns a plan
plus a price into concrete amounts and due dates for one order.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from src.domain.entities import InstallmentPlan, PaymentFrequency, ScheduleStep
from src.domain.exceptions import InvalidAmountException, InvalidPlanParameterError


def days_for(frequency: PaymentFrequency | str) -> int:
    """Days between installments for a frequency."""
    return PaymentFrequency(frequency).days


def generate_schedule(
    initial_deposit_percent: float,
    duration_periods: int,
    frequency: PaymentFrequency | str,
) -> List[ScheduleStep]:
    """
    Split what remains after the deposit into equal percentage steps.

    Each step is rounded to 2 decimals and the last step absorbs the
    rounding drift, so deposit plus schedule is exactly 100.

    Example:
        30% deposit, 3 monthly periods -> [23.33, 23.33, 23.34]
        due on days 30, 60 and 90.

    Raises:
        InvalidPlanParameterError: If duration_periods < 1
    """
    if duration_periods < 1:
        raise InvalidPlanParameterError("Duration must be at least 1 period")

    interval = days_for(frequency)
    remaining = 100 - initial_deposit_percent
    per_step = round(remaining / duration_periods, 2)

    schedule = [
        ScheduleStep(
            step_number=i + 1,
            percent_of_total=per_step,
            due_offset_days=(i + 1) * interval,
        )
        for i in range(duration_periods)
    ]

    last = schedule[-1]
    schedule[-1] = ScheduleStep(
        step_number=last.step_number,
        percent_of_total=round(remaining - per_step * (duration_periods - 1), 2),
        due_offset_days=last.due_offset_days,
    )

    return schedule


@dataclass(frozen=True)
class ScheduledAmount:
    """One step of an order's schedule in cents, with its due date."""

    step_number: int
    due_date: date
    amount_cents: int


@dataclass(frozen=True)
class PaymentBreakdown:
    """Deposit and installment amounts for one order."""

    total_cents: int
    deposit_cents: int
    installments: List[ScheduledAmount]

    @property
    def installment_amount_cents(self) -> int:
        """The standard periodic amount (the first step)."""
        return self.installments[0].amount_cents if self.installments else 0

    @property
    def first_due_date(self) -> date | None:
        return self.installments[0].due_date if self.installments else None


def _percent_of(total_cents: int, percent: float | Decimal) -> int:
    amount = Decimal(total_cents) * Decimal(str(percent)) / Decimal(100)
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def materialize_payments(
    total_cents: int,
    plan: InstallmentPlan,
    start_date: date | None = None,
) -> PaymentBreakdown:
    """
    Convert a plan's percentages into cent amounts and due dates.

    Each step is the difference between consecutive rounded running
    totals, so rounding never accumulates. The last installment absorbs
    the cent remainder so that deposit + sum(installments) == total_cents.

    Args:
        total_cents: Purchase price in cents
        plan: The plan the order is bought under
        start_date: Purchase date (default: today)

    Returns:
        PaymentBreakdown with the deposit and one entry per schedule step

    Raises:
        InvalidAmountException: If the total is not positive, or too small
            to give every installment at least one cent
    """
    if total_cents <= 0:
        raise InvalidAmountException("Order total must be positive")

    if start_date is None:
        start_date = date.today()

    deposit_cents = _percent_of(total_cents, plan.initial_deposit_percent)
    steps = sorted(plan.schedule, key=lambda s: s.step_number)

    installments = []
    allocated = deposit_cents
    cumulative = Decimal(str(plan.initial_deposit_percent))
    for index, step in enumerate(steps):
        if index == len(steps) - 1:
            amount = total_cents - allocated
        else:
            cumulative += Decimal(str(step.percent_of_total))
            amount = _percent_of(total_cents, cumulative) - allocated

        if amount <= 0:
            raise InvalidAmountException(
                f"Order total {total_cents} is too small to split into "
                f"{len(steps)} installments"
            )
        allocated += amount

        installments.append(
            ScheduledAmount(
                step_number=step.step_number,
                due_date=start_date + timedelta(days=step.due_offset_days),
                amount_cents=amount,
            )
        )

    return PaymentBreakdown(
        total_cents=total_cents,
        deposit_cents=deposit_cents,
        installments=installments,
    )
