"""Plan invariants checked before a plan is attached to a product."""

from typing import List, Optional

from src.domain.entities import InstallmentPlan
from src.domain.exceptions import (
    DepositTooLowError,
    InvalidPlanParameterError,
    NegativeMinPaymentError,
    PlanValidationError,
    SchedulePercentMismatchError,
)

from .settings import InstallmentSettings, installment_settings


def collect_violations(
    plan: InstallmentPlan,
    settings: InstallmentSettings = installment_settings,
) -> List[PlanValidationError]:
    """
    Return every rule the plan breaks, most important first.

    An empty list means the plan is valid.
    """
    violations: List[PlanValidationError] = []

    if plan.initial_deposit_percent < settings.min_deposit_percent:
        violations.append(
            DepositTooLowError(plan.initial_deposit_percent, settings.min_deposit_percent)
        )

    total = plan.total_percent
    if abs(total - 100) > settings.percent_tolerance:
        violations.append(SchedulePercentMismatchError(total))

    if plan.min_payment_cents < 0:
        violations.append(NegativeMinPaymentError(plan.min_payment_cents))

    if plan.initial_deposit_percent > settings.max_deposit_percent:
        violations.append(
            InvalidPlanParameterError(
                f"Initial deposit cannot exceed {settings.max_deposit_percent:g}%"
            )
        )

    if plan.duration_periods < 1:
        violations.append(InvalidPlanParameterError("Duration must be at least 1 period"))
    elif len(plan.schedule) != plan.duration_periods:
        violations.append(
            InvalidPlanParameterError(
                f"Schedule has {len(plan.schedule)} steps but duration is "
                f"{plan.duration_periods}"
            )
        )

    if not 0 <= plan.grace_period_days <= settings.max_grace_period_days:
        violations.append(
            InvalidPlanParameterError(
                f"Grace period must be between 0 and {settings.max_grace_period_days} days"
            )
        )

    step_numbers = [step.step_number for step in plan.schedule]
    if step_numbers != list(range(1, len(plan.schedule) + 1)):
        violations.append(
            InvalidPlanParameterError("Schedule steps must be numbered 1..n in order")
        )

    offsets = [step.due_offset_days for step in plan.schedule]
    if any(offset <= 0 for offset in offsets) or any(
        later <= earlier for earlier, later in zip(offsets, offsets[1:])
    ):
        violations.append(
            InvalidPlanParameterError("Due offsets must be positive and increasing")
        )

    if any(step.percent_of_total < 0 for step in plan.schedule):
        violations.append(
            InvalidPlanParameterError("Step percentages cannot be negative")
        )

    return violations


def find_violation(
    plan: InstallmentPlan,
    settings: InstallmentSettings = installment_settings,
) -> Optional[PlanValidationError]:
    """Return the first violation, or None when the plan is ok."""
    violations = collect_violations(plan, settings)
    return violations[0] if violations else None


def validate_plan(
    plan: InstallmentPlan,
    settings: InstallmentSettings = installment_settings,
) -> None:
    """
    Raise the first violation found.

    Raises:
        DepositTooLowError: Deposit below the configured minimum
        SchedulePercentMismatchError: Deposit + schedule is not 100%
        NegativeMinPaymentError: Minimum payment below zero
        InvalidPlanParameterError: Any other parameter out of range
    """
    violation = find_violation(plan, settings)
    if violation is not None:
        raise violation
