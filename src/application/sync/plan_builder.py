"""Seller-side plan editing with local validation."""

from typing import List, Optional

import structlog

from src.domain.entities import InstallmentPlan, PaymentFrequency, ScheduleStep
from src.domain.exceptions import InvalidPlanParameterError, PlanValidationError
from src.domain.interfaces import InstallmentGatewayClient
from src.service.installments import (
    InstallmentSettings,
    collect_violations,
    generate_schedule,
    installment_settings,
    validate_plan,
)

logger = structlog.get_logger(__name__)


class PlanBuilder:
    """
    Builds an installment plan the way a seller edits one.

    Changing deposit, duration or frequency regenerates the schedule and
    discards step edits. A plan is only submitted once it validates.
    """

    def __init__(
        self,
        product_id: str,
        seller_id: str,
        gateway: Optional[InstallmentGatewayClient] = None,
        policy: InstallmentSettings = installment_settings,
    ):
        self.product_id = product_id
        self.seller_id = seller_id
        self.initial_deposit_percent = 30.0
        self.frequency = PaymentFrequency.MONTHLY
        self.duration_periods = 3
        self.min_payment_cents = 0
        self.grace_period_days = 3
        self.allow_partial_payments = True
        self.allow_early_completion = True

        self._gateway = gateway
        self._policy = policy
        self._schedule: List[ScheduleStep] = []
        self.regenerate()

    @property
    def schedule(self) -> List[ScheduleStep]:
        return list(self._schedule)

    def regenerate(self) -> List[ScheduleStep]:
        self._schedule = generate_schedule(
            self.initial_deposit_percent,
            self.duration_periods,
            self.frequency,
        )
        return self.schedule

    def set_deposit(self, percent: float) -> "PlanBuilder":
        self.initial_deposit_percent = percent
        self.regenerate()
        return self

    def set_duration(self, periods: int) -> "PlanBuilder":
        self.duration_periods = periods
        self.regenerate()
        return self

    def set_frequency(self, frequency: PaymentFrequency | str) -> "PlanBuilder":
        self.frequency = PaymentFrequency(frequency)
        self.regenerate()
        return self

    def edit_step(self, step_number: int, percent_of_total: float) -> "PlanBuilder":
        """Override one step's percentage; totals are checked on validate."""
        for index, step in enumerate(self._schedule):
            if step.step_number == step_number:
                self._schedule[index] = ScheduleStep(
                    step_number=step.step_number,
                    percent_of_total=round(percent_of_total, 2),
                    due_offset_days=step.due_offset_days,
                )
                return self
        raise InvalidPlanParameterError(f"No schedule step {step_number}")

    def build(self) -> InstallmentPlan:
        return InstallmentPlan(
            product_id=self.product_id,
            seller_id=self.seller_id,
            initial_deposit_percent=self.initial_deposit_percent,
            frequency=self.frequency,
            duration_periods=self.duration_periods,
            schedule=self.schedule,
            min_payment_cents=self.min_payment_cents,
            grace_period_days=self.grace_period_days,
            allow_partial_payments=self.allow_partial_payments,
            allow_early_completion=self.allow_early_completion,
        )

    def violations(self) -> List[PlanValidationError]:
        return collect_violations(self.build(), self._policy)

    def validate(self) -> InstallmentPlan:
        plan = self.build()
        validate_plan(plan, self._policy)
        return plan

    async def submit(self) -> InstallmentPlan:
        """
        Validate locally, then store the plan through the gateway.

        Raises:
            PlanValidationError: Before any request is sent
            NetworkError: If the gateway could not be reached
        """
        if self._gateway is None:
            raise RuntimeError("PlanBuilder has no gateway to submit to")

        plan = self.validate()
        stored = await self._gateway.configure_plan(plan)
        logger.info(
            "plan_submitted",
            product_id=stored.product_id,
            version=stored.version,
        )
        return stored
