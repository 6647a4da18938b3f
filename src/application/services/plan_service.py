"""Plan service - handles installment plan configuration use cases."""

from datetime import date
from typing import List

import structlog

from src.application.dto import (
    PlanConfigRequest,
    PlanPreviewRequest,
    PlanPreviewResponse,
    PlanResponse,
    ScheduledAmountDTO,
    ScheduleStepDTO,
)
from src.domain.entities import InstallmentPlan, PaymentFrequency, ScheduleStep
from src.domain.exceptions import InvalidPlanParameterError, PlanNotFoundException
from src.domain.interfaces import PlanRepository
from src.service.installments import (
    generate_schedule,
    materialize_payments,
    validate_plan,
)

logger = structlog.get_logger(__name__)


def _frequency(value: str) -> PaymentFrequency:
    try:
        return PaymentFrequency(value)
    except ValueError:
        raise InvalidPlanParameterError(f"Unknown payment frequency: {value}")


class PlanService:
    """
    Application service for installment plan use cases.

    Plans are versioned: configuring a product again stores a new plan
    and leaves existing orders on the version they were bought under.
    """

    def __init__(self, plan_repository: PlanRepository):
        self._plan_repo = plan_repository

    async def preview(self, request: PlanPreviewRequest) -> PlanPreviewResponse:
        """
        Generate a schedule without persisting anything.

        When ``total_cents`` is given, the response also carries the deposit
        and per-step amounts a buyer would pay starting today.
        """
        frequency = _frequency(request.frequency)
        schedule = generate_schedule(
            request.initial_deposit_percent,
            request.duration_periods,
            frequency,
        )
        draft = InstallmentPlan(
            product_id="preview",
            seller_id="preview",
            initial_deposit_percent=request.initial_deposit_percent,
            frequency=frequency,
            duration_periods=request.duration_periods,
            schedule=schedule,
        )
        validate_plan(draft)

        deposit_cents = None
        installments: List[ScheduledAmountDTO] = []
        if request.total_cents is not None:
            breakdown = materialize_payments(request.total_cents, draft, date.today())
            deposit_cents = breakdown.deposit_cents
            installments = [
                ScheduledAmountDTO(
                    step_number=item.step_number,
                    due_date=item.due_date.isoformat(),
                    amount_cents=item.amount_cents,
                )
                for item in breakdown.installments
            ]

        return PlanPreviewResponse(
            initial_deposit_percent=request.initial_deposit_percent,
            frequency=frequency.value,
            duration_periods=request.duration_periods,
            schedule=[
                ScheduleStepDTO(
                    step_number=s.step_number,
                    percent_of_total=s.percent_of_total,
                    due_offset_days=s.due_offset_days,
                )
                for s in schedule
            ],
            total_percent=round(draft.total_percent, 2),
            deposit_cents=deposit_cents,
            installments=installments,
        )

    async def configure_plan(self, request: PlanConfigRequest) -> PlanResponse:
        """
        Validate and store a new plan version for a product.

        A schedule supplied by the seller is kept as edited; otherwise one is
        generated from deposit, duration and frequency.

        Raises:
            PlanValidationError: If the plan breaks any plan invariant
        """
        frequency = _frequency(request.frequency)

        if request.schedule:
            schedule = [
                ScheduleStep(
                    step_number=s.step_number,
                    percent_of_total=round(s.percent_of_total, 2),
                    due_offset_days=s.due_offset_days,
                )
                for s in request.schedule
            ]
        else:
            schedule = generate_schedule(
                request.initial_deposit_percent,
                request.duration_periods,
                frequency,
            )

        plan = InstallmentPlan(
            product_id=request.product_id,
            seller_id=request.seller_id,
            initial_deposit_percent=round(request.initial_deposit_percent, 2),
            frequency=frequency,
            duration_periods=request.duration_periods,
            schedule=schedule,
            min_payment_cents=request.min_payment_cents,
            grace_period_days=request.grace_period_days,
            allow_partial_payments=request.allow_partial_payments,
            allow_early_completion=request.allow_early_completion,
        )
        validate_plan(plan)

        current = await self._plan_repo.get_active_for_product(request.product_id)
        if current is not None:
            plan.version = current.version + 1

        await self._plan_repo.save(plan)

        logger.info(
            "plan_configured",
            product_id=plan.product_id,
            seller_id=plan.seller_id,
            plan_id=str(plan.id),
            version=plan.version,
            steps=len(plan.schedule),
        )

        return PlanResponse.from_entity(plan)

    async def get_plan(self, product_id: str) -> PlanResponse:
        """
        Retrieve the active plan for a product.

        Raises:
            PlanNotFoundException: If the product has no plan
        """
        plan = await self._plan_repo.get_active_for_product(product_id)

        if plan is None:
            logger.warning("plan_not_found", product_id=product_id)
            raise PlanNotFoundException(product_id)

        return PlanResponse.from_entity(plan)
