"""PostgreSQL repository implementation for installment plans."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import InstallmentPlan, PaymentFrequency, ScheduleStep
from src.domain.interfaces import PlanRepository
from src.infrastructure.database.models import InstallmentPlanModel


class PostgresPlanRepository(PlanRepository):
    """PostgreSQL-backed plan repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, plan: InstallmentPlan) -> InstallmentPlan:
        model = InstallmentPlanModel(
            id=str(plan.id),
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
            schedule=[step.to_dict() for step in plan.schedule],
            created_at=plan.created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return plan

    async def get_by_id(self, plan_id: UUID) -> Optional[InstallmentPlan]:
        stmt = select(InstallmentPlanModel).where(InstallmentPlanModel.id == str(plan_id))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_active_for_product(self, product_id: str) -> Optional[InstallmentPlan]:
        stmt = (
            select(InstallmentPlanModel)
            .where(InstallmentPlanModel.product_id == product_id)
            .order_by(InstallmentPlanModel.version.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    def _to_entity(self, model: InstallmentPlanModel) -> InstallmentPlan:
        schedule = [
            ScheduleStep(
                step_number=step["step_number"],
                percent_of_total=step["percent_of_total"],
                due_offset_days=step["due_offset_days"],
            )
            for step in model.schedule
        ]

        return InstallmentPlan(
            id=UUID(model.id),
            product_id=model.product_id,
            seller_id=model.seller_id,
            version=model.version,
            initial_deposit_percent=model.initial_deposit_percent,
            frequency=PaymentFrequency(model.frequency),
            duration_periods=model.duration_periods,
            min_payment_cents=model.min_payment_cents,
            grace_period_days=model.grace_period_days,
            allow_partial_payments=model.allow_partial_payments,
            allow_early_completion=model.allow_early_completion,
            schedule=schedule,
            created_at=model.created_at,
        )
