"""PostgreSQL repository implementation for installment orders."""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from src.domain.entities import (
    InstallmentOrder,
    InstallmentPayment,
    OrderStatus,
    PaymentStatus,
)
from src.domain.exceptions import ConcurrentModificationException
from src.domain.interfaces import OrderRepository
from src.infrastructure.database.models import (
    InstallmentOrderModel,
    InstallmentPaymentModel,
)


class PostgresOrderRepository(OrderRepository):
    """
    PostgreSQL implementation of the Order repository.

    Row locks come from ``SELECT ... FOR UPDATE``; the ``version`` column
    is the optimistic-concurrency counter checked on every UPDATE.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(
        self,
        order: InstallmentOrder,
        payments: Sequence[InstallmentPayment],
    ) -> InstallmentOrder:
        """Persist a new order and its scheduled payments."""
        model = InstallmentOrderModel(
            id=str(order.id),
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            product_id=order.product_id,
            plan_id=str(order.plan_id),
            total_cents=order.total_cents,
            amount_paid_cents=order.amount_paid_cents,
            installment_amount_cents=order.installment_amount_cents,
            next_due_date=order.next_due_date,
            status=order.status.value,
            reschedule_count=order.reschedule_count,
            created_at=order.created_at,
        )

        for payment in payments:
            model.payments.append(
                InstallmentPaymentModel(
                    id=str(payment.id),
                    order_id=str(order.id),
                    step_number=payment.step_number,
                    due_date=payment.due_date,
                    amount_cents=payment.amount_cents,
                    paid_cents=payment.paid_cents,
                    status=payment.status.value,
                    paid_at=payment.paid_at,
                )
            )

        self._session.add(model)
        await self._session.flush()
        order.version = model.version

        return order

    async def get_by_id(self, order_id: UUID) -> Optional[InstallmentOrder]:
        stmt = select(InstallmentOrderModel).where(
            InstallmentOrderModel.id == str(order_id)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_for_update(self, order_id: UUID) -> Optional[InstallmentOrder]:
        """Load an order with a row lock held until commit."""
        stmt = (
            select(InstallmentOrderModel)
            .where(InstallmentOrderModel.id == str(order_id))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def update(
        self,
        order: InstallmentOrder,
        payments: Sequence[InstallmentPayment] = (),
    ) -> InstallmentOrder:
        """Write ledger fields back, guarded by the version counter."""
        model = await self._session.get(InstallmentOrderModel, str(order.id))
        if model is None or model.version != order.version:
            raise ConcurrentModificationException(str(order.id))

        model.amount_paid_cents = order.amount_paid_cents
        model.next_due_date = order.next_due_date
        model.status = order.status.value
        model.reschedule_count = order.reschedule_count

        if payments:
            stmt = select(InstallmentPaymentModel).where(
                InstallmentPaymentModel.id.in_([str(p.id) for p in payments])
            )
            result = await self._session.execute(stmt)
            by_id = {m.id: m for m in result.scalars().all()}

            for payment in payments:
                payment_model = by_id[str(payment.id)]
                payment_model.due_date = payment.due_date
                payment_model.paid_cents = payment.paid_cents
                payment_model.status = payment.status.value
                payment_model.paid_at = payment.paid_at

        try:
            await self._session.flush()
        except StaleDataError as e:
            raise ConcurrentModificationException(str(order.id)) from e

        order.version = model.version
        return order

    async def list_payments(self, order_id: UUID) -> List[InstallmentPayment]:
        stmt = (
            select(InstallmentPaymentModel)
            .where(InstallmentPaymentModel.order_id == str(order_id))
            .order_by(InstallmentPaymentModel.step_number.asc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._payment_to_entity(m) for m in models]

    async def list_orders(
        self,
        buyer_id: Optional[str] = None,
        seller_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[InstallmentOrder]:
        stmt = select(InstallmentOrderModel)

        if buyer_id is not None:
            stmt = stmt.where(InstallmentOrderModel.buyer_id == buyer_id)
        if seller_id is not None:
            stmt = stmt.where(InstallmentOrderModel.seller_id == seller_id)
        if status is not None:
            stmt = stmt.where(InstallmentOrderModel.status == OrderStatus(status).value)

        stmt = stmt.order_by(InstallmentOrderModel.created_at.desc())
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    def _to_entity(self, model: InstallmentOrderModel) -> InstallmentOrder:
        return InstallmentOrder(
            id=UUID(model.id),
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            product_id=model.product_id,
            plan_id=UUID(model.plan_id),
            total_cents=model.total_cents,
            amount_paid_cents=model.amount_paid_cents,
            installment_amount_cents=model.installment_amount_cents,
            next_due_date=model.next_due_date,
            status=OrderStatus(model.status),
            reschedule_count=model.reschedule_count,
            version=model.version,
            created_at=model.created_at,
        )

    def _payment_to_entity(self, model: InstallmentPaymentModel) -> InstallmentPayment:
        return InstallmentPayment(
            id=UUID(model.id),
            order_id=UUID(model.order_id),
            step_number=model.step_number,
            due_date=model.due_date,
            amount_cents=model.amount_cents,
            paid_cents=model.paid_cents,
            status=PaymentStatus(model.status),
            paid_at=model.paid_at,
        )
