"""PostgreSQL implementation of PaymentRequestRepository."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import OrderStatus, PaymentMethod, PaymentRequestRecord
from src.domain.exceptions import ConcurrentModificationException
from src.domain.interfaces import PaymentRequestRepository
from src.infrastructure.database.models import PaymentRequestModel


class PostgresPaymentRequestRepository(PaymentRequestRepository):
    """Stores one row per idempotency key; the key is the primary key."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_key(self, idempotency_key: str) -> Optional[PaymentRequestRecord]:
        stmt = select(PaymentRequestModel).where(
            PaymentRequestModel.idempotency_key == idempotency_key
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def save(self, record: PaymentRequestRecord) -> PaymentRequestRecord:
        model = PaymentRequestModel(
            idempotency_key=record.idempotency_key,
            order_id=str(record.order_id),
            buyer_id=record.buyer_id,
            method=record.method.value,
            requested_amount_cents=record.requested_amount_cents,
            applied_amount_cents=record.applied_amount_cents,
            amount_paid_after_cents=record.amount_paid_after_cents,
            status_after=record.status_after.value,
            created_at=record.created_at,
        )

        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConcurrentModificationException(str(record.order_id)) from e

        return record

    def _to_entity(self, model: PaymentRequestModel) -> PaymentRequestRecord:
        return PaymentRequestRecord(
            idempotency_key=model.idempotency_key,
            order_id=UUID(model.order_id),
            buyer_id=model.buyer_id,
            method=PaymentMethod(model.method),
            requested_amount_cents=model.requested_amount_cents,
            applied_amount_cents=model.applied_amount_cents,
            amount_paid_after_cents=model.amount_paid_after_cents,
            status_after=OrderStatus(model.status_after),
            created_at=model.created_at,
        )
