"""Reschedule service - moves an order's next due date."""

from datetime import date
from typing import Callable

import structlog

from src.application.dto import OrderResponse, RescheduleRequest
from src.core.metrics import record_reschedule
from src.domain.exceptions import (
    DomainException,
    OrderNotFoundException,
    PlanNotFoundException,
)
from src.domain.interfaces import OrderRepository, PlanRepository
from src.service.installments import apply_reschedule, check_reschedule

logger = structlog.get_logger(__name__)


class RescheduleService:
    def __init__(
        self,
        order_repository: OrderRepository,
        plan_repository: PlanRepository,
        clock: Callable[[], date] = date.today,
    ):
        self._order_repo = order_repository
        self._plan_repo = plan_repository
        self._clock = clock

    async def reschedule(self, request: RescheduleRequest) -> OrderResponse:
        """
        Move the next due date of a buyer's order.

        Raises:
            OrderNotFoundException: Unknown order, or it belongs to someone else
            OrderAlreadyCompletedException: Order is settled
            RescheduleLimitExceededException: Order was already moved twice
            RescheduleNotAllowedException: Too little notice, or past grace
        """
        log = logger.bind(
            order_id=str(request.order_id),
            buyer_id=request.buyer_id,
            new_due_date=request.new_due_date.isoformat(),
        )

        try:
            order = await self._order_repo.get_for_update(request.order_id)
            if order is None or order.buyer_id != request.buyer_id:
                raise OrderNotFoundException(str(request.order_id))

            plan = await self._plan_repo.get_by_id(order.plan_id)
            if plan is None:
                raise PlanNotFoundException(order.product_id)

            previous_due_date = order.next_due_date
            check_reschedule(order, plan, request.new_due_date, today=self._clock())

            payments = await self._order_repo.list_payments(order.id)
            moved = apply_reschedule(order, payments, request.new_due_date)
            await self._order_repo.update(order, [moved] if moved else [])
        except DomainException as e:
            record_reschedule(e.code)
            log.warning("reschedule_rejected", code=e.code, reason=e.message)
            raise

        record_reschedule("applied")
        log.info(
            "order_rescheduled",
            previous_due_date=previous_due_date.isoformat() if previous_due_date else None,
            reschedule_count=order.reschedule_count,
        )

        return OrderResponse.from_entity(order)
