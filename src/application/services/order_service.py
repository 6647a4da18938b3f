"""Order service - checkout and order read use cases."""

from datetime import date
from typing import Callable, List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    OrderPaymentsResponse,
    OrderResponse,
    StartOrderRequest,
)
from src.core.metrics import record_order_started
from src.domain.entities import (
    InstallmentOrder,
    InstallmentPayment,
    OrderStatus,
)
from src.domain.exceptions import (
    InvalidAmountException,
    OrderNotFoundException,
    PlanNotFoundException,
)
from src.domain.interfaces import OrderRepository, PlanRepository, WalletRepository
from src.service.installments import materialize_payments, validate_plan

logger = structlog.get_logger(__name__)


class OrderService:
    """
    Application service for installment order use cases.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        plan_repository: PlanRepository,
        wallet_repository: WalletRepository,
        clock: Callable[[], date] = date.today,
    ):
        self._order_repo = order_repository
        self._plan_repo = plan_repository
        self._wallet_repo = wallet_repository
        self._clock = clock

    async def start_order(self, request: StartOrderRequest) -> OrderResponse:
        """
        Buy a product on its active installment plan.

        The deposit is debited from the buyer's wallet and held against the
        order; the remaining steps are scheduled from today.

        Args:
            request: Buyer, product and purchase price

        Returns:
            OrderResponse for the new active order

        Raises:
            InvalidAmountException: If the price is not positive
            PlanNotFoundException: If the product has no plan
            PlanValidationError: If the stored plan no longer validates
            InsufficientFundsException: If the wallet cannot cover the deposit
        """
        errors = request.validate()
        if errors:
            raise InvalidAmountException("; ".join(errors))

        plan = await self._plan_repo.get_active_for_product(request.product_id)
        if plan is None:
            raise PlanNotFoundException(request.product_id)
        validate_plan(plan)

        log = logger.bind(
            buyer_id=request.buyer_id,
            product_id=request.product_id,
            plan_id=str(plan.id),
        )

        breakdown = materialize_payments(request.total_cents, plan, self._clock())

        if breakdown.deposit_cents > 0:
            await self._wallet_repo.debit(request.buyer_id, breakdown.deposit_cents)

        order = InstallmentOrder(
            buyer_id=request.buyer_id,
            seller_id=plan.seller_id,
            product_id=plan.product_id,
            plan_id=plan.id,
            total_cents=request.total_cents,
            amount_paid_cents=breakdown.deposit_cents,
            installment_amount_cents=breakdown.installment_amount_cents,
            next_due_date=breakdown.first_due_date,
        )
        payments = [
            InstallmentPayment(
                order_id=order.id,
                step_number=item.step_number,
                due_date=item.due_date,
                amount_cents=item.amount_cents,
            )
            for item in breakdown.installments
        ]

        await self._order_repo.save(order, payments)
        record_order_started()

        log.info(
            "order_started",
            order_id=str(order.id),
            total_cents=order.total_cents,
            deposit_cents=breakdown.deposit_cents,
            installments=len(payments),
        )

        return OrderResponse.from_entity(order)

    async def get_order(
        self,
        order_id: UUID,
        buyer_id: Optional[str] = None,
    ) -> OrderResponse:
        order = await self._load(order_id, buyer_id)
        return OrderResponse.from_entity(order)

    async def list_orders(
        self,
        buyer_id: Optional[str] = None,
        seller_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[OrderResponse]:
        """List orders for a buyer or a seller, optionally by status."""
        orders = await self._order_repo.list_orders(
            buyer_id=buyer_id,
            seller_id=seller_id,
            status=status,
        )
        return [OrderResponse.from_entity(o) for o in orders]

    async def list_payments(
        self,
        order_id: UUID,
        buyer_id: Optional[str] = None,
    ) -> OrderPaymentsResponse:
        await self._load(order_id, buyer_id)
        payments = await self._order_repo.list_payments(order_id)
        return OrderPaymentsResponse.from_entities(str(order_id), payments)

    async def _load(self, order_id: UUID, buyer_id: Optional[str]) -> InstallmentOrder:
        order = await self._order_repo.get_by_id(order_id)
        if order is None or (buyer_id is not None and order.buyer_id != buyer_id):
            raise OrderNotFoundException(str(order_id))
        return order
