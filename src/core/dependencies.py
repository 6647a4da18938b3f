"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import (
    PostgresOrderRepository,
    PostgresPaymentRequestRepository,
    PostgresPlanRepository,
    PostgresWalletRepository,
)
from src.application.services import (
    AccountService,
    OrderService,
    PaymentService,
    PlanService,
    RescheduleService,
)


# Repository dependencies
async def get_plan_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresPlanRepository:
    """Get a PlanRepository instance."""
    return PostgresPlanRepository(session)


async def get_order_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresOrderRepository:
    """Get an OrderRepository instance."""
    return PostgresOrderRepository(session)


async def get_wallet_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresWalletRepository:
    """Get a WalletRepository instance."""
    return PostgresWalletRepository(session)


async def get_payment_request_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresPaymentRequestRepository:
    """Get a PaymentRequestRepository instance."""
    return PostgresPaymentRequestRepository(session)


# Service dependencies
async def get_plan_service(
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
) -> PlanService:
    """Get a PlanService instance."""
    return PlanService(plan_repository=plan_repo)


async def get_order_service(
    order_repo: Annotated[PostgresOrderRepository, Depends(get_order_repository)],
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
    wallet_repo: Annotated[PostgresWalletRepository, Depends(get_wallet_repository)],
) -> OrderService:
    """Get an OrderService instance with all dependencies."""
    return OrderService(
        order_repository=order_repo,
        plan_repository=plan_repo,
        wallet_repository=wallet_repo,
    )


async def get_payment_service(
    order_repo: Annotated[PostgresOrderRepository, Depends(get_order_repository)],
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
    wallet_repo: Annotated[PostgresWalletRepository, Depends(get_wallet_repository)],
    request_repo: Annotated[
        PostgresPaymentRequestRepository,
        Depends(get_payment_request_repository),
    ],
) -> PaymentService:
    """Get a PaymentService instance with all dependencies."""
    return PaymentService(
        order_repository=order_repo,
        plan_repository=plan_repo,
        wallet_repository=wallet_repo,
        payment_request_repository=request_repo,
    )


async def get_reschedule_service(
    order_repo: Annotated[PostgresOrderRepository, Depends(get_order_repository)],
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
) -> RescheduleService:
    """Get a RescheduleService instance."""
    return RescheduleService(order_repository=order_repo, plan_repository=plan_repo)


async def get_account_service(
    order_repo: Annotated[PostgresOrderRepository, Depends(get_order_repository)],
    wallet_repo: Annotated[PostgresWalletRepository, Depends(get_wallet_repository)],
) -> AccountService:
    """Get an AccountService instance."""
    return AccountService(order_repository=order_repo, wallet_repository=wallet_repo)
