"""API endpoints for buyer and seller account views."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from src.application.services import AccountService
from src.core.dependencies import get_account_service
from src.presentation.schemas import (
    FinancialHealthResponseSchema,
    SellerAnalyticsResponseSchema,
    WalletResponseSchema,
)

account_router = APIRouter()

AccountId = Annotated[str, Path(min_length=1, max_length=255)]


@account_router.get(
    "/buyers/{buyer_id}/financial-health",
    response_model=FinancialHealthResponseSchema,
    summary="Get Financial Health",
    description="""
    Score a buyer from 0 to 100 by how late their active orders are.

    Each day late costs 2 points, at most 20 per order.
    """,
)
async def get_financial_health(
    buyer_id: AccountId,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> FinancialHealthResponseSchema:
    response = await account_service.get_financial_health(buyer_id)
    return FinancialHealthResponseSchema.model_validate(asdict(response))


@account_router.get(
    "/wallets/{buyer_id}",
    response_model=WalletResponseSchema,
    summary="Get Wallet Balance",
)
async def get_wallet_balance(
    buyer_id: AccountId,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> WalletResponseSchema:
    response = await account_service.get_wallet_balance(buyer_id)
    return WalletResponseSchema.model_validate(asdict(response))


@account_router.get(
    "/sellers/{seller_id}/analytics",
    response_model=SellerAnalyticsResponseSchema,
    summary="Get Seller Analytics",
    description="Revenue, collected and outstanding amounts, and order counts for a seller.",
)
async def get_seller_analytics(
    seller_id: AccountId,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> SellerAnalyticsResponseSchema:
    response = await account_service.get_seller_analytics(seller_id)
    return SellerAnalyticsResponseSchema.model_validate(asdict(response))
