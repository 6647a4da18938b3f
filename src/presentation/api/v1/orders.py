"""API endpoints for installment orders, payments and reschedules."""

from dataclasses import asdict
from typing import Annotated, Literal, Optional
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, Header, Path, Query

from src.application.dto import ApplyPaymentRequest, RescheduleRequest, StartOrderRequest
from src.application.services import OrderService, PaymentService, RescheduleService
from src.core.dependencies import (
    get_order_service,
    get_payment_service,
    get_reschedule_service,
)
from src.domain.entities import OrderStatus
from src.presentation.schemas import (
    ApplyPaymentRequestSchema,
    ErrorResponseSchema,
    OrderListResponseSchema,
    OrderPaymentsResponseSchema,
    OrderResponseSchema,
    PaymentResultSchema,
    RescheduleRequestSchema,
    StartOrderRequestSchema,
)

order_router = APIRouter(
    prefix="/orders",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        404: {"model": ErrorResponseSchema, "description": "Order not found"},
    },
)


@order_router.post(
    "",
    response_model=OrderResponseSchema,
    status_code=201,
    summary="Start Installment Order",
    description="""
    Buy a product on its active installment plan.

    The deposit is debited from the buyer's wallet and the remaining
    installments are scheduled from today.
    """,
    responses={
        402: {"model": ErrorResponseSchema, "description": "Wallet cannot cover the deposit"},
    },
)
async def start_order(
    request: StartOrderRequestSchema,
    order_service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponseSchema:
    response = await order_service.start_order(
        StartOrderRequest(
            buyer_id=request.buyer_id,
            product_id=request.product_id,
            total_cents=request.total_cents,
        )
    )
    return OrderResponseSchema.model_validate(asdict(response))


@order_router.get(
    "",
    response_model=OrderListResponseSchema,
    summary="List Orders",
    description="List orders for a buyer or a seller, newest first, optionally by status.",
)
async def list_orders(
    buyer_id: Annotated[Optional[str], Query(max_length=255)] = None,
    seller_id: Annotated[Optional[str], Query(max_length=255)] = None,
    status: Annotated[Optional[Literal["active", "completed"]], Query()] = None,
    order_service: Annotated[OrderService, Depends(get_order_service)] = None,
) -> OrderListResponseSchema:
    orders = await order_service.list_orders(
        buyer_id=buyer_id,
        seller_id=seller_id,
        status=OrderStatus(status) if status else None,
    )
    return OrderListResponseSchema(
        orders=[OrderResponseSchema.model_validate(asdict(o)) for o in orders],
        count=len(orders),
    )


@order_router.get(
    "/{order_id}",
    response_model=OrderResponseSchema,
    summary="Get Order",
)
async def get_order(
    order_id: Annotated[UUID, Path(description="UUID of the order")],
    buyer_id: Annotated[Optional[str], Query(max_length=255)] = None,
    order_service: Annotated[OrderService, Depends(get_order_service)] = None,
) -> OrderResponseSchema:
    response = await order_service.get_order(order_id, buyer_id)
    return OrderResponseSchema.model_validate(asdict(response))


@order_router.get(
    "/{order_id}/payments",
    response_model=OrderPaymentsResponseSchema,
    summary="List Scheduled Payments",
)
async def list_payments(
    order_id: Annotated[UUID, Path(description="UUID of the order")],
    buyer_id: Annotated[Optional[str], Query(max_length=255)] = None,
    order_service: Annotated[OrderService, Depends(get_order_service)] = None,
) -> OrderPaymentsResponseSchema:
    response = await order_service.list_payments(order_id, buyer_id)
    return OrderPaymentsResponseSchema.model_validate(asdict(response))


@order_router.post(
    "/{order_id}/payments",
    response_model=PaymentResultSchema,
    summary="Apply Installment Payment",
    description="""
    Apply a standard, custom or full payment to an order.

    Send the same `Idempotency-Key` when retrying a request: a repeated key
    returns the recorded outcome with `replayed: true` and moves no money.
    """,
    responses={
        402: {"model": ErrorResponseSchema, "description": "Insufficient funds"},
        409: {"model": ErrorResponseSchema, "description": "Order state conflict"},
    },
)
async def apply_payment(
    order_id: Annotated[UUID, Path(description="UUID of the order")],
    request: ApplyPaymentRequestSchema,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    idempotency_key: Annotated[
        Optional[str],
        Header(alias="Idempotency-Key", max_length=255),
    ] = None,
) -> PaymentResultSchema:
    response = await payment_service.apply_payment(
        ApplyPaymentRequest(
            order_id=order_id,
            buyer_id=request.buyer_id,
            method=request.method,
            amount_cents=request.amount_cents,
            idempotency_key=idempotency_key or str(uuid4()),
        )
    )
    return PaymentResultSchema.model_validate(asdict(response))


@order_router.post(
    "/{order_id}/reschedule",
    response_model=OrderResponseSchema,
    summary="Reschedule Installment",
    description="""
    Move the order's next due date.

    An order may be rescheduled twice, with at least three days' notice,
    and not once it is past its plan's grace period.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Reschedule not allowed"},
    },
)
async def reschedule(
    order_id: Annotated[UUID, Path(description="UUID of the order")],
    request: RescheduleRequestSchema,
    reschedule_service: Annotated[RescheduleService, Depends(get_reschedule_service)],
) -> OrderResponseSchema:
    response = await reschedule_service.reschedule(
        RescheduleRequest(
            order_id=order_id,
            buyer_id=request.buyer_id,
            new_due_date=request.new_due_date,
        )
    )
    return OrderResponseSchema.model_validate(asdict(response))
