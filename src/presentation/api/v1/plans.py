"""API endpoints for installment plan configuration."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from src.application.dto import PlanConfigRequest, PlanPreviewRequest, ScheduleStepDTO
from src.application.services import PlanService
from src.core.dependencies import get_plan_service
from src.presentation.schemas import (
    ErrorResponseSchema,
    PlanConfigRequestSchema,
    PlanPreviewRequestSchema,
    PlanPreviewResponseSchema,
    PlanResponseSchema,
)

plan_router = APIRouter(
    responses={
        400: {"model": ErrorResponseSchema, "description": "Plan validation failed"},
    },
)


@plan_router.post(
    "/plans/preview",
    response_model=PlanPreviewResponseSchema,
    summary="Preview Schedule",
    description="""
    Generate an installment schedule from deposit, duration and frequency.

    Nothing is stored. When `total_cents` is given the response also shows
    the deposit and each installment in cents with its due date.
    """,
)
async def preview_plan(
    request: PlanPreviewRequestSchema,
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanPreviewResponseSchema:
    response = await plan_service.preview(
        PlanPreviewRequest(
            initial_deposit_percent=request.initial_deposit_percent,
            frequency=request.frequency,
            duration_periods=request.duration_periods,
            total_cents=request.total_cents,
        )
    )
    return PlanPreviewResponseSchema.model_validate(asdict(response))


@plan_router.put(
    "/products/{product_id}/plan",
    response_model=PlanResponseSchema,
    status_code=201,
    summary="Configure Product Plan",
    description="""
    Validate and attach a new plan version to a product.

    Existing orders keep the plan version they were bought under.
    """,
)
async def configure_plan(
    product_id: Annotated[str, Path(min_length=1, max_length=255)],
    request: PlanConfigRequestSchema,
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    schedule = None
    if request.schedule:
        schedule = [ScheduleStepDTO(**step.model_dump()) for step in request.schedule]

    response = await plan_service.configure_plan(
        PlanConfigRequest(
            product_id=product_id,
            seller_id=request.seller_id,
            initial_deposit_percent=request.initial_deposit_percent,
            frequency=request.frequency,
            duration_periods=request.duration_periods,
            min_payment_cents=request.min_payment_cents,
            grace_period_days=request.grace_period_days,
            allow_partial_payments=request.allow_partial_payments,
            allow_early_completion=request.allow_early_completion,
            schedule=schedule,
        )
    )
    return PlanResponseSchema.model_validate(asdict(response))


@plan_router.get(
    "/products/{product_id}/plan",
    response_model=PlanResponseSchema,
    summary="Get Product Plan",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Product has no plan"},
    },
)
async def get_plan(
    product_id: Annotated[str, Path(min_length=1, max_length=255)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    response = await plan_service.get_plan(product_id)
    return PlanResponseSchema.model_validate(asdict(response))
