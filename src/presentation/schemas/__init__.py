"""Pydantic schemas for API request/response validation."""

from .account import (
    FinancialHealthResponseSchema,
    SellerAnalyticsResponseSchema,
    WalletResponseSchema,
)
from .error import ErrorResponseSchema
from .order import (
    OrderListResponseSchema,
    OrderPaymentsResponseSchema,
    OrderResponseSchema,
    PaymentSchema,
    RescheduleRequestSchema,
    StartOrderRequestSchema,
)
from .payment import ApplyPaymentRequestSchema, PaymentResultSchema
from .plan import (
    PlanConfigRequestSchema,
    PlanPreviewRequestSchema,
    PlanPreviewResponseSchema,
    PlanResponseSchema,
    ScheduledAmountSchema,
    ScheduleStepSchema,
)

__all__ = [
    "FinancialHealthResponseSchema",
    "SellerAnalyticsResponseSchema",
    "WalletResponseSchema",
    "ErrorResponseSchema",
    "OrderListResponseSchema",
    "OrderPaymentsResponseSchema",
    "OrderResponseSchema",
    "PaymentSchema",
    "RescheduleRequestSchema",
    "StartOrderRequestSchema",
    "ApplyPaymentRequestSchema",
    "PaymentResultSchema",
    "PlanConfigRequestSchema",
    "PlanPreviewRequestSchema",
    "PlanPreviewResponseSchema",
    "PlanResponseSchema",
    "ScheduledAmountSchema",
    "ScheduleStepSchema",
]
