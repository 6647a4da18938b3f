"""Data Transfer Objects for application layer."""

from .account import FinancialHealthResponse, SellerAnalyticsResponse, WalletResponse
from .order import (
    OrderPaymentsResponse,
    OrderResponse,
    PaymentDTO,
    RescheduleRequest,
    StartOrderRequest,
)
from .payment import ApplyPaymentRequest, PaymentResult
from .plan import (
    PlanConfigRequest,
    PlanPreviewRequest,
    PlanPreviewResponse,
    PlanResponse,
    ScheduledAmountDTO,
    ScheduleStepDTO,
)

__all__ = [
    "FinancialHealthResponse",
    "SellerAnalyticsResponse",
    "WalletResponse",
    "OrderPaymentsResponse",
    "OrderResponse",
    "PaymentDTO",
    "RescheduleRequest",
    "StartOrderRequest",
    "ApplyPaymentRequest",
    "PaymentResult",
    "PlanConfigRequest",
    "PlanPreviewRequest",
    "PlanPreviewResponse",
    "PlanResponse",
    "ScheduledAmountDTO",
    "ScheduleStepDTO",
]
