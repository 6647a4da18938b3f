"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    InstallmentOrderModel,
    InstallmentPaymentModel,
    InstallmentPlanModel,
    PaymentRequestModel,
    WalletModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "InstallmentOrderModel",
    "InstallmentPaymentModel",
    "InstallmentPlanModel",
    "PaymentRequestModel",
    "WalletModel",
]
