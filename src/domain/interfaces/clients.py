"""External client interfaces."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from src.domain.entities import (
    FinancialHealth,
    InstallmentOrder,
    InstallmentPayment,
    InstallmentPlan,
    PaymentMethod,
    PaymentRequestRecord,
    Reminder,
    Wallet,
)


class InstallmentGatewayClient(ABC):
    """
    Abstract client for the installment system of record.

    Used by the sync layer. Write operations are single round trips
    and must never be retried blindly by implementations.
    """

    @abstractmethod
    async def apply_installment_payment(
        self,
        buyer_id: str,
        order_id: UUID,
        method: PaymentMethod,
        amount_cents: Optional[int],
        idempotency_key: str,
    ) -> PaymentRequestRecord:
        """
        Apply a payment to an order.

        Args:
            buyer_id: The paying buyer
            order_id: The order to credit
            method: standard, custom or full
            amount_cents: Explicit amount, if any
            idempotency_key: Identifies the logical request across retries

        Returns:
            The recorded outcome of the request

        Raises:
            DomainException: The financial error returned by the gateway
            NetworkError: If the call failed in transport
        """
        ...

    @abstractmethod
    async def reschedule_installment(
        self,
        buyer_id: str,
        order_id: UUID,
        new_due_date: date,
    ) -> InstallmentOrder:
        """
        Move an order's next due date.

        Raises:
            DomainException: The policy error returned by the gateway
            NetworkError: If the call failed in transport
        """
        ...

    @abstractmethod
    async def get_financial_health(self, buyer_id: str) -> FinancialHealth:
        ...

    @abstractmethod
    async def get_wallet_balance(self, buyer_id: str) -> Wallet:
        ...

    @abstractmethod
    async def list_orders(self, buyer_id: str) -> List[InstallmentOrder]:
        ...

    @abstractmethod
    async def list_payments(self, buyer_id: str, order_id: UUID) -> List[InstallmentPayment]:
        ...

    @abstractmethod
    async def configure_plan(self, plan: InstallmentPlan) -> InstallmentPlan:
        """
        Attach a plan to its product.

        Returns:
            The plan as stored, with its assigned version
        """
        ...


class ReminderNotifier(ABC):
    """
    Abstract sink for payment reminders.

    Delivery (push, SMS, toast) is up to the implementation.
    """

    @abstractmethod
    async def notify(self, buyer_id: str, reminder: Reminder) -> None:
        ...
