"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from uuid import UUID

from src.domain.entities import (
    InstallmentOrder,
    InstallmentPayment,
    InstallmentPlan,
    OrderStatus,
    PaymentRequestRecord,
    Wallet,
)


class PlanRepository(ABC):
    """
    Abstract repository for InstallmentPlan persistence.

    Plans are append-only: a product's active plan is its highest version.
    """

    @abstractmethod
    async def save(self, plan: InstallmentPlan) -> InstallmentPlan:
        """
        Persist a new plan version.

        Args:
            plan: The plan to save

        Returns:
            The saved plan
        """
        ...

    @abstractmethod
    async def get_by_id(self, plan_id: UUID) -> Optional[InstallmentPlan]:
        """
        Retrieve a plan by ID, whatever its version.

        Args:
            plan_id: The plan's unique identifier

        Returns:
            The plan if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_active_for_product(self, product_id: str) -> Optional[InstallmentPlan]:
        """
        Retrieve the newest plan version attached to a product.

        Args:
            product_id: The product's identifier

        Returns:
            The plan if the product has one, None otherwise
        """
        ...


class OrderRepository(ABC):
    """
    Abstract repository for InstallmentOrder and its scheduled payments.

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def save(
        self,
        order: InstallmentOrder,
        payments: Sequence[InstallmentPayment],
    ) -> InstallmentOrder:
        """
        Persist a new order together with its scheduled payments.

        Args:
            order: The order to save
            payments: The payments materialized from the plan

        Returns:
            The saved order
        """
        ...

    @abstractmethod
    async def get_by_id(self, order_id: UUID) -> Optional[InstallmentOrder]:
        """
        Retrieve an order by ID.

        Returns:
            The order if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_for_update(self, order_id: UUID) -> Optional[InstallmentOrder]:
        """
        Retrieve an order and lock its row for the rest of the transaction.

        Returns:
            The order if found, None otherwise
        """
        ...

    @abstractmethod
    async def update(
        self,
        order: InstallmentOrder,
        payments: Sequence[InstallmentPayment] = (),
    ) -> InstallmentOrder:
        """
        Write back ledger changes to an order and the given payments.

        The order's ``version`` must still match the stored row; the stored
        version is then incremented.

        Raises:
            ConcurrentModificationException: If the row changed meanwhile
        """
        ...

    @abstractmethod
    async def list_payments(self, order_id: UUID) -> List[InstallmentPayment]:
        """
        Retrieve an order's scheduled payments.

        Returns:
            Payments ordered by step number
        """
        ...

    @abstractmethod
    async def list_orders(
        self,
        buyer_id: Optional[str] = None,
        seller_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[InstallmentOrder]:
        """
        Retrieve orders filtered by buyer, seller and/or status.

        Returns:
            Orders ordered by created_at descending
        """
        ...


class WalletRepository(ABC):
    """Abstract repository for buyer wallets (the funding source)."""

    @abstractmethod
    async def get(self, buyer_id: str) -> Optional[Wallet]:
        ...

    @abstractmethod
    async def save(self, wallet: Wallet) -> Wallet:
        """Create or overwrite a wallet balance."""
        ...

    @abstractmethod
    async def debit(self, buyer_id: str, amount_cents: int) -> Wallet:
        """
        Decrement a wallet inside the current transaction.

        Raises:
            InsufficientFundsException: If the balance is below amount_cents
        """
        ...


class PaymentRequestRepository(ABC):
    """
    Abstract repository for processed payment requests.

    Keyed by idempotency key; used to answer retried requests.
    """

    @abstractmethod
    async def get_by_key(self, idempotency_key: str) -> Optional[PaymentRequestRecord]:
        ...

    @abstractmethod
    async def save(self, record: PaymentRequestRecord) -> PaymentRequestRecord:
        """
        Persist a processed request.

        Raises:
            ConcurrentModificationException: If the key was recorded concurrently
        """
        ...
