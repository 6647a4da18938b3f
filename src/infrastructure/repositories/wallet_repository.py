"""PostgreSQL implementation of WalletRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Wallet
from src.domain.exceptions import InsufficientFundsException
from src.domain.interfaces import WalletRepository
from src.infrastructure.database.models import WalletModel


class PostgresWalletRepository(WalletRepository):
    """
    PostgreSQL implementation of the Wallet repository.

    Debits are a single conditional UPDATE so the balance can never
    go below zero, even without an explicit lock.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, buyer_id: str) -> Optional[Wallet]:
        stmt = (
            select(WalletModel)
            .where(WalletModel.buyer_id == buyer_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def save(self, wallet: Wallet) -> Wallet:
        model = await self._session.get(WalletModel, wallet.buyer_id)
        if model is None:
            model = WalletModel(buyer_id=wallet.buyer_id)
            self._session.add(model)

        model.balance_cents = wallet.balance_cents
        model.updated_at = datetime.utcnow()
        await self._session.flush()

        return wallet

    async def debit(self, buyer_id: str, amount_cents: int) -> Wallet:
        stmt = (
            update(WalletModel)
            .where(WalletModel.buyer_id == buyer_id)
            .where(WalletModel.balance_cents >= amount_cents)
            .values(
                balance_cents=WalletModel.balance_cents - amount_cents,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            wallet = await self.get(buyer_id)
            available = wallet.balance_cents if wallet else 0
            raise InsufficientFundsException(amount_cents, available)

        wallet = await self.get(buyer_id)
        return wallet

    def _to_entity(self, model: WalletModel) -> Wallet:
        return Wallet(
            buyer_id=model.buyer_id,
            balance_cents=model.balance_cents,
            updated_at=model.updated_at,
        )
