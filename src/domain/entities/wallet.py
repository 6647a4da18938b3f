"""Wallet entity: the buyer's funding source."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Wallet:
    """A buyer's spendable balance, in cents."""

    buyer_id: str
    balance_cents: int = 0
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def can_cover(self, amount_cents: int) -> bool:
        return self.balance_cents >= amount_cents

    def to_dict(self) -> dict:
        return {
            "buyer_id": self.buyer_id,
            "balance_cents": self.balance_cents,
        }
