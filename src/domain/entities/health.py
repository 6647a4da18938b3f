"""Financial health projection for a buyer."""

from dataclasses import dataclass
from enum import Enum


class HealthStatus(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_ATTENTION = "Needs Attention"


class HealthSource(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class FinancialHealth:
    """
    Derived 0-100 risk indicator.

    Never persisted as a source of truth; it is recomputed from
    ledger state whenever it is requested.
    """

    buyer_id: str
    score: int
    status: HealthStatus
    late_orders: int = 0
    source: HealthSource = HealthSource.REMOTE

    def to_dict(self) -> dict:
        return {
            "buyer_id": self.buyer_id,
            "score": self.score,
            "status": self.status.value,
            "late_orders": self.late_orders,
        }
