"""Data transfer objects for buyer and seller account views."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FinancialHealthResponse:
    buyer_id: str
    score: int
    status: str
    late_orders: int
    source: str

    @classmethod
    def from_entity(cls, health) -> "FinancialHealthResponse":
        return cls(
            buyer_id=health.buyer_id,
            score=health.score,
            status=health.status.value,
            late_orders=health.late_orders,
            source=health.source.value,
        )


@dataclass(frozen=True)
class WalletResponse:
    buyer_id: str
    balance_cents: int

    @classmethod
    def from_entity(cls, wallet) -> "WalletResponse":
        return cls(buyer_id=wallet.buyer_id, balance_cents=wallet.balance_cents)


@dataclass(frozen=True)
class SellerAnalyticsResponse:
    """Dashboard totals for one seller."""

    seller_id: str
    total_revenue_cents: int
    amount_received_cents: int
    pending_balance_cents: int
    active_orders: int
    completed_orders: int
    overdue_orders: int
    completion_rate: float

    @classmethod
    def from_entity(cls, analytics) -> "SellerAnalyticsResponse":
        return cls(**analytics.to_dict())
