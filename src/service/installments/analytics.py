"""Seller dashboard aggregates."""

from datetime import date
from typing import Iterable

from src.domain.entities import InstallmentOrder, OrderStatus, SellerAnalytics


def summarize_seller_orders(
    seller_id: str,
    orders: Iterable[InstallmentOrder],
    today: date | None = None,
) -> SellerAnalytics:
    """
    Aggregate revenue and order counts for a seller.

    An order is overdue when it is still active and its next due date
    has passed.
    """
    today = today or date.today()
    orders = list(orders)

    total_revenue = sum(o.total_cents for o in orders)
    received = sum(o.amount_paid_cents for o in orders)
    active = sum(1 for o in orders if o.status == OrderStatus.ACTIVE)
    completed = sum(1 for o in orders if o.status == OrderStatus.COMPLETED)
    overdue = sum(1 for o in orders if o.days_late(today) > 0)
    completion_rate = (completed / len(orders)) * 100 if orders else 0.0

    return SellerAnalytics(
        seller_id=seller_id,
        total_revenue_cents=total_revenue,
        amount_received_cents=received,
        pending_balance_cents=total_revenue - received,
        active_orders=active,
        completed_orders=completed,
        overdue_orders=overdue,
        completion_rate=completion_rate,
    )
