"""
Financial health scoring.

A read-only projection of lateness across a buyer's orders:

    score = 100 - sum(min(20, days_late * 2)) over unfinished orders

clamped to 0-100 and mapped to a status label.
"""

from datetime import date
from typing import Iterable

from src.domain.entities import (
    FinancialHealth,
    HealthSource,
    HealthStatus,
    InstallmentOrder,
)

from .settings import InstallmentSettings, installment_settings


def order_penalty(
    order: InstallmentOrder,
    today: date,
    settings: InstallmentSettings = installment_settings,
) -> int:
    """Points one order deducts from the score."""
    days_late = order.days_late(today)
    return min(
        settings.health_max_penalty_per_order,
        days_late * settings.health_penalty_per_day,
    )


def calculate_health_score(
    orders: Iterable[InstallmentOrder],
    today: date | None = None,
    settings: InstallmentSettings = installment_settings,
) -> int:
    """
    Compute the 0-100 health score for a set of orders.

    Completed orders never count against the buyer.
    """
    today = today or date.today()
    score = 100
    for order in orders:
        if order.is_completed:
            continue
        score -= order_penalty(order, today, settings)
    return max(0, min(100, score))


def health_status(
    score: int,
    settings: InstallmentSettings = installment_settings,
) -> HealthStatus:
    """Map a score to its status label."""
    if score >= settings.health_excellent_threshold:
        return HealthStatus.EXCELLENT
    elif score >= settings.health_good_threshold:
        return HealthStatus.GOOD
    elif score >= settings.health_fair_threshold:
        return HealthStatus.FAIR
    else:
        return HealthStatus.NEEDS_ATTENTION


def assess_financial_health(
    buyer_id: str,
    orders: Iterable[InstallmentOrder],
    today: date | None = None,
    source: HealthSource = HealthSource.LOCAL,
    settings: InstallmentSettings = installment_settings,
) -> FinancialHealth:
    """Build the full FinancialHealth projection for a buyer."""
    today = today or date.today()
    orders = list(orders)
    score = calculate_health_score(orders, today, settings)

    return FinancialHealth(
        buyer_id=buyer_id,
        score=score,
        status=health_status(score, settings),
        late_orders=sum(1 for o in orders if o.days_late(today) > 0),
        source=source,
    )
