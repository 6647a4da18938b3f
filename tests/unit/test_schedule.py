"""
Unit tests for schedule generation and payment materialization.

Covers:
- Equal split of the post-deposit share with the last step absorbing drift
- Due offsets per frequency
- Conversion of a plan into cent amounts and due dates
"""

from datetime import date, timedelta

import pytest

from src.domain.entities import PaymentFrequency
from src.domain.exceptions import InvalidAmountException, InvalidPlanParameterError
from src.service.installments import days_for, generate_schedule, materialize_payments
from tests.factories import make_plan


class TestGenerateSchedule:
    def test_thirty_percent_deposit_three_monthly_steps(self):
        """30% deposit over 3 months splits 70% as 23.33 / 23.33 / 23.34."""
        schedule = generate_schedule(30, 3, PaymentFrequency.MONTHLY)

        assert [s.percent_of_total for s in schedule] == [23.33, 23.33, 23.34]
        assert [s.due_offset_days for s in schedule] == [30, 60, 90]
        assert [s.step_number for s in schedule] == [1, 2, 3]
        assert 30 + sum(s.percent_of_total for s in schedule) == pytest.approx(100, abs=0.01)

    @pytest.mark.parametrize(
        "frequency,days",
        [("daily", 1), ("weekly", 7), ("biweekly", 14), ("monthly", 30)],
    )
    def test_offsets_follow_frequency(self, frequency, days):
        schedule = generate_schedule(20, 4, frequency)

        assert days_for(frequency) == days
        assert [s.due_offset_days for s in schedule] == [days, 2 * days, 3 * days, 4 * days]

    @pytest.mark.parametrize("deposit", [10, 15.5, 25, 33.33, 50, 90])
    @pytest.mark.parametrize("duration", [1, 2, 3, 6, 7, 12])
    def test_deposit_and_steps_sum_to_one_hundred(self, deposit, duration):
        schedule = generate_schedule(deposit, duration, "weekly")

        assert len(schedule) == duration
        total = deposit + sum(s.percent_of_total for s in schedule)
        assert abs(total - 100) <= 0.01

    def test_single_period_takes_everything_after_deposit(self):
        schedule = generate_schedule(40, 1, "monthly")

        assert len(schedule) == 1
        assert schedule[0].percent_of_total == 60

    def test_zero_duration_rejected(self):
        with pytest.raises(InvalidPlanParameterError):
            generate_schedule(30, 0, "monthly")

    def test_unknown_frequency_rejected(self):
        with pytest.raises(ValueError):
            generate_schedule(30, 3, "yearly")


class TestMaterializePayments:
    def test_amounts_in_cents(self):
        plan = make_plan(deposit=30, duration=3)
        start = date(2025, 1, 1)

        breakdown = materialize_payments(100_000, plan, start)

        assert breakdown.deposit_cents == 30_000
        assert [i.amount_cents for i in breakdown.installments] == [23_330, 23_330, 23_340]
        assert breakdown.installment_amount_cents == 23_330
        assert breakdown.first_due_date == start + timedelta(days=30)
        assert [i.due_date for i in breakdown.installments] == [
            start + timedelta(days=30),
            start + timedelta(days=60),
            start + timedelta(days=90),
        ]

    @pytest.mark.parametrize("total", [99, 1_000, 12_345, 99_999, 1_000_001])
    def test_cents_always_add_up_to_total(self, total):
        plan = make_plan(deposit=33.33, duration=7, frequency=PaymentFrequency.WEEKLY)

        breakdown = materialize_payments(total, plan, date(2025, 1, 1))

        assert breakdown.deposit_cents + sum(
            i.amount_cents for i in breakdown.installments
        ) == total
        assert all(i.amount_cents > 0 for i in breakdown.installments)

    @pytest.mark.parametrize("total", [13, 17, 25, 37, 101])
    def test_small_totals_never_produce_negative_steps(self, total):
        """Twelve weekly 7.5% steps on a few cents stay positive and add up."""
        plan = make_plan(deposit=10, duration=12, frequency=PaymentFrequency.WEEKLY)

        breakdown = materialize_payments(total, plan, date(2025, 1, 1))

        amounts = [i.amount_cents for i in breakdown.installments]
        assert all(amount >= 1 for amount in amounts)
        assert breakdown.deposit_cents + sum(amounts) == total

    @pytest.mark.parametrize("total", [1, 10, 11, 12])
    def test_total_too_small_for_every_step_rejected(self, total):
        plan = make_plan(deposit=10, duration=12, frequency=PaymentFrequency.WEEKLY)

        with pytest.raises(InvalidAmountException):
            materialize_payments(total, plan, date(2025, 1, 1))

    def test_rounding_does_not_accumulate(self):
        """Steps follow the rounded running total, not per-step rounding."""
        plan = make_plan(deposit=10, duration=12, frequency=PaymentFrequency.WEEKLY)

        breakdown = materialize_payments(100, plan, date(2025, 1, 1))

        amounts = [i.amount_cents for i in breakdown.installments]
        assert breakdown.deposit_cents == 10
        assert amounts == [8, 7, 8, 7, 8, 7, 8, 7, 8, 7, 8, 7]

    def test_deposit_rounds_half_up(self):
        plan = make_plan(deposit=25, duration=2)

        breakdown = materialize_payments(10_002, plan, date(2025, 1, 1))

        # 25% of 10002 is 2500.5
        assert breakdown.deposit_cents == 2_501

    @pytest.mark.parametrize("total", [0, -100])
    def test_non_positive_total_rejected(self, total):
        with pytest.raises(InvalidAmountException):
            materialize_payments(total, make_plan(), date(2025, 1, 1))
