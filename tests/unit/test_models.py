"""Unit tests for domain model behaviour"""

import pytest
from datetime import date, datetime, timedelta, timezone
from fingrip_gateway.domain.models import (
    BillingCycle,
    Challenge,
    ChallengeDifficulty,
    FinancialCategory,
    Goal,
    SavingOpportunity,
    SavingsTimeframe,
    SavingsTracker,
    Subscription,
    SubscriptionCategory,
)
from fingrip_gateway.utils.date_utils import month_bounds, start_of_month


def make_goal(current, target):
    return Goal(
        title="Holiday",
        target_amount=target,
        current_amount=current,
        deadline=date.today() + timedelta(days=90),
        category=FinancialCategory.SAVINGS,
    )


def test_goal_progress():
    assert make_goal(250, 1000).progress == pytest.approx(0.25)


def test_goal_progress_zero_target():
    assert make_goal(100, 0).progress == 0.0


def test_goal_progress_not_clamped():
    assert make_goal(1500, 1000).progress == pytest.approx(1.5)


def test_billing_cycle_multipliers():
    assert BillingCycle.MONTHLY.multiplier == 1
    assert BillingCycle.QUARTERLY.multiplier == 3
    assert BillingCycle.YEARLY.multiplier == 12


def test_subscription_costs():
    sub = Subscription(
        name="Gym",
        category=SubscriptionCategory.FITNESS,
        monthly_amount=30.0,
        billing_cycle=BillingCycle.QUARTERLY,
    )
    assert sub.actual_monthly_amount == pytest.approx(90.0)
    assert sub.annual_cost == pytest.approx(360.0)


def test_subscription_unused():
    today = date(2024, 6, 30)
    sub = Subscription(name="Netflix", category=SubscriptionCategory.STREAMING, monthly_amount=15.99)

    assert sub.is_unused(today)  # never used

    sub.last_used = today - timedelta(days=10)
    assert not sub.is_unused(today)

    sub.last_used = today - timedelta(days=30)
    assert not sub.is_unused(today)

    sub.last_used = today - timedelta(days=31)
    assert sub.is_unused(today)


def test_challenge_toggle_and_active():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    challenge = Challenge(
        title="Save $100 this week",
        description="Put aside $100",
        points=50,
        difficulty=ChallengeDifficulty.EASY,
        end_date=now + timedelta(days=7),
    )

    challenge.toggle()
    assert challenge.is_completed
    challenge.toggle()
    assert not challenge.is_completed
    challenge.complete()
    assert challenge.is_completed

    assert challenge.is_active(now)
    assert not challenge.is_active(now + timedelta(days=8))


def make_opportunity(amount, implemented=False):
    return SavingOpportunity(
        title=f"Save {amount}",
        description="",
        potential_savings_amount=amount,
        category=FinancialCategory.OTHER,
        timeframe=SavingsTimeframe.IMMEDIATE,
        is_implemented=implemented,
    )


def test_savings_tracker_totals():
    tracker = SavingsTracker(opportunities=[make_opportunity(50), make_opportunity(200, True), make_opportunity(150)])

    assert tracker.total_potential_savings == 400
    assert [o.potential_savings_amount for o in tracker.prioritized_opportunities] == [200, 150, 50]
    assert len(tracker.pending_opportunities) == 2
    assert tracker.savings_progress == 0.0


def test_savings_tracker_monthly_buckets():
    tracker = SavingsTracker()
    tracker.add_saving(100, FinancialCategory.FOOD, on=date(2024, 5, 3))
    tracker.add_saving(50, FinancialCategory.FOOD, on=date(2024, 5, 20))
    tracker.add_saving(25, FinancialCategory.UTILITIES, on=date(2024, 6, 1))

    assert tracker.total_saved == 175
    assert len(tracker.monthly_progress) == 2
    may = tracker.monthly_progress[0]
    assert may.month == date(2024, 5, 1)
    assert may.categories == {FinancialCategory.FOOD: 150}

    assert tracker.monthly_savings(date(2024, 5, 31)) == 150
    assert tracker.monthly_savings(date(2024, 7, 1)) == 0.0
    assert tracker.monthly_progress_percentage(date(2024, 5, 10)) == pytest.approx(30.0)
    assert tracker.yearly_progress_percentage == pytest.approx(175 / 6000 * 100)


def test_category_budget_percentages():
    assert FinancialCategory.HOUSING.suggested_budget_percentage == 0.30
    assert FinancialCategory.INCOME.suggested_budget_percentage == 0.0
    assert FinancialCategory.FOOD.display_name == "Food & Dining"


def test_month_bounds():
    assert month_bounds("2024-12") == (date(2024, 12, 1), date(2025, 1, 1))
    assert start_of_month(date(2024, 2, 29)) == date(2024, 2, 1)
    with pytest.raises(ValueError):
        month_bounds("2024-13")
