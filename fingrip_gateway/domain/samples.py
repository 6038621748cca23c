"""Seed data for new users and the quick-win catalogue"""

from datetime import datetime, timedelta
from typing import List, Optional
from fingrip_gateway.domain.models import (
    Challenge,
    ChallengeDifficulty,
    FinancialCategory,
    QuickWin,
    SavingOpportunity,
    SavingsTimeframe,
    SpendingCategory,
    utcnow,
)

# Titles and descriptions are localization keys "quickwin.<key>.title" / ".description"
QUICK_WINS: List[QuickWin] = [
    QuickWin(key="track_expenses", points=75, icon="list.clipboard"),
    QuickWin(key="auto_savings", points=80, icon="clock.arrow.circlepath"),
    QuickWin(key="credit_report", points=60, icon="doc.text.magnifyingglass"),
    QuickWin(key="small_debt", points=90, icon="creditcard"),
    QuickWin(key="emergency_fund", points=100, icon="umbrella"),
    QuickWin(key="subscription_costs", points=50, icon="scissors"),
]


def sample_challenges(now: Optional[datetime] = None) -> List[Challenge]:
    now = now or utcnow()
    return [
        Challenge(
            title="Save $100 this week",
            description="Put aside $100 for your emergency fund",
            points=50,
            difficulty=ChallengeDifficulty.EASY,
            created_at=now,
            end_date=now + timedelta(days=7),
        ),
        Challenge(
            title="Review your budget",
            description="Take 15 minutes to review and adjust your monthly budget",
            points=30,
            difficulty=ChallengeDifficulty.MEDIUM,
            created_at=now,
            end_date=now + timedelta(days=14),
        ),
    ]


def sample_opportunities() -> List[SavingOpportunity]:
    return [
        SavingOpportunity(
            title="Review Subscriptions",
            description="Identify and cancel unused subscription services to reduce monthly expenses.",
            potential_savings_amount=50.0,
            category=FinancialCategory.SUBSCRIPTIONS,
            timeframe=SavingsTimeframe.IMMEDIATE,
        ),
        SavingOpportunity(
            title="Switch to Energy-Efficient Appliances",
            description="Replace old appliances with energy-efficient models to reduce utility bills.",
            potential_savings_amount=200.0,
            category=FinancialCategory.UTILITIES,
            timeframe=SavingsTimeframe.MEDIUM_TERM,
        ),
        SavingOpportunity(
            title="Meal Planning",
            description="Plan weekly meals and grocery shopping to reduce food waste and dining out expenses.",
            potential_savings_amount=150.0,
            category=FinancialCategory.FOOD,
            timeframe=SavingsTimeframe.SHORT_TERM,
        ),
    ]


def default_spending_categories() -> List[SpendingCategory]:
    return [
        SpendingCategory(name="Food & Dining", icon="fork.knife", color="green", monthly_limit=500.0),
        SpendingCategory(name="Transportation", icon="car.fill", color="blue", monthly_limit=300.0),
        SpendingCategory(name="Shopping", icon="cart.fill", color="purple", monthly_limit=400.0),
        SpendingCategory(name="Entertainment", icon="film.fill", color="orange", monthly_limit=200.0),
        SpendingCategory(name="Healthcare", icon="heart.fill", color="red", monthly_limit=300.0),
        SpendingCategory(name="Utilities", icon="bolt.fill", color="yellow", monthly_limit=250.0),
    ]
