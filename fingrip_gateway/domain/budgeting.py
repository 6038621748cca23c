"""Spending-category budgets and monthly budget prediction"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple
from fingrip_gateway.domain.models import (
    BudgetPrediction,
    CategoryPrediction,
    ConfidenceLevel,
    FinancialCategory,
    FinancialFactors,
    SpendingCategory,
    SpendingTrend,
    Transaction,
)
from fingrip_gateway.domain.scoring import analyze_transactions
from fingrip_gateway.utils.date_utils import start_of_month

LOOKBACK_MONTHS = 3
# Relative change in the latest month that counts as a trend
TREND_TOLERANCE = 0.10


def over_budget(categories: List[SpendingCategory]) -> List[SpendingCategory]:
    return [c for c in categories if c.is_over_budget]


def _previous_month(month: date) -> date:
    return start_of_month(month - timedelta(days=1))


def monthly_factors(
    transactions: List[Transaction],
    month: date,
    lookback_months: int = LOOKBACK_MONTHS,
) -> List[Tuple[date, FinancialFactors]]:
    """
    Factors for each complete month before `month` that has transactions,
    oldest first. At most `lookback_months` months are considered.
    """
    months: List[date] = []
    cursor = start_of_month(month)
    for _ in range(lookback_months):
        cursor = _previous_month(cursor)
        months.insert(0, cursor)

    grouped: Dict[date, List[Transaction]] = {m: [] for m in months}
    for txn in transactions:
        key = start_of_month(txn.date)
        if key in grouped:
            grouped[key].append(txn)

    return [(m, analyze_transactions(grouped[m])) for m in months if grouped[m]]


def spending_trend(latest: float, earlier: List[float]) -> SpendingTrend:
    """Compare the latest month against the mean of the months before it"""
    if not earlier:
        return SpendingTrend.STABLE
    baseline = sum(earlier) / len(earlier)
    if baseline == 0:
        return SpendingTrend.INCREASING if latest > 0 else SpendingTrend.STABLE
    if latest > baseline * (1 + TREND_TOLERANCE):
        return SpendingTrend.INCREASING
    if latest < baseline * (1 - TREND_TOLERANCE):
        return SpendingTrend.DECREASING
    return SpendingTrend.STABLE


def confidence_for(months_of_history: int) -> ConfidenceLevel:
    if months_of_history >= 3:
        return ConfidenceLevel.HIGH
    if months_of_history == 2:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def predict_budget(
    transactions: List[Transaction],
    today: Optional[date] = None,
    lookback_months: int = LOOKBACK_MONTHS,
) -> BudgetPrediction:
    """
    Predict income and spending for the month containing `today`.

    Each figure is the average over the preceding complete months; months
    without a category's spend count as zero for that category.
    """
    month = start_of_month(today or date.today())
    history = monthly_factors(transactions, month, lookback_months)
    if not history:
        return BudgetPrediction(
            month=month,
            predicted_income=0.0,
            predicted_expenses=0.0,
            confidence_level=ConfidenceLevel.LOW,
        )

    count = len(history)
    factors = [f for _, f in history]
    categories: List[FinancialCategory] = []
    for f in factors:
        categories.extend(c for c in f.expenses_by_category if c not in categories)

    predictions = []
    for category in categories:
        amounts = [f.expenses_by_category.get(category, 0.0) for f in factors]
        predictions.append(
            CategoryPrediction(
                category=category,
                amount=round(sum(amounts) / count, 2),
                trend=spending_trend(amounts[-1], amounts[:-1]),
            )
        )

    return BudgetPrediction(
        month=month,
        predicted_income=round(sum(f.total_income for f in factors) / count, 2),
        predicted_expenses=round(sum(f.total_expenses for f in factors) / count, 2),
        confidence_level=confidence_for(count),
        categories=sorted(predictions, key=lambda p: p.amount, reverse=True),
    )
