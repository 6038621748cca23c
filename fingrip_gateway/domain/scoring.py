"""Financial health scoring engine"""

from typing import Dict, List, Optional
from fingrip_gateway.domain.models import (
    FinancialCategory,
    FinancialFactors,
    FinancialHealthScore,
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
    ScoreCategory,
    ScoreComponent,
    Transaction,
    TransactionType,
)

# Component scores used when there is no income to measure against
BASELINE_SCORES: Dict[ScoreCategory, float] = {
    ScoreCategory.SAVINGS: 75.0,
    ScoreCategory.DEBT: 80.0,
    ScoreCategory.SPENDING: 70.0,
    ScoreCategory.INVESTMENTS: 60.0,
    ScoreCategory.PROTECTION: 85.0,
}

TARGET_SAVINGS_RATE = 0.20
MAX_DEBT_TO_INCOME = 0.36
RECOMMENDATION_THRESHOLD = 60.0


def analyze_transactions(transactions: List[Transaction]) -> FinancialFactors:
    """
    Aggregate income and expenses. Transfers are ignored.

    Amounts are summed as recorded; a negative expense reduces total spend.
    """
    total_income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]

    by_category: Dict[FinancialCategory, float] = {}
    for txn in expenses:
        by_category[txn.category] = by_category.get(txn.category, 0.0) + txn.amount

    return FinancialFactors(
        total_income=total_income,
        total_expenses=sum(t.amount for t in expenses),
        expenses_by_category=by_category,
        transaction_count=len(transactions),
    )


def _clamp_percent(fraction: float) -> float:
    return round(max(0.0, min(fraction, 1.0)) * 100, 1)


def calculate_savings_score(factors: FinancialFactors) -> float:
    """100 when at least 20% of income is kept"""
    if factors.total_income <= 0:
        return BASELINE_SCORES[ScoreCategory.SAVINGS]
    savings_rate = factors.net_cash_flow / factors.total_income
    return _clamp_percent(savings_rate / TARGET_SAVINGS_RATE)


def calculate_debt_score(factors: FinancialFactors) -> float:
    """100 with no debt payments, 0 at a 36% debt-to-income ratio"""
    if factors.total_income <= 0:
        return BASELINE_SCORES[ScoreCategory.DEBT]
    debt = factors.expenses_by_category.get(FinancialCategory.DEBT, 0.0)
    return _clamp_percent(1 - (debt / factors.total_income) / MAX_DEBT_TO_INCOME)


def calculate_spending_score(factors: FinancialFactors) -> float:
    """Share of budgeted categories whose spend stays within the suggested percentage of income"""
    if factors.total_income <= 0:
        return BASELINE_SCORES[ScoreCategory.SPENDING]

    budgeted = {
        category: spent
        for category, spent in factors.expenses_by_category.items()
        if category.suggested_budget_percentage > 0
    }
    if not budgeted:
        return 100.0

    within = sum(
        1 for category, spent in budgeted.items()
        if spent <= category.suggested_budget_percentage * factors.total_income
    )
    return _clamp_percent(within / len(budgeted))


def _share_of_target(factors: FinancialFactors, category: FinancialCategory) -> float:
    spent = factors.expenses_by_category.get(category, 0.0)
    return (spent / factors.total_income) / category.suggested_budget_percentage


def calculate_investments_score(factors: FinancialFactors) -> float:
    if factors.total_income <= 0:
        return BASELINE_SCORES[ScoreCategory.INVESTMENTS]
    return _clamp_percent(_share_of_target(factors, FinancialCategory.INVESTMENTS))


def calculate_protection_score(factors: FinancialFactors) -> float:
    if factors.total_income <= 0:
        return BASELINE_SCORES[ScoreCategory.PROTECTION]
    return _clamp_percent(_share_of_target(factors, FinancialCategory.INSURANCE))


def calculate_overall_score(components: List[ScoreComponent]) -> float:
    """Arithmetic mean of component scores; 0 for no components"""
    if not components:
        return 0.0
    return sum(c.score for c in components) / len(components)


def score_description(score: float) -> str:
    if score < 50:
        return "Needs Attention"
    elif score < 70:
        return "Fair"
    elif score < 85:
        return "Good"
    else:
        return "Excellent"


def score_band(score: float) -> str:
    """Metric-friendly label for a score"""
    return score_description(score).lower().replace(" ", "_")


_COMPONENT_DETAILS = {
    ScoreCategory.SAVINGS: "Share of income kept after expenses",
    ScoreCategory.DEBT: "Debt payments relative to income",
    ScoreCategory.SPENDING: "Categories staying within suggested budgets",
    ScoreCategory.INVESTMENTS: "Investment contributions relative to income",
    ScoreCategory.PROTECTION: "Insurance coverage relative to income",
}

_RECOMMENDATIONS = {
    ScoreCategory.SAVINGS: (
        "Increase Emergency Fund",
        "Build up your emergency fund to cover 6 months of expenses",
        RecommendationType.SAVING,
    ),
    ScoreCategory.DEBT: (
        "Pay Down High-Interest Debt",
        "Direct extra payments to the debt with the highest interest rate",
        RecommendationType.DEBT,
    ),
    ScoreCategory.SPENDING: (
        "Reduce Dining Out Expenses",
        "Consider cooking more meals at home to reduce food expenses by 20%",
        RecommendationType.SPENDING,
    ),
    ScoreCategory.INVESTMENTS: (
        "Start Investing Regularly",
        "Set up an automatic monthly contribution to a diversified fund",
        RecommendationType.INVESTMENT,
    ),
    ScoreCategory.PROTECTION: (
        "Review Insurance Coverage",
        "Make sure health, home and income are adequately insured",
        RecommendationType.BUDGETING,
    ),
}


def build_recommendations(components: List[ScoreComponent]) -> List[Recommendation]:
    """One recommendation per component scoring below 60, weakest first"""
    recommendations = []
    for component in sorted(components, key=lambda c: c.score):
        if component.score >= RECOMMENDATION_THRESHOLD:
            continue
        title, description, rec_type = _RECOMMENDATIONS[component.category]
        severe = component.score < 40
        recommendations.append(
            Recommendation(
                title=title,
                description=description,
                type=rec_type,
                priority=Priority.HIGH if severe else Priority.MEDIUM,
                impact=Impact.SIGNIFICANT if severe else Impact.MODERATE,
            )
        )
    return recommendations


def calculate_components(factors: FinancialFactors) -> List[ScoreComponent]:
    scorers = [
        (ScoreCategory.SAVINGS, calculate_savings_score),
        (ScoreCategory.DEBT, calculate_debt_score),
        (ScoreCategory.SPENDING, calculate_spending_score),
        (ScoreCategory.INVESTMENTS, calculate_investments_score),
        (ScoreCategory.PROTECTION, calculate_protection_score),
    ]
    return [
        ScoreComponent(category=category, score=scorer(factors), details=_COMPONENT_DETAILS[category])
        for category, scorer in scorers
    ]


def calculate_financial_score(
    transactions: List[Transaction],
    previous: Optional[FinancialHealthScore] = None,
) -> FinancialHealthScore:
    """
    Main entry point: analyze transactions and build the health score.

    With no income recorded every component falls back to its baseline,
    so a new user starts at the mean of BASELINE_SCORES.
    """
    factors = analyze_transactions(transactions)
    components = calculate_components(factors)
    overall = round(calculate_overall_score(components), 1)

    savings_ratio = factors.net_cash_flow / factors.total_income if factors.total_income > 0 else 0.0
    trend = round(overall - previous.overall_score, 1) if previous else 0.0

    return FinancialHealthScore(
        overall_score=overall,
        components=components,
        savings_ratio=round(savings_ratio, 4),
        trend=trend,
        recommendations=build_recommendations(components),
    )
