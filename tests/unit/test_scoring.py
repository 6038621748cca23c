"""Unit tests for financial health scoring"""

import pytest
from datetime import date
from fingrip_gateway.domain.models import (
    FinancialCategory,
    FinancialFactors,
    FinancialHealthScore,
    Priority,
    ScoreCategory,
    ScoreComponent,
    Transaction,
    TransactionType,
)
from fingrip_gateway.domain.scoring import (
    BASELINE_SCORES,
    analyze_transactions,
    build_recommendations,
    calculate_debt_score,
    calculate_financial_score,
    calculate_overall_score,
    calculate_savings_score,
    calculate_spending_score,
    score_band,
    score_description,
)


def txn(amount, type=TransactionType.EXPENSE, category=FinancialCategory.OTHER):
    return Transaction(date=date.today(), amount=amount, type=type, category=category, description="Test")


def factors(income, **expenses):
    by_category = {FinancialCategory(k): v for k, v in expenses.items()}
    return FinancialFactors(
        total_income=income,
        total_expenses=sum(by_category.values()),
        expenses_by_category=by_category,
        transaction_count=len(by_category) + 1,
    )


def test_overall_score_is_mean_of_components():
    components = [
        ScoreComponent(category=ScoreCategory.SAVINGS, score=80.0, details=""),
        ScoreComponent(category=ScoreCategory.SPENDING, score=70.0, details=""),
        ScoreComponent(category=ScoreCategory.DEBT, score=45.0, details=""),
    ]
    assert calculate_overall_score(components) == pytest.approx(65.0)


def test_overall_score_empty_is_zero():
    assert calculate_overall_score([]) == 0.0


def test_analyze_transactions_ignores_transfers():
    result = analyze_transactions([
        txn(3000, TransactionType.INCOME, FinancialCategory.INCOME),
        txn(1000, category=FinancialCategory.HOUSING),
        txn(200, category=FinancialCategory.HOUSING),
        txn(500, TransactionType.TRANSFER, FinancialCategory.SAVINGS),
    ])

    assert result.total_income == 3000
    assert result.total_expenses == 1200
    assert result.expenses_by_category == {FinancialCategory.HOUSING: 1200}
    assert result.transaction_count == 4
    assert result.net_cash_flow == 1800


def test_negative_expense_reduces_spend():
    result = analyze_transactions([txn(100), txn(-40)])
    assert result.total_expenses == 60


def test_no_income_uses_baseline_scores():
    score = calculate_financial_score([])

    assert [c.score for c in score.components] == list(BASELINE_SCORES.values())
    assert score.overall_score == pytest.approx(74.0)
    assert score.savings_ratio == 0.0
    assert score.recommendations == []
    assert BASELINE_SCORES[ScoreCategory.SAVINGS] == 75.0


def test_savings_score_caps_at_target_rate():
    assert calculate_savings_score(factors(1000, food=800)) == 100.0
    assert calculate_savings_score(factors(1000, food=900)) == pytest.approx(50.0)
    assert calculate_savings_score(factors(1000, food=1500)) == 0.0


def test_debt_score_scales_to_zero_at_threshold():
    assert calculate_debt_score(factors(1000)) == 100.0
    assert calculate_debt_score(factors(1000, debt=180)) == pytest.approx(50.0)
    assert calculate_debt_score(factors(1000, debt=400)) == 0.0


def test_spending_score_counts_categories_within_budget():
    # Food budget 120, entertainment budget 40
    assert calculate_spending_score(factors(1000, food=100, entertainment=80)) == pytest.approx(50.0)
    assert calculate_spending_score(factors(1000)) == 100.0


def test_full_score_from_sample_month(sample_transactions):
    score = calculate_financial_score(sample_transactions)
    by_category = score.category_scores

    assert by_category[ScoreCategory.SAVINGS] == 100.0
    assert by_category[ScoreCategory.DEBT] == pytest.approx(89.6)
    assert by_category[ScoreCategory.SPENDING] == pytest.approx(83.3)
    assert by_category[ScoreCategory.INVESTMENTS] == pytest.approx(100.0)
    assert by_category[ScoreCategory.PROTECTION] == pytest.approx(75.0)
    assert score.overall_score == pytest.approx(89.6)
    assert score.savings_ratio == pytest.approx(0.4125)
    assert score_description(score.overall_score) == "Excellent"


def test_weak_components_produce_recommendations():
    score = calculate_financial_score([
        txn(1000, TransactionType.INCOME, FinancialCategory.INCOME),
        txn(500, category=FinancialCategory.DEBT),
    ])

    assert score.overall_score == pytest.approx(20.0)
    assert len(score.recommendations) == 4
    assert all(r.priority == Priority.HIGH for r in score.recommendations)
    assert score_band(score.overall_score) == "needs_attention"


def test_recommendation_priority_depends_on_severity():
    recs = build_recommendations([
        ScoreComponent(category=ScoreCategory.SAVINGS, score=55.0, details=""),
        ScoreComponent(category=ScoreCategory.DEBT, score=30.0, details=""),
        ScoreComponent(category=ScoreCategory.SPENDING, score=90.0, details=""),
    ])

    assert [r.title for r in recs] == ["Pay Down High-Interest Debt", "Increase Emergency Fund"]
    assert [r.priority for r in recs] == [Priority.HIGH, Priority.MEDIUM]


def test_trend_against_previous_score():
    previous = FinancialHealthScore(overall_score=70.0, components=[])
    score = calculate_financial_score([], previous=previous)
    assert score.trend == pytest.approx(4.0)


def test_score_description_bands():
    assert score_description(49.9) == "Needs Attention"
    assert score_description(50) == "Fair"
    assert score_description(70) == "Good"
    assert score_description(85) == "Excellent"
