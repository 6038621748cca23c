"""/v1/budgets - spending categories, monthly limits and budget prediction"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.dependencies import get_localization
from fingrip_gateway.api.v1.schemas import (
    BudgetLimitUpdate,
    BudgetOverviewResponse,
    BudgetPredictionResponse,
    CategoryPredictionSchema,
    SpendingCategoryCreate,
    SpendingCategorySchema,
    SpendingCategoryUpdate,
    SpendingUpdate,
)
from fingrip_gateway.domain.budgeting import over_budget, predict_budget
from fingrip_gateway.domain.models import SpendingCategory
from fingrip_gateway.domain.samples import default_spending_categories
from fingrip_gateway.infrastructure.database.repositories import BudgetRepository, TransactionRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.localization.manager import LocalizationManager

router = APIRouter()


def to_schema(category: SpendingCategory) -> SpendingCategorySchema:
    return SpendingCategorySchema(
        id=category.id,
        name=category.name,
        icon=category.icon,
        color=category.color,
        monthly_limit=category.monthly_limit,
        current_spending=category.current_spending,
        usage_percentage=category.usage_percentage,
        remaining_budget=category.remaining_budget,
        budget_progress=category.budget_progress,
        is_over_budget=category.is_over_budget,
    )


def _overview(user_id: str, categories: List[SpendingCategory]) -> BudgetOverviewResponse:
    return BudgetOverviewResponse(
        user_id=user_id,
        categories=[to_schema(c) for c in categories],
        total_limit=sum(c.monthly_limit for c in categories),
        total_spending=sum(c.current_spending for c in categories),
        over_budget_count=len(over_budget(categories)),
    )


@router.get("/budgets", response_model=BudgetOverviewResponse)
def list_budgets(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """List spending categories; first-time users receive the default set"""
    repo = BudgetRepository(db)
    if repo.seed_if_empty(user_id, default_spending_categories()):
        db.commit()
    return _overview(user_id, repo.list(user_id))


@router.post("/budgets", response_model=SpendingCategorySchema, status_code=201)
def create_category(
    body: SpendingCategoryCreate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    category = SpendingCategory(
        name=body.name,
        icon=body.icon,
        color=body.color,
        monthly_limit=body.monthly_limit,
    )
    BudgetRepository(db).add(user_id, category)
    db.commit()
    return to_schema(category)


@router.get("/budgets/prediction", response_model=BudgetPredictionResponse)
def budget_prediction(
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    l10n: LocalizationManager = Depends(get_localization),
):
    """Income, spending and savings expected this month from the last three months"""
    prediction = predict_budget(TransactionRepository(db).list(user_id))
    return BudgetPredictionResponse(
        user_id=user_id,
        month=prediction.month,
        month_display=prediction.month_display,
        predicted_income=prediction.predicted_income,
        predicted_expenses=prediction.predicted_expenses,
        predicted_savings=prediction.predicted_savings,
        formatted_predicted_savings=l10n.format_currency(prediction.predicted_savings),
        confidence_level=prediction.confidence_level,
        categories=[
            CategoryPredictionSchema(category=c.category, amount=c.amount, trend=c.trend)
            for c in prediction.categories
        ],
    )


@router.post("/budgets/reset", response_model=BudgetOverviewResponse)
def reset_spending(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    categories = BudgetRepository(db).reset_spending(user_id)
    db.commit()
    return _overview(user_id, categories)


@router.patch("/budgets/{category_id}", response_model=SpendingCategorySchema)
def update_category(
    category_id: UUID,
    body: SpendingCategoryUpdate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    category = BudgetRepository(db).update(user_id, category_id, name=body.name, icon=body.icon, color=body.color)
    db.commit()
    return to_schema(category)


@router.put("/budgets/{category_id}/limit", response_model=SpendingCategorySchema)
def update_limit(
    category_id: UUID,
    body: BudgetLimitUpdate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    category = BudgetRepository(db).update_budget(user_id, category_id, body.monthly_limit)
    db.commit()
    return to_schema(category)


@router.post("/budgets/{category_id}/spending", response_model=SpendingCategorySchema)
def add_spending(
    category_id: UUID,
    body: SpendingUpdate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Add `amount` to the category's spending this month"""
    category = BudgetRepository(db).add_spending(user_id, category_id, body.amount)
    db.commit()
    return to_schema(category)


@router.delete("/budgets/{category_id}", status_code=204)
def delete_category(category_id: UUID, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    BudgetRepository(db).delete(user_id, category_id)
    db.commit()
