"""/v1/subscriptions - recurring services and optimization insights"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.dependencies import get_localization
from fingrip_gateway.api.v1.schemas import (
    OptimizationSuggestionSchema,
    SubscriptionCreate,
    SubscriptionInsightsResponse,
    SubscriptionSchema,
)
from fingrip_gateway.domain.models import Subscription, SubscriptionCategory
from fingrip_gateway.domain.subscriptions import analyze_subscriptions
from fingrip_gateway.infrastructure.database.repositories import SubscriptionRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.localization.manager import LocalizationManager

router = APIRouter()


def to_schema(sub: Subscription) -> SubscriptionSchema:
    return SubscriptionSchema(
        id=sub.id,
        name=sub.name,
        category=sub.category,
        monthly_amount=sub.monthly_amount,
        billing_cycle=sub.billing_cycle,
        is_active=sub.is_active,
        last_billing_date=sub.last_billing_date,
        next_billing_date=sub.next_billing_date,
        notes=sub.notes,
        last_used=sub.last_used,
        actual_monthly_amount=sub.actual_monthly_amount,
        annual_cost=sub.annual_cost,
        is_unused=sub.is_unused(),
    )


@router.get("/subscriptions", response_model=List[SubscriptionSchema])
def list_subscriptions(
    user_id: str = Query(..., min_length=1),
    category: Optional[SubscriptionCategory] = None,
    db: Session = Depends(get_db),
):
    return [to_schema(s) for s in SubscriptionRepository(db).list(user_id, category=category)]


@router.post("/subscriptions", response_model=SubscriptionSchema, status_code=201)
def create_subscription(body: SubscriptionCreate, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    sub = SubscriptionRepository(db).add(user_id, Subscription(**body.model_dump()))
    db.commit()
    return to_schema(sub)


@router.put("/subscriptions/{subscription_id}", response_model=SubscriptionSchema)
def update_subscription(
    subscription_id: UUID,
    body: SubscriptionCreate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    sub = SubscriptionRepository(db).update(user_id, Subscription(id=subscription_id, **body.model_dump()))
    db.commit()
    return to_schema(sub)


@router.delete("/subscriptions/{subscription_id}", status_code=204)
def delete_subscription(subscription_id: UUID, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    SubscriptionRepository(db).delete(user_id, subscription_id)
    db.commit()


@router.get("/subscriptions/insights", response_model=SubscriptionInsightsResponse)
def subscription_insights(
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    l10n: LocalizationManager = Depends(get_localization),
):
    """Monthly spend, savings from unused services and consolidation hints"""
    insights = analyze_subscriptions(SubscriptionRepository(db).list(user_id))
    return SubscriptionInsightsResponse(
        user_id=user_id,
        total_monthly_spend=insights.total_monthly_spend,
        potential_savings=insights.potential_savings,
        formatted_potential_savings=l10n.format_currency(insights.potential_savings),
        suggestions=[
            OptimizationSuggestionSchema(
                title=s.title,
                description=s.description,
                impact=s.impact,
                type=s.type,
                subscription_ids=[sub.id for sub in s.affected],
            )
            for s in insights.suggestions
        ],
    )
