"""/v1/score - financial health score"""

import time
from typing import List
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from fingrip_gateway.api.dependencies import get_localization, get_request_id
from fingrip_gateway.api.v1.schemas import (
    RecommendationSchema,
    ScoreComponentSchema,
    ScoreHistoryItem,
    ScoreHistoryResponse,
    ScoreResponse,
)
from fingrip_gateway.domain.models import FinancialHealthScore
from fingrip_gateway.domain.scoring import calculate_financial_score, score_band
from fingrip_gateway.infrastructure.database.repositories import ScoreRepository, TransactionRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.infrastructure.observability.logging import log_score
from fingrip_gateway.infrastructure.observability.metrics import record_score
from fingrip_gateway.localization.manager import LocalizationManager

router = APIRouter()


def _recommendations(score: FinancialHealthScore) -> List[RecommendationSchema]:
    return [
        RecommendationSchema(
            id=r.id,
            title=r.title,
            description=r.description,
            type=r.type,
            priority=r.priority,
            impact=r.impact,
        )
        for r in score.recommendations
    ]


@router.post("/score", response_model=ScoreResponse)
def compute_score(
    request: Request,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    l10n: LocalizationManager = Depends(get_localization),
):
    """
    Score the user's transaction history and store a snapshot.

    Trend is the change against the previous snapshot.
    """
    start_time = time.time()
    score_repo = ScoreRepository(db)

    transactions = TransactionRepository(db).list(user_id)
    score = calculate_financial_score(transactions, previous=score_repo.latest(user_id))
    score_repo.add(user_id, score)
    db.commit()

    band = score_band(score.overall_score)
    record_score(score.overall_score, band)
    log_score(get_request_id(request), user_id, score.overall_score, band, (time.time() - start_time) * 1000)

    return ScoreResponse(
        user_id=user_id,
        overall_score=score.overall_score,
        description=l10n.localized_string(f"score.band.{band}"),
        components=[
            ScoreComponentSchema(
                category=c.category,
                description=c.category.description,
                score=c.score,
                details=c.details,
            )
            for c in score.components
        ],
        category_scores=score.category_scores,
        savings_ratio=score.savings_ratio,
        trend=score.trend,
        recommendations=_recommendations(score),
        computed_at=score.date,
    )


@router.get("/score/history", response_model=ScoreHistoryResponse)
def score_history(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
):
    history = ScoreRepository(db).history(user_id, limit=limit)
    return ScoreHistoryResponse(
        user_id=user_id,
        history=[
            ScoreHistoryItem(
                overall_score=s.overall_score,
                trend=s.trend,
                recommendations=_recommendations(s),
                computed_at=s.date,
            )
            for s in history
        ],
    )
