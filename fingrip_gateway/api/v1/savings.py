"""/v1/savings - saving opportunities and progress tracking"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.v1.schemas import (
    ImplementSavingRequest,
    SavingOpportunityCreate,
    SavingOpportunitySchema,
    SavingsTrackerResponse,
)
from fingrip_gateway.domain.models import SavingOpportunity
from fingrip_gateway.domain.samples import sample_opportunities
from fingrip_gateway.infrastructure.database.repositories import SavingsRepository
from fingrip_gateway.infrastructure.database.session import get_db

router = APIRouter()


def to_schema(opp: SavingOpportunity) -> SavingOpportunitySchema:
    return SavingOpportunitySchema(
        id=opp.id,
        title=opp.title,
        description=opp.description,
        potential_savings_amount=opp.potential_savings_amount,
        category=opp.category,
        timeframe=opp.timeframe,
        difficulty=opp.difficulty,
        is_implemented=opp.is_implemented,
        date_created=opp.date_created,
        date_implemented=opp.date_implemented,
    )


@router.get("/savings/opportunities", response_model=List[SavingOpportunitySchema])
def list_opportunities(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    repo = SavingsRepository(db)
    if repo.seed_if_empty(user_id, sample_opportunities()):
        db.commit()
    return [to_schema(o) for o in repo.list_opportunities(user_id)]


@router.post("/savings/opportunities", response_model=SavingOpportunitySchema, status_code=201)
def create_opportunity(
    body: SavingOpportunityCreate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    opp = SavingsRepository(db).add_opportunity(user_id, SavingOpportunity(**body.model_dump()))
    db.commit()
    return to_schema(opp)


@router.post("/savings/opportunities/{opportunity_id}/implement", response_model=SavingOpportunitySchema)
def implement_opportunity(
    opportunity_id: UUID,
    body: ImplementSavingRequest,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Mark implemented and add the realised amount to this month's savings"""
    opp = SavingsRepository(db).implement(user_id, opportunity_id, amount=body.amount, notes=body.notes)
    db.commit()
    return to_schema(opp)


@router.get("/savings/tracker", response_model=SavingsTrackerResponse)
def savings_tracker(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    tracker = SavingsRepository(db).load_tracker(user_id)
    return SavingsTrackerResponse(
        user_id=user_id,
        total_saved=tracker.total_saved,
        total_potential_savings=tracker.total_potential_savings,
        total_implemented_savings=tracker.total_implemented_savings,
        savings_progress=tracker.savings_progress,
        monthly_savings=tracker.monthly_savings(),
        monthly_progress_percentage=tracker.monthly_progress_percentage(),
        yearly_progress_percentage=tracker.yearly_progress_percentage,
        monthly_target=tracker.monthly_target,
        yearly_target=tracker.yearly_target,
        pending_opportunities=[to_schema(o) for o in tracker.pending_opportunities],
    )
