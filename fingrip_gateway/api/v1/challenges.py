"""/v1/challenges - gamified challenges"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.v1.schemas import ChallengeCreate, ChallengeSchema
from fingrip_gateway.domain.models import Challenge
from fingrip_gateway.domain.samples import sample_challenges
from fingrip_gateway.infrastructure.database.repositories import ChallengeRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.utils.date_utils import ensure_utc

router = APIRouter()


def to_schema(challenge: Challenge) -> ChallengeSchema:
    return ChallengeSchema(
        id=challenge.id,
        title=challenge.title,
        description=challenge.description,
        points=challenge.points,
        difficulty=challenge.difficulty,
        end_date=challenge.end_date,
        is_completed=challenge.is_completed,
        is_active=challenge.is_active(),
        created_at=challenge.created_at,
    )


@router.get("/challenges", response_model=List[ChallengeSchema])
def list_challenges(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """List challenges; first-time users receive the starter set"""
    repo = ChallengeRepository(db)
    if repo.seed_if_empty(user_id, sample_challenges()):
        db.commit()
    return [to_schema(c) for c in repo.list(user_id)]


@router.post("/challenges", response_model=ChallengeSchema, status_code=201)
def create_challenge(body: ChallengeCreate, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    challenge = Challenge(
        title=body.title,
        description=body.description,
        points=body.points,
        difficulty=body.difficulty,
        end_date=ensure_utc(body.end_date),
    )
    ChallengeRepository(db).add(user_id, challenge)
    db.commit()
    return to_schema(challenge)


@router.post("/challenges/{challenge_id}/toggle", response_model=ChallengeSchema)
def toggle_challenge(challenge_id: UUID, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    challenge = ChallengeRepository(db).toggle(user_id, challenge_id)
    db.commit()
    return to_schema(challenge)


@router.delete("/challenges/{challenge_id}", status_code=204)
def delete_challenge(challenge_id: UUID, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    ChallengeRepository(db).delete(user_id, challenge_id)
    db.commit()
