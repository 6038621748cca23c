"""/v1/goals - savings goals and contributions"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.v1.schemas import GoalContribution, GoalCreate, GoalSchema
from fingrip_gateway.domain.models import Goal
from fingrip_gateway.infrastructure.database.repositories import GoalRepository
from fingrip_gateway.infrastructure.database.session import get_db

router = APIRouter()


def to_schema(goal: Goal) -> GoalSchema:
    return GoalSchema(
        id=goal.id,
        title=goal.title,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        deadline=goal.deadline,
        category=goal.category,
        icon=goal.icon,
        progress=goal.progress,
    )


@router.get("/goals", response_model=List[GoalSchema])
def list_goals(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return [to_schema(g) for g in GoalRepository(db).list(user_id)]


@router.post("/goals", response_model=GoalSchema, status_code=201)
def create_goal(body: GoalCreate, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    goal = GoalRepository(db).add(user_id, Goal(**body.model_dump()))
    db.commit()
    return to_schema(goal)


@router.post("/goals/{goal_id}/contributions", response_model=GoalSchema)
def contribute_to_goal(
    goal_id: UUID,
    body: GoalContribution,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Add `amount` to the goal's current amount"""
    goal = GoalRepository(db).contribute(user_id, goal_id, body.amount)
    db.commit()
    return to_schema(goal)


@router.delete("/goals/{goal_id}", status_code=204)
def delete_goal(goal_id: UUID, user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    GoalRepository(db).delete(user_id, goal_id)
    db.commit()
