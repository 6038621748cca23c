"""Data access layer mapping ORM records to domain models"""

import uuid
from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from fingrip_gateway.infrastructure.database.models import (
    ChallengeRecord,
    Credential,
    GoalRecord,
    ImplementedSavingRecord,
    Preference,
    SavingOpportunityRecord,
    ScoreSnapshot,
    SpendingCategoryRecord,
    SubscriptionRecord,
    TransactionRecord,
)
from fingrip_gateway.domain.exceptions import AlreadyImplementedError, NotFoundError
from fingrip_gateway.domain.models import (
    BillingCycle,
    Challenge,
    ChallengeDifficulty,
    FinancialCategory,
    FinancialHealthScore,
    Goal,
    ImplementedSaving,
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
    SavingOpportunity,
    SavingsDifficulty,
    SavingsTimeframe,
    SavingsTracker,
    ScoreCategory,
    ScoreComponent,
    SpendingCategory,
    Subscription,
    SubscriptionCategory,
    Transaction,
    TransactionType,
    utcnow,
)
from fingrip_gateway.utils.date_utils import ensure_utc


def _transaction_from_record(r: TransactionRecord) -> Transaction:
    return Transaction(
        id=r.id,
        date=r.date,
        amount=r.amount,
        type=TransactionType(r.type),
        category=FinancialCategory(r.category),
        description=r.description,
        merchant=r.merchant,
        location=r.location,
        is_recurring=r.is_recurring,
        tags=list(r.tags or []),
        external_id=r.external_id,
    )


class TransactionRepository:
    """Repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def list(
        self,
        user_id: str,
        type: Optional[TransactionType] = None,
        category: Optional[FinancialCategory] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Transaction]:
        """Transactions newest first; `end` is exclusive"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if type is not None:
            query = query.filter(TransactionRecord.type == type.value)
        if category is not None:
            query = query.filter(TransactionRecord.category == category.value)
        if start is not None:
            query = query.filter(TransactionRecord.date >= start)
        if end is not None:
            query = query.filter(TransactionRecord.date < end)
        records = query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc()).all()
        return [_transaction_from_record(r) for r in records]

    def add(self, user_id: str, txn: Transaction) -> Transaction:
        self.db.add(
            TransactionRecord(
                id=txn.id,
                user_id=user_id,
                date=txn.date,
                amount=txn.amount,
                type=txn.type.value,
                category=txn.category.value,
                description=txn.description,
                merchant=txn.merchant,
                location=txn.location,
                is_recurring=txn.is_recurring,
                tags=txn.tags,
                external_id=txn.external_id,
            )
        )
        self.db.flush()
        return txn

    def add_synced(self, user_id: str, transactions: List[Transaction]) -> int:
        """Insert bank transactions not already imported; returns the number inserted"""
        known = {
            row.external_id
            for row in self.db.query(TransactionRecord.external_id)
            .filter(TransactionRecord.user_id == user_id, TransactionRecord.external_id.isnot(None))
            .all()
        }
        inserted = 0
        for txn in transactions:
            if txn.external_id in known:
                continue
            self.add(user_id, txn)
            known.add(txn.external_id)
            inserted += 1
        return inserted

    def delete(self, user_id: str, transaction_id: uuid.UUID) -> None:
        record = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id, TransactionRecord.id == transaction_id)
            .first()
        )
        if not record:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        self.db.delete(record)
        self.db.flush()


def _goal_from_record(r: GoalRecord) -> Goal:
    return Goal(
        id=r.id,
        title=r.title,
        target_amount=r.target_amount,
        current_amount=r.current_amount,
        deadline=r.deadline,
        category=FinancialCategory(r.category),
        icon=r.icon,
    )


class GoalRepository:
    """Repository for savings goals"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, user_id: str, goal_id: uuid.UUID) -> GoalRecord:
        record = (
            self.db.query(GoalRecord)
            .filter(GoalRecord.user_id == user_id, GoalRecord.id == goal_id)
            .first()
        )
        if not record:
            raise NotFoundError(f"Goal {goal_id} not found")
        return record

    def list(self, user_id: str) -> List[Goal]:
        records = (
            self.db.query(GoalRecord)
            .filter(GoalRecord.user_id == user_id)
            .order_by(GoalRecord.deadline.asc())
            .all()
        )
        return [_goal_from_record(r) for r in records]

    def add(self, user_id: str, goal: Goal) -> Goal:
        self.db.add(
            GoalRecord(
                id=goal.id,
                user_id=user_id,
                title=goal.title,
                target_amount=goal.target_amount,
                current_amount=goal.current_amount,
                deadline=goal.deadline,
                category=goal.category.value,
                icon=goal.icon,
            )
        )
        self.db.flush()
        return goal

    def contribute(self, user_id: str, goal_id: uuid.UUID, amount: float) -> Goal:
        record = self._get_record(user_id, goal_id)
        record.current_amount += amount
        self.db.flush()
        return _goal_from_record(record)

    def delete(self, user_id: str, goal_id: uuid.UUID) -> None:
        self.db.delete(self._get_record(user_id, goal_id))
        self.db.flush()


def _challenge_from_record(r: ChallengeRecord) -> Challenge:
    return Challenge(
        id=r.id,
        title=r.title,
        description=r.description,
        points=r.points,
        difficulty=ChallengeDifficulty(r.difficulty),
        is_completed=r.is_completed,
        created_at=ensure_utc(r.created_at),
        end_date=ensure_utc(r.end_date),
    )


class ChallengeRepository:
    """Repository for gamified challenges"""

    def __init__(self, db: Session):
        self.db = db

    def list(self, user_id: str) -> List[Challenge]:
        records = (
            self.db.query(ChallengeRecord)
            .filter(ChallengeRecord.user_id == user_id)
            .order_by(ChallengeRecord.created_at.asc(), ChallengeRecord.points.desc())
            .all()
        )
        return [_challenge_from_record(r) for r in records]

    def add(self, user_id: str, challenge: Challenge) -> Challenge:
        self.db.add(
            ChallengeRecord(
                id=challenge.id,
                user_id=user_id,
                title=challenge.title,
                description=challenge.description,
                points=challenge.points,
                difficulty=challenge.difficulty.value,
                is_completed=challenge.is_completed,
                created_at=challenge.created_at,
                end_date=challenge.end_date,
            )
        )
        self.db.flush()
        return challenge

    def seed_if_empty(self, user_id: str, challenges: List[Challenge]) -> bool:
        """Store `challenges` only for users who have none; returns whether seeding happened"""
        exists = self.db.query(ChallengeRecord.id).filter(ChallengeRecord.user_id == user_id).first()
        if exists:
            return False
        for challenge in challenges:
            self.add(user_id, challenge)
        return True

    def _get_record(self, user_id: str, challenge_id: uuid.UUID) -> ChallengeRecord:
        record = (
            self.db.query(ChallengeRecord)
            .filter(ChallengeRecord.user_id == user_id, ChallengeRecord.id == challenge_id)
            .first()
        )
        if not record:
            raise NotFoundError(f"Challenge {challenge_id} not found")
        return record

    def toggle(self, user_id: str, challenge_id: uuid.UUID) -> Challenge:
        record = self._get_record(user_id, challenge_id)
        challenge = _challenge_from_record(record)
        challenge.toggle()
        record.is_completed = challenge.is_completed
        self.db.flush()
        return challenge

    def delete(self, user_id: str, challenge_id: uuid.UUID) -> None:
        self.db.delete(self._get_record(user_id, challenge_id))
        self.db.flush()


def _spending_category_from_record(r: SpendingCategoryRecord) -> SpendingCategory:
    return SpendingCategory(
        id=r.id,
        name=r.name,
        icon=r.icon,
        color=r.color,
        monthly_limit=r.monthly_limit,
        current_spending=r.current_spending,
    )


class BudgetRepository:
    """Repository for spending categories and their monthly limits"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, user_id: str):
        return self.db.query(SpendingCategoryRecord).filter(SpendingCategoryRecord.user_id == user_id)

    def list(self, user_id: str) -> List[SpendingCategory]:
        records = self._query(user_id).order_by(SpendingCategoryRecord.position.asc()).all()
        return [_spending_category_from_record(r) for r in records]

    def add(self, user_id: str, category: SpendingCategory) -> SpendingCategory:
        """Append a category after the user's existing ones"""
        self.db.add(
            SpendingCategoryRecord(
                id=category.id,
                user_id=user_id,
                name=category.name,
                icon=category.icon,
                color=category.color,
                monthly_limit=category.monthly_limit,
                current_spending=category.current_spending,
                position=self._query(user_id).count(),
            )
        )
        self.db.flush()
        return category

    def seed_if_empty(self, user_id: str, categories: List[SpendingCategory]) -> bool:
        if self._query(user_id).first():
            return False
        for category in categories:
            self.add(user_id, category)
        return True

    def _get_record(self, user_id: str, category_id: uuid.UUID) -> SpendingCategoryRecord:
        record = self._query(user_id).filter(SpendingCategoryRecord.id == category_id).first()
        if not record:
            raise NotFoundError(f"Spending category {category_id} not found")
        return record

    def update(
        self,
        user_id: str,
        category_id: uuid.UUID,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> SpendingCategory:
        record = self._get_record(user_id, category_id)
        if name is not None:
            record.name = name
        if icon is not None:
            record.icon = icon
        if color is not None:
            record.color = color
        self.db.flush()
        return _spending_category_from_record(record)

    def update_budget(self, user_id: str, category_id: uuid.UUID, monthly_limit: float) -> SpendingCategory:
        record = self._get_record(user_id, category_id)
        record.monthly_limit = monthly_limit
        self.db.flush()
        return _spending_category_from_record(record)

    def add_spending(self, user_id: str, category_id: uuid.UUID, amount: float) -> SpendingCategory:
        record = self._get_record(user_id, category_id)
        category = _spending_category_from_record(record)
        category.add_spending(amount)
        record.current_spending = category.current_spending
        self.db.flush()
        return category

    def reset_spending(self, user_id: str) -> List[SpendingCategory]:
        """Zero the spending of every category, e.g. at the start of a month"""
        for record in self._query(user_id).all():
            record.current_spending = 0.0
        self.db.flush()
        return self.list(user_id)

    def delete(self, user_id: str, category_id: uuid.UUID) -> None:
        self.db.delete(self._get_record(user_id, category_id))
        self.db.flush()


def _subscription_from_record(r: SubscriptionRecord) -> Subscription:
    return Subscription(
        id=r.id,
        name=r.name,
        category=SubscriptionCategory(r.category),
        monthly_amount=r.monthly_amount,
        billing_cycle=BillingCycle(r.billing_cycle),
        is_active=r.is_active,
        last_billing_date=r.last_billing_date,
        next_billing_date=r.next_billing_date,
        notes=r.notes,
        last_used=r.last_used,
    )


def _apply_subscription(record: SubscriptionRecord, sub: Subscription) -> None:
    record.name = sub.name
    record.category = sub.category.value
    record.monthly_amount = sub.monthly_amount
    record.billing_cycle = sub.billing_cycle.value
    record.is_active = sub.is_active
    record.last_billing_date = sub.last_billing_date
    record.next_billing_date = sub.next_billing_date
    record.notes = sub.notes
    record.last_used = sub.last_used


class SubscriptionRepository:
    """Repository for recurring subscriptions"""

    def __init__(self, db: Session):
        self.db = db

    def list(self, user_id: str, category: Optional[SubscriptionCategory] = None) -> List[Subscription]:
        query = self.db.query(SubscriptionRecord).filter(SubscriptionRecord.user_id == user_id)
        if category is not None:
            query = query.filter(SubscriptionRecord.category == category.value)
        return [_subscription_from_record(r) for r in query.order_by(SubscriptionRecord.name.asc()).all()]

    def add(self, user_id: str, sub: Subscription) -> Subscription:
        record = SubscriptionRecord(id=sub.id, user_id=user_id)
        _apply_subscription(record, sub)
        self.db.add(record)
        self.db.flush()
        return sub

    def _get_record(self, user_id: str, subscription_id: uuid.UUID) -> SubscriptionRecord:
        record = (
            self.db.query(SubscriptionRecord)
            .filter(SubscriptionRecord.user_id == user_id, SubscriptionRecord.id == subscription_id)
            .first()
        )
        if not record:
            raise NotFoundError(f"Subscription {subscription_id} not found")
        return record

    def update(self, user_id: str, sub: Subscription) -> Subscription:
        record = self._get_record(user_id, sub.id)
        _apply_subscription(record, sub)
        self.db.flush()
        return sub

    def delete(self, user_id: str, subscription_id: uuid.UUID) -> None:
        self.db.delete(self._get_record(user_id, subscription_id))
        self.db.flush()


def _opportunity_from_record(r: SavingOpportunityRecord) -> SavingOpportunity:
    return SavingOpportunity(
        id=r.id,
        title=r.title,
        description=r.description,
        potential_savings_amount=r.potential_savings_amount,
        category=FinancialCategory(r.category),
        timeframe=SavingsTimeframe(r.timeframe),
        difficulty=SavingsDifficulty(r.difficulty),
        is_implemented=r.is_implemented,
        date_created=ensure_utc(r.date_created),
        date_implemented=ensure_utc(r.date_implemented) if r.date_implemented else None,
    )


class SavingsRepository:
    """Repository for saving opportunities and realised savings"""

    def __init__(self, db: Session):
        self.db = db

    def list_opportunities(self, user_id: str) -> List[SavingOpportunity]:
        records = (
            self.db.query(SavingOpportunityRecord)
            .filter(SavingOpportunityRecord.user_id == user_id)
            .order_by(SavingOpportunityRecord.date_created.asc())
            .all()
        )
        return [_opportunity_from_record(r) for r in records]

    def add_opportunity(self, user_id: str, opp: SavingOpportunity) -> SavingOpportunity:
        self.db.add(
            SavingOpportunityRecord(
                id=opp.id,
                user_id=user_id,
                title=opp.title,
                description=opp.description,
                potential_savings_amount=opp.potential_savings_amount,
                category=opp.category.value,
                timeframe=opp.timeframe.value,
                difficulty=opp.difficulty.value,
                is_implemented=opp.is_implemented,
                date_created=opp.date_created,
                date_implemented=opp.date_implemented,
            )
        )
        self.db.flush()
        return opp

    def seed_if_empty(self, user_id: str, opportunities: List[SavingOpportunity]) -> bool:
        exists = (
            self.db.query(SavingOpportunityRecord.id)
            .filter(SavingOpportunityRecord.user_id == user_id)
            .first()
        )
        if exists:
            return False
        for opp in opportunities:
            self.add_opportunity(user_id, opp)
        return True

    def implement(
        self,
        user_id: str,
        opportunity_id: uuid.UUID,
        amount: Optional[float] = None,
        notes: Optional[str] = None,
        on: Optional[date] = None,
    ) -> SavingOpportunity:
        """
        Mark an opportunity implemented and record the realised saving.

        `amount` defaults to the opportunity's potential savings. An opportunity
        can only be implemented once.
        """
        record = (
            self.db.query(SavingOpportunityRecord)
            .filter(SavingOpportunityRecord.user_id == user_id, SavingOpportunityRecord.id == opportunity_id)
            .first()
        )
        if not record:
            raise NotFoundError(f"Saving opportunity {opportunity_id} not found")
        if record.is_implemented:
            raise AlreadyImplementedError(f"Saving opportunity {opportunity_id} is already implemented")

        opp = _opportunity_from_record(record)
        opp.implement()
        record.is_implemented = True
        record.date_implemented = opp.date_implemented

        self.db.add(
            ImplementedSavingRecord(
                user_id=user_id,
                opportunity_id=opp.id,
                amount=opp.potential_savings_amount if amount is None else amount,
                category=opp.category.value,
                date=on or date.today(),
                notes=notes,
            )
        )
        self.db.flush()
        return opp

    def load_tracker(self, user_id: str) -> SavingsTracker:
        tracker = SavingsTracker(opportunities=self.list_opportunities(user_id))
        records = (
            self.db.query(ImplementedSavingRecord)
            .filter(ImplementedSavingRecord.user_id == user_id)
            .order_by(ImplementedSavingRecord.date.asc())
            .all()
        )
        for r in records:
            category = FinancialCategory(r.category)
            tracker.implemented_savings.append(
                ImplementedSaving(
                    id=r.id,
                    opportunity_id=r.opportunity_id,
                    amount=r.amount,
                    date=r.date,
                    category=category,
                    notes=r.notes,
                )
            )
            tracker.add_saving(r.amount, category, on=r.date)
        return tracker


def _recommendation_from_json(r: Dict) -> Recommendation:
    return Recommendation(
        id=uuid.UUID(r["id"]),
        title=r["title"],
        description=r["description"],
        type=RecommendationType(r["type"]),
        priority=Priority(r["priority"]),
        impact=Impact(r["impact"]),
        is_implemented=r["is_implemented"],
        date_created=datetime.fromisoformat(r["date_created"]),
    )


def _score_from_snapshot(s: ScoreSnapshot) -> FinancialHealthScore:
    return FinancialHealthScore(
        overall_score=s.overall_score,
        components=[
            ScoreComponent(category=ScoreCategory(c["category"]), score=c["score"], details=c["details"])
            for c in s.components
        ],
        savings_ratio=s.savings_ratio,
        trend=s.trend,
        recommendations=[_recommendation_from_json(r) for r in s.recommendations or []],
        date=ensure_utc(s.computed_at),
    )


class ScoreRepository:
    """Repository for financial health score history"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, user_id: str, score: FinancialHealthScore) -> None:
        self.db.add(
            ScoreSnapshot(
                user_id=user_id,
                overall_score=score.overall_score,
                components=[
                    {"category": c.category.value, "score": c.score, "details": c.details}
                    for c in score.components
                ],
                savings_ratio=score.savings_ratio,
                trend=score.trend,
                recommendations=[
                    {
                        "id": str(r.id),
                        "title": r.title,
                        "description": r.description,
                        "type": r.type.value,
                        "priority": r.priority.value,
                        "impact": r.impact.value,
                        "is_implemented": r.is_implemented,
                        "date_created": r.date_created.isoformat(),
                    }
                    for r in score.recommendations
                ],
                computed_at=score.date,
            )
        )
        self.db.flush()

    def history(self, user_id: str, limit: int = 30) -> List[FinancialHealthScore]:
        """Snapshots newest first"""
        records = (
            self.db.query(ScoreSnapshot)
            .filter(ScoreSnapshot.user_id == user_id)
            .order_by(ScoreSnapshot.computed_at.desc())
            .limit(limit)
            .all()
        )
        return [_score_from_snapshot(s) for s in records]

    def latest(self, user_id: str) -> Optional[FinancialHealthScore]:
        history = self.history(user_id, limit=1)
        return history[0] if history else None


class PreferenceRepository:
    """Key/value settings store"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, user_id: str, key: str) -> Optional[Preference]:
        return (
            self.db.query(Preference)
            .filter(Preference.user_id == user_id, Preference.key == key)
            .first()
        )

    def get(self, user_id: str, key: str, default: Optional[str] = None) -> Optional[str]:
        record = self._get_record(user_id, key)
        return record.value if record else default

    def set(self, user_id: str, key: str, value: str) -> None:
        record = self._get_record(user_id, key)
        if record:
            record.value = value
        else:
            self.db.add(Preference(user_id=user_id, key=key, value=value))
        self.db.flush()

    def set_bool(self, user_id: str, key: str, value: bool) -> None:
        self.set(user_id, key, "true" if value else "false")

    def all(self, user_id: str) -> Dict[str, str]:
        """Every stored key for the user, with booleans stored as true/false strings"""
        records = self.db.query(Preference).filter(Preference.user_id == user_id).all()
        return {r.key: r.value for r in records}


class CredentialStore:
    """Secrets addressed by (service, account); saving replaces any existing secret"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, user_id: str, service: str, account: str):
        return self.db.query(Credential).filter(
            Credential.user_id == user_id,
            Credential.service == service,
            Credential.account == account,
        )

    def save(self, user_id: str, service: str, account: str, secret: str) -> None:
        self._query(user_id, service, account).delete()
        self.db.add(
            Credential(user_id=user_id, service=service, account=account, secret=secret, updated_at=utcnow())
        )
        self.db.flush()

    def read(self, user_id: str, service: str, account: str) -> Optional[str]:
        record = self._query(user_id, service, account).first()
        return record.secret if record else None

    def delete(self, user_id: str, service: str, account: str) -> bool:
        deleted = self._query(user_id, service, account).delete()
        self.db.flush()
        return deleted > 0
