"""SQLAlchemy ORM models for per-user finance data"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, Text, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class TransactionRecord(Base):
    """Manually entered or Tink-synced transaction"""

    __tablename__ = "ledger_transaction"
    __table_args__ = (UniqueConstraint("user_id", "external_id", name="uq_transaction_external"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    type = Column(String(16), nullable=False)
    category = Column(String(32), nullable=False)
    description = Column(Text, nullable=False, default="")
    merchant = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)
    external_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class GoalRecord(Base):
    __tablename__ = "goal"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    deadline = Column(Date, nullable=False)
    category = Column(String(32), nullable=False)
    icon = Column(Text, nullable=False, default="target")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ChallengeRecord(Base):
    __tablename__ = "challenge"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    points = Column(Integer, nullable=False)
    difficulty = Column(String(16), nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class SpendingCategoryRecord(Base):
    __tablename__ = "spending_category"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    icon = Column(Text, nullable=False)
    color = Column(String(16), nullable=False, default="blue")
    monthly_limit = Column(Float, nullable=False, default=0.0)
    current_spending = Column(Float, nullable=False, default=0.0)
    position = Column(Integer, nullable=False, default=0)


class SubscriptionRecord(Base):
    __tablename__ = "subscription"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    category = Column(String(32), nullable=False)
    monthly_amount = Column(Float, nullable=False)
    billing_cycle = Column(String(16), nullable=False, default="monthly")
    is_active = Column(Boolean, nullable=False, default=True)
    last_billing_date = Column(Date, nullable=True)
    next_billing_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    last_used = Column(Date, nullable=True)


class SavingOpportunityRecord(Base):
    __tablename__ = "saving_opportunity"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    potential_savings_amount = Column(Float, nullable=False)
    category = Column(String(32), nullable=False)
    timeframe = Column(String(16), nullable=False)
    difficulty = Column(String(16), nullable=False)
    is_implemented = Column(Boolean, nullable=False, default=False)
    date_created = Column(DateTime(timezone=True), nullable=False)
    date_implemented = Column(DateTime(timezone=True), nullable=True)


class ImplementedSavingRecord(Base):
    __tablename__ = "implemented_saving"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    opportunity_id = Column(Uuid, nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(String(32), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)


class ScoreSnapshot(Base):
    """Financial health score as computed at a point in time"""

    __tablename__ = "score_snapshot"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    overall_score = Column(Float, nullable=False)
    components = Column(JSON, nullable=False)
    savings_ratio = Column(Float, nullable=False, default=0.0)
    trend = Column(Float, nullable=False, default=0.0)
    recommendations = Column(JSON, nullable=False, default=list)
    computed_at = Column(DateTime(timezone=True), nullable=False)


class Preference(Base):
    """Key/value user settings (onboarding flag, language, currency)"""

    __tablename__ = "preference"
    __table_args__ = (UniqueConstraint("user_id", "key", name="uq_preference_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    key = Column(Text, nullable=False)
    value = Column(Text, nullable=False)


class Credential(Base):
    """Secret stored under a fixed service/account pair"""

    __tablename__ = "credential"
    __table_args__ = (UniqueConstraint("user_id", "service", "account", name="uq_credential_slot"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    service = Column(Text, nullable=False)
    account = Column(Text, nullable=False)
    secret = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
