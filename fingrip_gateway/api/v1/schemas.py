"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from fingrip_gateway.domain.models import (
    AccountType,
    BillingCycle,
    ChallengeDifficulty,
    ConfidenceLevel,
    FinancialCategory,
    Impact,
    Priority,
    RecommendationType,
    SavingsDifficulty,
    SavingsTimeframe,
    ScoreCategory,
    SpendingTrend,
    SubscriptionCategory,
    TinkAuthState,
    TransactionType,
)


# Transactions

class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    date: date
    amount: float = Field(..., description="Amount; negative values are accepted as entered")
    type: TransactionType
    category: FinancialCategory
    description: str = ""
    merchant: Optional[str] = None
    location: Optional[str] = None
    is_recurring: bool = False
    tags: List[str] = Field(default_factory=list)


class TransactionSchema(TransactionCreate):
    id: UUID
    month_year: str
    formatted_amount: str
    external_id: Optional[str] = None


class TransactionListResponse(BaseModel):
    user_id: str
    transactions: List[TransactionSchema]


class TransactionSummaryResponse(BaseModel):
    user_id: str
    income: float
    expenses: float
    balance: float
    formatted_balance: str
    expenses_by_category: Dict[FinancialCategory, float]
    transaction_count: int


# Goals

class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1)
    target_amount: float
    current_amount: float = 0.0
    deadline: date
    category: FinancialCategory
    icon: str = "target"


class GoalContribution(BaseModel):
    amount: float


class GoalSchema(GoalCreate):
    id: UUID
    progress: float


# Challenges

class ChallengeCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    points: int = Field(..., ge=0)
    difficulty: ChallengeDifficulty
    end_date: datetime


class ChallengeSchema(ChallengeCreate):
    id: UUID
    is_completed: bool
    is_active: bool
    created_at: datetime


# Budgets

class SpendingCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str = Field(..., min_length=1)
    color: str = "blue"
    monthly_limit: float = Field(0.0, ge=0)


class SpendingCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = None


class BudgetLimitUpdate(BaseModel):
    monthly_limit: float = Field(..., ge=0)


class SpendingUpdate(BaseModel):
    amount: float


class SpendingCategorySchema(SpendingCategoryCreate):
    id: UUID
    current_spending: float
    usage_percentage: float
    remaining_budget: float
    budget_progress: float
    is_over_budget: bool


class BudgetOverviewResponse(BaseModel):
    user_id: str
    categories: List[SpendingCategorySchema]
    total_limit: float
    total_spending: float
    over_budget_count: int


class CategoryPredictionSchema(BaseModel):
    category: FinancialCategory
    amount: float
    trend: SpendingTrend


class BudgetPredictionResponse(BaseModel):
    user_id: str
    month: date
    month_display: str
    predicted_income: float
    predicted_expenses: float
    predicted_savings: float
    formatted_predicted_savings: str
    confidence_level: ConfidenceLevel
    categories: List[CategoryPredictionSchema]


# Subscriptions

class SubscriptionCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: SubscriptionCategory
    monthly_amount: float
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    is_active: bool = True
    last_billing_date: Optional[date] = None
    next_billing_date: Optional[date] = None
    notes: Optional[str] = None
    last_used: Optional[date] = None


class SubscriptionSchema(SubscriptionCreate):
    id: UUID
    actual_monthly_amount: float
    annual_cost: float
    is_unused: bool


class OptimizationSuggestionSchema(BaseModel):
    title: str
    description: str
    impact: float
    type: str
    subscription_ids: List[UUID]


class SubscriptionInsightsResponse(BaseModel):
    user_id: str
    total_monthly_spend: float
    potential_savings: float
    formatted_potential_savings: str
    suggestions: List[OptimizationSuggestionSchema]


# Savings

class SavingOpportunityCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    potential_savings_amount: float
    category: FinancialCategory
    timeframe: SavingsTimeframe
    difficulty: SavingsDifficulty = SavingsDifficulty.MODERATE


class SavingOpportunitySchema(SavingOpportunityCreate):
    id: UUID
    is_implemented: bool
    date_created: datetime
    date_implemented: Optional[datetime] = None


class ImplementSavingRequest(BaseModel):
    amount: Optional[float] = Field(None, description="Realised amount; defaults to the potential savings")
    notes: Optional[str] = None


class SavingsTrackerResponse(BaseModel):
    user_id: str
    total_saved: float
    total_potential_savings: float
    total_implemented_savings: float
    savings_progress: float
    monthly_savings: float
    monthly_progress_percentage: float
    yearly_progress_percentage: float
    monthly_target: float
    yearly_target: float
    pending_opportunities: List[SavingOpportunitySchema]


# Score

class ScoreComponentSchema(BaseModel):
    category: ScoreCategory
    description: str
    score: float
    details: str


class RecommendationSchema(BaseModel):
    id: UUID
    title: str
    description: str
    type: RecommendationType
    priority: Priority
    impact: Impact


class ScoreResponse(BaseModel):
    user_id: str
    overall_score: float
    description: str
    components: List[ScoreComponentSchema]
    category_scores: Dict[ScoreCategory, float]
    savings_ratio: float
    trend: float
    recommendations: List[RecommendationSchema]
    computed_at: datetime


class ScoreHistoryItem(BaseModel):
    overall_score: float
    trend: float
    recommendations: List[RecommendationSchema] = []
    computed_at: datetime


class ScoreHistoryResponse(BaseModel):
    user_id: str
    history: List[ScoreHistoryItem]


# Bank

class AuthorizationUrlResponse(BaseModel):
    url: str


class BankCallbackRequest(BaseModel):
    """Either the full redirect URL or the bare code"""

    callback_url: Optional[str] = None
    code: Optional[str] = None


class BankStatusResponse(BaseModel):
    user_id: str
    state: TinkAuthState


class TinkAccountSchema(BaseModel):
    id: str
    name: str
    type: AccountType
    balance: float
    currency_code: str


class AccountsResponse(BaseModel):
    user_id: str
    accounts: List[TinkAccountSchema]


class BankUserResponse(BaseModel):
    """Tink user record as returned by the Tink API"""

    user_id: str
    tink_user_id: Optional[str] = None
    profile: Dict[str, Any]


class SyncResponse(BaseModel):
    user_id: str
    fetched: int
    imported: int


# Preferences & localization

class PreferencesSchema(BaseModel):
    has_completed_onboarding: bool
    language: str
    currency: str


class PreferencesUpdate(BaseModel):
    has_completed_onboarding: Optional[bool] = None
    language: Optional[str] = None
    currency: Optional[str] = None


class LanguageSchema(BaseModel):
    code: str
    display_name: str


class CurrencySchema(BaseModel):
    code: str
    symbol: str


class LocalizationOptionsResponse(BaseModel):
    languages: List[LanguageSchema]
    currencies: List[CurrencySchema]


class LocalizedStringsResponse(BaseModel):
    language: str
    strings: Dict[str, str]


class FormattedValueResponse(BaseModel):
    value: float
    formatted: str


class QuickWinSchema(BaseModel):
    key: str
    title: str
    description: str
    points: int
    icon: str
