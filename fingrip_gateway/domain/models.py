"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional

from fingrip_gateway.utils.date_utils import start_of_month


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class FinancialCategory(str, Enum):
    """Categories of financial activity shared by transactions, goals and savings"""

    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    FOOD = "food"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    HEALTHCARE = "healthcare"
    SAVINGS = "savings"
    DEBT = "debt"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    EDUCATION = "education"
    INVESTMENTS = "investments"
    SUBSCRIPTIONS = "subscriptions"
    INCOME = "income"
    SPENDING = "spending"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        if self is FinancialCategory.FOOD:
            return "Food & Dining"
        return self.value.capitalize()

    @property
    def suggested_budget_percentage(self) -> float:
        """Suggested share of monthly income for this category"""
        return SUGGESTED_BUDGET_PERCENTAGES[self]


SUGGESTED_BUDGET_PERCENTAGES: Dict[FinancialCategory, float] = {
    FinancialCategory.HOUSING: 0.30,
    FinancialCategory.TRANSPORTATION: 0.15,
    FinancialCategory.FOOD: 0.12,
    FinancialCategory.UTILITIES: 0.08,
    FinancialCategory.INSURANCE: 0.10,
    FinancialCategory.HEALTHCARE: 0.06,
    FinancialCategory.SAVINGS: 0.10,
    FinancialCategory.DEBT: 0.05,
    FinancialCategory.ENTERTAINMENT: 0.04,
    FinancialCategory.SHOPPING: 0.05,
    FinancialCategory.EDUCATION: 0.02,
    FinancialCategory.INVESTMENTS: 0.05,
    FinancialCategory.SUBSCRIPTIONS: 0.03,
    FinancialCategory.INCOME: 0.00,
    FinancialCategory.SPENDING: 0.00,
    FinancialCategory.OTHER: 0.02,
}


@dataclass
class Transaction:
    """A single income, expense or transfer"""

    date: date
    amount: float
    type: TransactionType
    category: FinancialCategory
    description: str
    merchant: Optional[str] = None
    location: Optional[str] = None
    is_recurring: bool = False
    tags: List[str] = field(default_factory=list)
    external_id: Optional[str] = None  # Tink transaction id for synced rows
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def month_year(self) -> str:
        return self.date.strftime("%B %Y")


@dataclass
class Goal:
    """A savings or investment target"""

    title: str
    target_amount: float
    deadline: date
    category: FinancialCategory
    icon: str = "target"
    current_amount: float = 0.0
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def progress(self) -> float:
        """Fraction of the target reached; not clamped, so over-funded goals exceed 1.0"""
        if self.target_amount == 0:
            return 0.0
        return self.current_amount / self.target_amount


class ChallengeDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class Challenge:
    """Gamified task awarding points on completion"""

    title: str
    description: str
    points: int
    difficulty: ChallengeDifficulty
    end_date: datetime
    is_completed: bool = False
    created_at: datetime = field(default_factory=utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def complete(self) -> None:
        self.is_completed = True

    def toggle(self) -> None:
        self.is_completed = not self.is_completed

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) <= self.end_date


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def multiplier(self) -> int:
        return {"monthly": 1, "quarterly": 3, "yearly": 12}[self.value]


class SubscriptionCategory(str, Enum):
    STREAMING = "streaming"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    SOFTWARE = "software"
    FITNESS = "fitness"
    OTHER = "other"


UNUSED_AFTER_DAYS = 30


@dataclass
class Subscription:
    """A recurring paid service"""

    name: str
    category: SubscriptionCategory
    monthly_amount: float
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    is_active: bool = True
    last_billing_date: Optional[date] = None
    next_billing_date: Optional[date] = None
    notes: Optional[str] = None
    last_used: Optional[date] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def actual_monthly_amount(self) -> float:
        return self.monthly_amount * self.billing_cycle.multiplier

    @property
    def annual_cost(self) -> float:
        return self.monthly_amount * 12

    def is_unused(self, today: Optional[date] = None) -> bool:
        """Never used, or not used in the last 30 days"""
        if self.last_used is None:
            return True
        today = today or date.today()
        return self.last_used < today - timedelta(days=UNUSED_AFTER_DAYS)


class ScoreCategory(str, Enum):
    SAVINGS = "savings"
    DEBT = "debt"
    SPENDING = "spending"
    INVESTMENTS = "investments"
    PROTECTION = "protection"

    @property
    def description(self) -> str:
        return {
            "savings": "Savings & Emergency Fund",
            "debt": "Debt Management",
            "spending": "Spending Habits",
            "investments": "Investment Strategy",
            "protection": "Financial Protection",
        }[self.value]


@dataclass
class ScoreComponent:
    category: ScoreCategory
    score: float
    details: str


class RecommendationType(str, Enum):
    SPENDING = "spending"
    SAVING = "saving"
    INVESTMENT = "investment"
    DEBT = "debt"
    BUDGETING = "budgeting"
    INCOME = "income"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Impact(str, Enum):
    SIGNIFICANT = "significant"
    MODERATE = "moderate"
    MINIMAL = "minimal"


@dataclass
class Recommendation:
    title: str
    description: str
    type: RecommendationType
    priority: Priority
    impact: Impact
    is_implemented: bool = False
    date_created: datetime = field(default_factory=utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class FinancialHealthScore:
    """Output of the financial health assessment"""

    overall_score: float
    components: List[ScoreComponent]
    savings_ratio: float = 0.0
    trend: float = 0.0
    recommendations: List[Recommendation] = field(default_factory=list)
    date: datetime = field(default_factory=utcnow)

    @property
    def category_scores(self) -> Dict[ScoreCategory, float]:
        return {c.category: c.score for c in self.components}


class SavingsDifficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class SavingsTimeframe(str, Enum):
    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


@dataclass
class SavingOpportunity:
    title: str
    description: str
    potential_savings_amount: float
    category: FinancialCategory
    timeframe: SavingsTimeframe
    difficulty: SavingsDifficulty = SavingsDifficulty.MODERATE
    is_implemented: bool = False
    date_created: datetime = field(default_factory=utcnow)
    date_implemented: Optional[datetime] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def implement(self, when: Optional[datetime] = None) -> None:
        self.is_implemented = True
        self.date_implemented = when or utcnow()


@dataclass
class ImplementedSaving:
    opportunity_id: uuid.UUID
    amount: float
    date: date
    category: FinancialCategory
    notes: Optional[str] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class MonthlyProgress:
    month: date
    amount: float = 0.0
    categories: Dict[FinancialCategory, float] = field(default_factory=dict)


@dataclass
class SavingsTracker:
    """Running totals over saving opportunities and realised savings"""

    opportunities: List[SavingOpportunity] = field(default_factory=list)
    implemented_savings: List[ImplementedSaving] = field(default_factory=list)
    monthly_progress: List[MonthlyProgress] = field(default_factory=list)
    total_saved: float = 0.0
    monthly_target: float = 500.0
    yearly_target: float = 6000.0

    @property
    def total_potential_savings(self) -> float:
        return sum(o.potential_savings_amount for o in self.opportunities)

    @property
    def total_implemented_savings(self) -> float:
        return sum(s.amount for s in self.implemented_savings)

    @property
    def savings_progress(self) -> float:
        """Implemented savings as a percentage of potential savings"""
        if self.total_potential_savings <= 0:
            return 0.0
        return self.total_implemented_savings / self.total_potential_savings * 100

    @property
    def pending_opportunities(self) -> List[SavingOpportunity]:
        return [o for o in self.opportunities if not o.is_implemented]

    @property
    def prioritized_opportunities(self) -> List[SavingOpportunity]:
        return sorted(self.opportunities, key=lambda o: o.potential_savings_amount, reverse=True)

    def add_saving(self, amount: float, category: FinancialCategory, on: Optional[date] = None) -> None:
        """Add to the running total and to the bucket for the month of `on`"""
        self.total_saved += amount
        month = start_of_month(on or date.today())

        for progress in self.monthly_progress:
            if progress.month == month:
                progress.amount += amount
                progress.categories[category] = progress.categories.get(category, 0.0) + amount
                return

        self.monthly_progress.append(MonthlyProgress(month=month, amount=amount, categories={category: amount}))

    def monthly_savings(self, on: Optional[date] = None) -> float:
        month = start_of_month(on or date.today())
        return next((p.amount for p in self.monthly_progress if p.month == month), 0.0)

    def monthly_progress_percentage(self, on: Optional[date] = None) -> float:
        if self.monthly_target <= 0:
            return 0.0
        return self.monthly_savings(on) / self.monthly_target * 100

    @property
    def yearly_progress_percentage(self) -> float:
        if self.yearly_target <= 0:
            return 0.0
        return self.total_saved / self.yearly_target * 100


@dataclass
class QuickWin:
    """Small onboarding task from the fixed catalogue"""

    key: str
    points: int
    icon: str


@dataclass
class SpendingCategory:
    """User-defined budget line with a monthly limit and the amount spent against it"""

    name: str
    icon: str
    color: str = "blue"
    monthly_limit: float = 0.0
    current_spending: float = 0.0
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def usage_percentage(self) -> float:
        """Share of the limit used, capped at 100"""
        if self.monthly_limit <= 0:
            return 0.0
        return min(self.current_spending / self.monthly_limit * 100, 100.0)

    @property
    def remaining_budget(self) -> float:
        # Negative once the limit is exceeded
        return self.monthly_limit - self.current_spending

    @property
    def is_over_budget(self) -> bool:
        return self.monthly_limit > 0 and self.current_spending > self.monthly_limit

    @property
    def budget_progress(self) -> float:
        if self.monthly_limit <= 0:
            return 0.0
        return min(self.current_spending / self.monthly_limit, 1.0)

    def add_spending(self, amount: float) -> None:
        self.current_spending += amount

    def reset_spending(self) -> None:
        self.current_spending = 0.0


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SpendingTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass
class CategoryPrediction:
    category: FinancialCategory
    amount: float
    trend: SpendingTrend


@dataclass
class BudgetPrediction:
    """Expected income and spending for a coming month"""

    month: date
    predicted_income: float
    predicted_expenses: float
    confidence_level: ConfidenceLevel
    categories: List[CategoryPrediction] = field(default_factory=list)

    @property
    def predicted_savings(self) -> float:
        return self.predicted_income - self.predicted_expenses

    @property
    def month_display(self) -> str:
        return self.month.strftime("%B %Y")

    def predicted_amount(self, category: FinancialCategory) -> float:
        return next((c.amount for c in self.categories if c.category == category), 0.0)

    @property
    def categories_by_amount(self) -> List[CategoryPrediction]:
        return sorted(self.categories, key=lambda c: c.amount, reverse=True)

    @property
    def highest_category(self) -> Optional[CategoryPrediction]:
        return max(self.categories, key=lambda c: c.amount, default=None)

    @property
    def increasing_categories(self) -> List[CategoryPrediction]:
        return [c for c in self.categories if c.trend == SpendingTrend.INCREASING]


class AccountType(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    INVESTMENT = "INVESTMENT"
    CREDIT = "CREDIT"
    LOAN = "LOAN"
    OTHER = "OTHER"


@dataclass
class TinkAccount:
    """Bank account as reported by Tink"""

    id: str
    name: str
    type: AccountType
    balance: float
    currency_code: str


@dataclass
class TinkToken:
    access_token: str
    token_type: str
    expires_in: int
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


class TinkAuthState(str, Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    AUTHENTICATED = "authenticated"


@dataclass
class FinancialFactors:
    """Aggregated cash-flow metrics used for scoring"""

    total_income: float
    total_expenses: float
    expenses_by_category: Dict[FinancialCategory, float]
    transaction_count: int

    @property
    def net_cash_flow(self) -> float:
        return self.total_income - self.total_expenses
