"""Subscription spend analysis and optimization suggestions"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional
from fingrip_gateway.domain.models import Subscription, SubscriptionCategory


@dataclass
class OptimizationSuggestion:
    title: str
    description: str
    impact: float  # monthly amount affected
    type: str  # "cancel" | "consolidate"
    affected: List[Subscription] = field(default_factory=list)


@dataclass
class SubscriptionInsights:
    total_monthly_spend: float
    potential_savings: float
    suggestions: List[OptimizationSuggestion]


def find_unused(subscriptions: List[Subscription], today: Optional[date] = None) -> List[Subscription]:
    return [s for s in subscriptions if s.is_unused(today)]


def suggest_optimizations(
    subscriptions: List[Subscription],
    today: Optional[date] = None,
) -> List[OptimizationSuggestion]:
    """
    Suggest cancelling unused services and consolidating categories
    that have more than one subscription.
    """
    suggestions = []

    unused = find_unused(subscriptions, today)
    if unused:
        suggestions.append(
            OptimizationSuggestion(
                title="Unused Subscriptions",
                description="You haven't used these services in over 30 days",
                impact=sum(s.monthly_amount for s in unused),
                type="cancel",
                affected=unused,
            )
        )

    groups: Dict[SubscriptionCategory, List[Subscription]] = {}
    for sub in subscriptions:
        groups.setdefault(sub.category, []).append(sub)

    for category, group in groups.items():
        if len(group) > 1:
            suggestions.append(
                OptimizationSuggestion(
                    title=f"Multiple {category.value.capitalize()} Subscriptions",
                    description="Consider consolidating these services",
                    impact=sum(s.monthly_amount for s in group),
                    type="consolidate",
                    affected=group,
                )
            )

    return suggestions


def analyze_subscriptions(
    subscriptions: List[Subscription],
    today: Optional[date] = None,
) -> SubscriptionInsights:
    return SubscriptionInsights(
        total_monthly_spend=sum(s.monthly_amount for s in subscriptions),
        potential_savings=sum(s.monthly_amount for s in find_unused(subscriptions, today)),
        suggestions=suggest_optimizations(subscriptions, today),
    )
