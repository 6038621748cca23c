"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session
from fingrip_gateway.config import settings
from fingrip_gateway.infrastructure.clients.tink import TinkClient
from fingrip_gateway.infrastructure.database.repositories import PreferenceRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.localization.manager import LocalizationManager, parse_currency, parse_language

LANGUAGE_KEY = "selectedLanguage"
CURRENCY_KEY = "selectedCurrency"
ONBOARDING_KEY = "hasCompletedOnboarding"


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_tink_client() -> TinkClient:
    """Provide Tink API client instance"""
    return TinkClient()


def get_localization(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
) -> LocalizationManager:
    """Localization manager bound to the user's saved language and currency"""
    prefs = PreferenceRepository(db)
    return LocalizationManager(
        language=parse_language(prefs.get(user_id, LANGUAGE_KEY, settings.default_language)),
        currency=parse_currency(prefs.get(user_id, CURRENCY_KEY, settings.default_currency)),
    )
