"""/v1/preferences and /v1/localization - user settings and translated strings"""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.dependencies import CURRENCY_KEY, LANGUAGE_KEY, ONBOARDING_KEY, get_localization
from fingrip_gateway.api.v1.schemas import (
    CurrencySchema,
    FormattedValueResponse,
    LanguageSchema,
    LocalizationOptionsResponse,
    LocalizedStringsResponse,
    PreferencesSchema,
    PreferencesUpdate,
    QuickWinSchema,
)
from fingrip_gateway.config import settings
from fingrip_gateway.domain.samples import QUICK_WINS
from fingrip_gateway.infrastructure.database.repositories import PreferenceRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.localization.manager import (
    Currency,
    Language,
    LocalizationManager,
    parse_currency,
    parse_language,
)

router = APIRouter()


def _read_preferences(prefs: PreferenceRepository, user_id: str) -> PreferencesSchema:
    stored = prefs.all(user_id)
    return PreferencesSchema(
        has_completed_onboarding=stored.get(ONBOARDING_KEY) == "true",
        language=stored.get(LANGUAGE_KEY, settings.default_language),
        currency=stored.get(CURRENCY_KEY, settings.default_currency),
    )


@router.get("/preferences", response_model=PreferencesSchema)
def get_preferences(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return _read_preferences(PreferenceRepository(db), user_id)


@router.put("/preferences", response_model=PreferencesSchema)
def update_preferences(
    body: PreferencesUpdate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Partial update; unsupported language or currency codes are rejected"""
    prefs = PreferenceRepository(db)
    if body.language is not None:
        prefs.set(user_id, LANGUAGE_KEY, parse_language(body.language).value)
    if body.currency is not None:
        prefs.set(user_id, CURRENCY_KEY, parse_currency(body.currency).value)
    if body.has_completed_onboarding is not None:
        prefs.set_bool(user_id, ONBOARDING_KEY, body.has_completed_onboarding)
    db.commit()
    return _read_preferences(prefs, user_id)


@router.get("/localization/options", response_model=LocalizationOptionsResponse)
def localization_options():
    return LocalizationOptionsResponse(
        languages=[LanguageSchema(code=lang.value, display_name=lang.display_name) for lang in Language],
        currencies=[CurrencySchema(code=cur.value, symbol=cur.symbol) for cur in Currency],
    )


@router.get("/localization/strings", response_model=LocalizedStringsResponse)
def localized_strings(l10n: LocalizationManager = Depends(get_localization)):
    return LocalizedStringsResponse(language=l10n.language.value, strings=l10n.strings())


@router.get("/localization/currency", response_model=FormattedValueResponse)
def format_currency(amount: float, l10n: LocalizationManager = Depends(get_localization)):
    return FormattedValueResponse(value=amount, formatted=l10n.format_currency(amount))


@router.get("/localization/percent", response_model=FormattedValueResponse)
def format_percent(value: float, l10n: LocalizationManager = Depends(get_localization)):
    return FormattedValueResponse(value=value, formatted=l10n.format_percent(value))


@router.get("/quick-wins", response_model=List[QuickWinSchema])
def quick_wins(l10n: LocalizationManager = Depends(get_localization)):
    return [
        QuickWinSchema(
            key=win.key,
            title=l10n.localized_string(f"quickwin.{win.key}.title"),
            description=l10n.localized_string(f"quickwin.{win.key}.description"),
            points=win.points,
            icon=win.icon,
        )
        for win in QUICK_WINS
    ]
