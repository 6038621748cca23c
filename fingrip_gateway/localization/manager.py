"""String lookup and currency formatting for the supported languages"""

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from fingrip_gateway.domain.exceptions import InvalidPreferenceError

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent / "locales"
BASE_LANGUAGE = "en"


class Language(str, Enum):
    ENGLISH = "en"
    POLISH = "pl"

    @property
    def display_name(self) -> str:
        return {"en": "English", "pl": "Polski"}[self.value]


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    PLN = "PLN"

    @property
    def symbol(self) -> str:
        return {"USD": "$", "EUR": "€", "GBP": "£", "PLN": "zł"}[self.value]


@lru_cache(maxsize=None)
def load_table(language: str, locales_dir: Path = LOCALES_DIR) -> Dict[str, str]:
    """Read `<language>.json`; a missing file yields an empty table"""
    path = locales_dir / f"{language}.json"
    if not path.exists():
        logger.warning("Localization table not found", extra={"language": language, "path": str(path)})
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


def parse_language(code: str) -> Language:
    try:
        return Language(code)
    except ValueError as e:
        raise InvalidPreferenceError(f"Unsupported language: {code}") from e


def parse_currency(code: str) -> Currency:
    try:
        return Currency(code.upper())
    except ValueError as e:
        raise InvalidPreferenceError(f"Unsupported currency: {code}") from e


class LocalizationManager:
    """Resolves keys against the selected language, then English, then the key itself"""

    def __init__(
        self,
        language: Language = Language.ENGLISH,
        currency: Currency = Currency.EUR,
        locales_dir: Optional[Path] = None,
    ):
        self.language = language
        self.currency = currency
        self.locales_dir = locales_dir or LOCALES_DIR

    @property
    def table(self) -> Dict[str, str]:
        return load_table(self.language.value, self.locales_dir)

    def strings(self) -> Dict[str, str]:
        """Full table for the selected language with English filling the gaps"""
        merged = dict(load_table(BASE_LANGUAGE, self.locales_dir))
        merged.update(self.table)
        return merged

    def localized_string(self, key: str) -> str:
        value = self.table.get(key)
        if value is not None:
            return value

        value = load_table(BASE_LANGUAGE, self.locales_dir).get(key)
        if value is not None:
            return value

        logger.warning("No translation found", extra={"key": key, "language": self.language.value})
        return key

    def localized_format(self, key: str, *args: object) -> str:
        return self.localized_string(key) % args if args else self.localized_string(key)

    def format_currency(self, amount: float) -> str:
        """Symbol-prefixed amount rounded to two decimals, e.g. "-€1,234.50" """
        sign = "-" if round(amount, 2) < 0 else ""
        return f"{sign}{self.currency.symbol}{abs(amount):,.2f}"

    def format_percent(self, value: float) -> str:
        """`value` is already a percentage: 12.345 -> "12.3%" """
        return f"{value:.1f}%"
