"""Unit tests for string lookup and value formatting"""

import json
import pytest
from fingrip_gateway.domain.exceptions import InvalidPreferenceError
from fingrip_gateway.localization.manager import (
    Currency,
    Language,
    LocalizationManager,
    parse_currency,
    parse_language,
)


def test_selected_language_wins():
    l10n = LocalizationManager(Language.POLISH)
    assert l10n.localized_string("button.next") == "Dalej"
    assert l10n.localized_string("quickwin.emergency_fund.title") == "Utwórz fundusz awaryjny"


def test_falls_back_to_english(tmp_path):
    (tmp_path / "en.json").write_text(json.dumps({"hello": "Hello", "bye": "Bye"}), encoding="utf-8")
    (tmp_path / "pl.json").write_text(json.dumps({"hello": "Cześć"}), encoding="utf-8")
    l10n = LocalizationManager(Language.POLISH, locales_dir=tmp_path)
    assert l10n.localized_string("hello") == "Cześć"
    assert l10n.localized_string("bye") == "Bye"


def test_polish_table_is_complete():
    english = LocalizationManager(Language.ENGLISH).table
    polish = LocalizationManager(Language.POLISH).table
    assert set(english) <= set(polish)
    assert polish["onboarding.score.description"] == "Na podstawie Twoich dochodów, wydatków i oszczędności"


def test_unknown_key_returns_key():
    l10n = LocalizationManager(Language.ENGLISH)
    assert l10n.localized_string("no.such.key") == "no.such.key"


def test_merged_strings_cover_english_keys():
    strings = LocalizationManager(Language.POLISH).strings()
    assert strings["button.next"] == "Dalej"
    assert "onboarding.score.description" in strings


def test_localized_format():
    assert LocalizationManager(Language.ENGLISH).localized_format("transactions.count", 3) == "3 transactions"
    assert LocalizationManager(Language.POLISH).localized_format("transactions.count", 5) == "5 transakcji"


def test_missing_table_falls_back(tmp_path):
    (tmp_path / "en.json").write_text(json.dumps({"hello": "Hello"}), encoding="utf-8")
    l10n = LocalizationManager(Language.POLISH, locales_dir=tmp_path)
    assert l10n.localized_string("hello") == "Hello"


@pytest.mark.parametrize(
    "currency,amount,expected",
    [
        (Currency.EUR, 1234.5, "€1,234.50"),
        (Currency.PLN, 99.999, "zł100.00"),
        (Currency.USD, -42.1, "-$42.10"),
        (Currency.GBP, 0, "£0.00"),
    ],
)
def test_format_currency(currency, amount, expected):
    assert LocalizationManager(currency=currency).format_currency(amount) == expected


def test_tiny_negative_does_not_show_sign():
    assert LocalizationManager(currency=Currency.EUR).format_currency(-0.001) == "€0.00"


def test_format_percent():
    l10n = LocalizationManager()
    assert l10n.format_percent(12.345) == "12.3%"
    assert l10n.format_percent(100) == "100.0%"


def test_parse_codes():
    assert parse_language("pl") is Language.POLISH
    assert parse_currency("pln") is Currency.PLN
    with pytest.raises(InvalidPreferenceError):
        parse_language("de")
    with pytest.raises(InvalidPreferenceError):
        parse_currency("JPY")
