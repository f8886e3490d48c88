"""Tests for clubportal.core.i18n and the error -> message key mapping."""

import pytest

from clubportal.core.errors import (
    ClubNameRequiredError,
    EmailExistsError,
    InvalidCredentialsError,
    PasswordTooShortError,
    SiteBuildError,
    ValidationError,
    error_message_key,
)
from clubportal.core.i18n import TRANSLATIONS, Translator


class TestTranslator:
    def test_default_locale_is_german(self):
        t = Translator()
        assert t.app_name() == "Mein Club"
        assert t.weekday(1) == "Montag"
        assert t.weekday(7) == "Sonntag"

    def test_requested_locale(self):
        assert Translator().text("weekday.3", "en") == "Wednesday"

    def test_falls_back_to_default_locale(self):
        t = Translator({"de": {"greeting": "Hallo"}, "en": {}})
        assert t.text("greeting", "en") == "Hallo"
        assert t.text("greeting", "fr") == "Hallo"

    def test_unknown_key_returns_key(self):
        assert Translator().text("no.such.key") == "no.such.key"

    @pytest.mark.parametrize("day", [0, 8, -1])
    def test_weekday_out_of_range(self, day):
        assert Translator().weekday(day) == ""

    def test_locales_cover_same_keys(self):
        assert set(TRANSLATIONS["de"]) == set(TRANSLATIONS["en"])


class TestErrorMessageKeys:
    @pytest.mark.parametrize(
        "exc, key",
        [
            (EmailExistsError("a@example.com"), "error.email_exists"),
            (PasswordTooShortError(8), "error.password_too_short"),
            (ClubNameRequiredError("x"), "error.name_required"),
            (InvalidCredentialsError("x"), "error.login_failed"),
            (ValidationError("x"), "error.invalid_input"),
            (SiteBuildError("x"), "error.save_failed"),
            (RuntimeError("x"), "error.save_failed"),
        ],
    )
    def test_mapping(self, exc, key):
        assert error_message_key(exc) == key

    def test_every_key_is_translated(self):
        t = Translator()
        for exc in (EmailExistsError("a"), PasswordTooShortError(8), RuntimeError("x")):
            key = error_message_key(exc)
            assert t.text(key) != key
