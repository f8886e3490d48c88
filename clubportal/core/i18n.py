"""
Label lookup: locale -> key -> text.

A Translator is built from settings and handed to whoever renders text (web app, site
builder). Lookup order: requested locale, then the default locale, then the key itself.
"""
from typing import Mapping

DEFAULT_LOCALE = "de"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "de": {
        "app.name": "Mein Club",
        "weekday.1": "Montag",
        "weekday.2": "Dienstag",
        "weekday.3": "Mittwoch",
        "weekday.4": "Donnerstag",
        "weekday.5": "Freitag",
        "weekday.6": "Samstag",
        "weekday.7": "Sonntag",
        "schedule.by_arrangement": "nach Vereinbarung",
        "title.home": "Start",
        "title.login": "Login",
        "title.register": "Registrieren",
        "title.dashboard": "Dashboard",
        "error.login_failed": "Login fehlgeschlagen. Bitte pruefe deine Daten.",
        "error.email_required": "Bitte eine E-Mail-Adresse angeben.",
        "error.email_exists": "Diese E-Mail ist bereits registriert.",
        "error.password_too_short": "Passwort ist zu kurz.",
        "error.name_required": "Bitte einen Clubnamen angeben.",
        "error.invalid_input": "Bitte pruefe deine Eingaben.",
        "error.save_failed": "Speichern fehlgeschlagen.",
        "error.build_request_failed": "Aktualisierung konnte nicht angefordert werden.",
        "info.saved": "Club gespeichert.",
        "info.build_requested": "Die Website wird in Kuerze aktualisiert.",
        "build.status.idle": "Website ist aktuell.",
        "build.status.pending": "Aktualisierung geplant.",
        "build.status.running": "Website wird gerade erstellt.",
        "build.status.unknown": "Noch keine Website erstellt.",
    },
    "en": {
        "app.name": "My Club",
        "weekday.1": "Monday",
        "weekday.2": "Tuesday",
        "weekday.3": "Wednesday",
        "weekday.4": "Thursday",
        "weekday.5": "Friday",
        "weekday.6": "Saturday",
        "weekday.7": "Sunday",
        "schedule.by_arrangement": "by arrangement",
        "title.home": "Home",
        "title.login": "Login",
        "title.register": "Sign up",
        "title.dashboard": "Dashboard",
        "error.login_failed": "Login failed. Please check your details.",
        "error.email_required": "Please enter an email address.",
        "error.email_exists": "This email is already registered.",
        "error.password_too_short": "Password is too short.",
        "error.name_required": "Please enter a club name.",
        "error.invalid_input": "Please check your input.",
        "error.save_failed": "Saving failed.",
        "error.build_request_failed": "Could not request a website update.",
        "info.saved": "Club saved.",
        "info.build_requested": "The website will be updated shortly.",
        "build.status.idle": "Website is up to date.",
        "build.status.pending": "Update scheduled.",
        "build.status.running": "Website is being built.",
        "build.status.unknown": "No website built yet.",
    },
}


class Translator:
    def __init__(self, translations: Mapping[str, Mapping[str, str]] | None = None, default_locale: str = DEFAULT_LOCALE):
        self.translations = translations if translations is not None else TRANSLATIONS
        self.default_locale = default_locale

    def text(self, key: str, locale: str | None = None) -> str:
        for loc in (locale or self.default_locale, self.default_locale):
            value = self.translations.get(loc, {}).get(key)
            if value:
                return value
        return key

    def weekday(self, day: int, locale: str | None = None) -> str:
        """Label for weekday 1 (Monday) .. 7 (Sunday); empty for anything else."""
        if not 1 <= day <= 7:
            return ""
        return self.text(f"weekday.{day}", locale)

    def app_name(self, locale: str | None = None) -> str:
        return self.text("app.name", locale)
