"""
Centralized error types and their user-facing messages.

Services raise these; routes turn them into form errors via error_message_key() so
handlers stay thin and new error types are easy to add.
"""
from __future__ import annotations


class ClubPortalError(Exception):
    """Base for all errors raised by clubportal services."""


# ---------------------------------------------------------------------------
# Validation: rejected synchronously, never reach the build queue
# ---------------------------------------------------------------------------

class ValidationError(ClubPortalError):
    pass


class EmailRequiredError(ValidationError):
    pass


class EmailExistsError(ValidationError):
    pass


class PasswordTooShortError(ValidationError):
    def __init__(self, min_length: int):
        super().__init__(f"password must be at least {min_length} characters")
        self.min_length = min_length


class ClubNameRequiredError(ValidationError):
    pass


class InvalidCredentialsError(ClubPortalError):
    pass


class ClubNotFoundError(ClubPortalError):
    def __init__(self, club_id: str):
        super().__init__(f"club {club_id!r} not found")
        self.club_id = club_id


# ---------------------------------------------------------------------------
# Build queue and site build
# ---------------------------------------------------------------------------

class BuildTaskNotFoundError(ClubPortalError):
    def __init__(self, task_id: str):
        super().__init__(f"build task {task_id!r} not found")
        self.task_id = task_id


class SiteBuildError(ClubPortalError):
    """Template, render, write or copy failure while generating the static site."""


# ---------------------------------------------------------------------------
# Web
# ---------------------------------------------------------------------------

class LoginRequired(ClubPortalError):
    """Raised by the auth dependency; the app answers with a redirect to /login."""


# Message keys (see core.i18n). First match wins, so subclasses go before their bases.
ERROR_MESSAGE_KEYS: list[tuple[type[Exception], str]] = [
    (EmailRequiredError, "error.email_required"),
    (EmailExistsError, "error.email_exists"),
    (PasswordTooShortError, "error.password_too_short"),
    (ClubNameRequiredError, "error.name_required"),
    (InvalidCredentialsError, "error.login_failed"),
    (ValidationError, "error.invalid_input"),
]

DEFAULT_ERROR_MESSAGE_KEY = "error.save_failed"


def error_message_key(exc: Exception) -> str:
    """Map a service exception to the translation key shown in the form."""
    for exc_type, key in ERROR_MESSAGE_KEYS:
        if isinstance(exc, exc_type):
            return key
    return DEFAULT_ERROR_MESSAGE_KEY
