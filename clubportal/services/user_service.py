"""
Club administrators: registration and login.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubportal.auth.password import hash_password, verify_password
from clubportal.core.errors import (
    EmailExistsError,
    EmailRequiredError,
    InvalidCredentialsError,
    PasswordTooShortError,
)
from clubportal.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_user(db: Session, user_id: str) -> User | None:
    if not user_id:
        return None
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(db: Session, email: str, password: str, min_length: int = DEFAULT_MIN_PASSWORD_LENGTH) -> User:
    """Register a new administrator. Raises a ValidationError subclass on bad input."""
    clean_email = normalize_email(email)
    if not clean_email:
        raise EmailRequiredError("email is required")
    if min_length <= 0:
        min_length = DEFAULT_MIN_PASSWORD_LENGTH
    if len(password or "") < min_length:
        raise PasswordTooShortError(min_length)
    if get_user_by_email(db, clean_email) is not None:
        raise EmailExistsError(clean_email)

    user = User(email=clean_email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # another request registered the same email between the check and the insert
        db.rollback()
        raise EmailExistsError(clean_email) from e
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials; unknown email and wrong password look the same."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password or "", user.password_hash):
        raise InvalidCredentialsError("invalid credentials")
    return user
