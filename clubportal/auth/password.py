"""
Password hashing and verification (bcrypt via passlib).
"""
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a malformed hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False
