"""
Session tokens: signed JWT carried in the club_portal_session cookie.

Stateless, so the web process can restart without logging everyone out. Logout clears the cookie.
"""
from datetime import datetime, timedelta, timezone

import jwt

from clubportal.core.constants import SESSION_ALGORITHM


def create_session_token(user_id: str, secret_key: str, ttl: timedelta, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": issued,
        "exp": issued + ttl,
    }
    return jwt.encode(payload, secret_key, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str | None, secret_key: str) -> str | None:
    """User id from a valid, unexpired token; None otherwise."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, secret_key, algorithms=[SESSION_ALGORITHM])
    except jwt.PyJWTError:
        return None
    user_id = payload.get("sub")
    return user_id if isinstance(user_id, str) and user_id else None
