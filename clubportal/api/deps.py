"""
Request-scoped dependencies: settings, translator, session cookie and the logged-in user.
"""
from fastapi import Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from clubportal.auth.session import create_session_token, decode_session_token
from clubportal.config import Settings
from clubportal.core.constants import SESSION_COOKIE_NAME
from clubportal.core.errors import LoginRequired
from clubportal.core.i18n import Translator
from clubportal.db.session import get_db
from clubportal.models.user import User
from clubportal.services.user_service import get_user


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_translator(request: Request) -> Translator:
    return request.app.state.translator


def current_user_id(request: Request) -> str | None:
    cfg = get_settings(request)
    return decode_session_token(request.cookies.get(SESSION_COOKIE_NAME), cfg.secret_key)


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    user_id = current_user_id(request)
    user = get_user(db, user_id) if user_id else None
    if user is None:
        raise LoginRequired()
    return user


def set_session_cookie(response: Response, user_id: str, cfg: Settings) -> None:
    token = create_session_token(user_id, cfg.secret_key, cfg.session_ttl)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=int(cfg.session_ttl.total_seconds()),
        path="/",
        httponly=True,
        samesite="lax",
        secure=cfg.cookie_secure,
    )


def clear_session_cookie(response: Response, cfg: Settings) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/", httponly=True, samesite="lax", secure=cfg.cookie_secure)
