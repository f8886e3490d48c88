"""Login, registration and logout (session cookie)."""
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from clubportal.api.deps import clear_session_cookie, get_settings, get_translator, set_session_cookie
from clubportal.api.templating import render
from clubportal.core.errors import InvalidCredentialsError, ValidationError, error_message_key
from clubportal.db.session import get_db
from clubportal.services.user_service import authenticate, create_user

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    t = get_translator(request)
    try:
        user = authenticate(db, email, password)
    except InvalidCredentialsError as e:
        context = {"title": t.text("title.login"), "email": email.strip(), "error": t.text(error_message_key(e))}
        return render(request, "login.html", context, status_code=401)
    response = RedirectResponse("/admin", status_code=303)
    set_session_cookie(response, user.id, get_settings(request))
    return response


@router.post("/register")
def register(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    t = get_translator(request)
    cfg = get_settings(request)
    try:
        user = create_user(db, email, password, min_length=cfg.password_min_length)
    except ValidationError as e:
        context = {"title": t.text("title.register"), "email": email.strip(), "error": t.text(error_message_key(e))}
        return render(request, "register.html", context, status_code=400)
    response = RedirectResponse("/admin", status_code=303)
    set_session_cookie(response, user.id, cfg)
    return response


@router.post("/logout")
def logout(request: Request):
    response = RedirectResponse("/", status_code=303)
    clear_session_cookie(response, get_settings(request))
    return response
