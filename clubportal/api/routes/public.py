"""Public pages: club listing, login/register forms, health."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from clubportal.api.deps import current_user_id, get_translator
from clubportal.api.templating import render
from clubportal.api.view_models import home_data
from clubportal.db.session import get_db
from clubportal.services.club_service import all_clubs

router = APIRouter()


@router.get("/")
def home(request: Request, city: str = "", category: str = "", q: str = "", db: Session = Depends(get_db)):
    data = home_data(all_clubs(db), get_translator(request), city=city, category=category, query=q)
    return render(request, "home.html", data)


@router.get("/login")
def login_form(request: Request, email: str = ""):
    if current_user_id(request):
        return RedirectResponse("/admin", status_code=303)
    t = get_translator(request)
    return render(request, "login.html", {"title": t.text("title.login"), "email": email, "error": ""})


@router.get("/register")
def register_form(request: Request, email: str = ""):
    if current_user_id(request):
        return RedirectResponse("/admin", status_code=303)
    t = get_translator(request)
    return render(request, "register.html", {"title": t.text("title.register"), "email": email, "error": ""})


@router.get("/health")
def health():
    return {"status": "ok"}
