"""
Admin dashboard: edit the club profile and request site rebuilds.

Saving persists the club, its opening hours and its courses in one transaction, then asks
the build queue for a debounced rebuild. The enqueue is best-effort: a failure is logged and
the nightly build catches up, the admin still sees "saved".
"""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from clubportal.api.deps import get_settings, get_translator, require_user
from clubportal.api.forms import club_update_from_form, courses_from_form, opening_hours_from_form
from clubportal.api.templating import render
from clubportal.api.view_models import dashboard_data
from clubportal.core.errors import ValidationError, error_message_key
from clubportal.db.session import get_db
from clubportal.models.user import User
from clubportal.services.build_queue import enqueue_build_task, get_build_task
from clubportal.services.club_service import get_club_by_owner, save_club_profile

router = APIRouter(prefix="/admin")
logger = logging.getLogger(__name__)


async def read_form(request: Request) -> FormData:
    return await request.form()


def _build_task_or_none(db: Session):
    try:
        return get_build_task(db)
    except SQLAlchemyError:
        logger.warning("could not read build task status", exc_info=True)
        db.rollback()
        return None


@router.get("")
def dashboard(
    request: Request,
    saved: int = 0,
    build: int = 0,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    t = get_translator(request)
    info = ""
    if saved:
        info = t.text("info.saved")
    elif build:
        info = t.text("info.build_requested")
    club = get_club_by_owner(db, user.id)
    return render(request, "dashboard.html", dashboard_data(club, t, build_task=_build_task_or_none(db), info=info))


@router.post("/club")
def update_club(
    request: Request,
    form: FormData = Depends(read_form),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    t = get_translator(request)
    update = club_update_from_form(form)
    opening_hours = opening_hours_from_form(form)
    courses = courses_from_form(form)
    try:
        save_club_profile(db, user.id, update, opening_hours=opening_hours, courses=courses)
    except ValidationError as e:
        context = dashboard_data(update, t, opening_hours, courses, _build_task_or_none(db), error=t.text(error_message_key(e)))
        return render(request, "dashboard.html", context, status_code=400)
    except SQLAlchemyError as e:
        logger.exception("saving club for user %s failed", user.id)
        context = dashboard_data(update, t, opening_hours, courses, _build_task_or_none(db), error=t.text(error_message_key(e)))
        return render(request, "dashboard.html", context, status_code=500)

    try:
        enqueue_build_task(db, get_settings(request).build_debounce)
    except SQLAlchemyError as e:
        logger.warning("failed to enqueue site build after save: %s", e)
    return RedirectResponse("/admin?saved=1", status_code=303)


@router.post("/build")
def request_build(
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Publish now: enqueue without debounce."""
    try:
        enqueue_build_task(db, timedelta(0))
    except SQLAlchemyError:
        logger.exception("build request by user %s failed", user.id)
        t = get_translator(request)
        club = get_club_by_owner(db, user.id)
        context = dashboard_data(club, t, error=t.text("error.build_request_failed"))
        return render(request, "dashboard.html", context, status_code=500)
    return RedirectResponse("/admin?build=1", status_code=303)
