"""
Jinja2 templates for the web pages (admin + public home).
"""
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from clubportal.api.deps import current_user_id, get_translator

_template_dir = Path(__file__).resolve().parent.parent / "templates" / "admin"

templates = Jinja2Templates(directory=str(_template_dir))


def render(request: Request, name: str, context: dict[str, Any], status_code: int = 200):
    """TemplateResponse with the shared globals (app name, translate helper, login state)."""
    translator = get_translator(request)
    ctx = {
        "app_name": translator.app_name(),
        "t": translator.text,
        "logged_in": current_user_id(request) is not None,
    }
    ctx.update(context)
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
