"""
FastAPI app entrypoint (web process).

    uvicorn clubportal.main:app

Serves registration/login, the club admin dashboard, the public club listing and the
generated static pages. Builds run in the separate worker process (clubportal.worker);
this process only enqueues them.
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

# Load .env from the repository root before any clubportal code reads settings
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from clubportal.api.routes import admin, auth, public, site  # noqa: E402
from clubportal.config import Settings, settings  # noqa: E402
from clubportal.core.errors import LoginRequired  # noqa: E402
from clubportal.core.i18n import Translator  # noqa: E402
from clubportal.db.session import SessionLocal, engine, init_db  # noqa: E402
from clubportal.services.build_queue import enqueue_build_task  # noqa: E402
from clubportal.services.club_service import ensure_example_club  # noqa: E402

logger = logging.getLogger(__name__)

_admin_static_dir = Path(__file__).resolve().parent / "static" / "admin"


def seed_example_club() -> None:
    """Seed the demo club into an empty store and queue a build so its page appears."""
    db = SessionLocal()
    try:
        seed, created = ensure_example_club(db)
        if created:
            logger.info("seeded example club %r (login: %s / %s)", seed.club.name, seed.email, seed.password)
            enqueue_build_task(db, timedelta(0))
    finally:
        db.close()


async def _login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=303)


def create_app(cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if cfg.auto_create_schema:
            init_db(engine)
        if cfg.seed_example_club:
            seed_example_club()
        logger.info("web app ready (static output in %s)", cfg.output_dir)
        yield

    app = FastAPI(title="Club Portal", version="0.1.0", lifespan=lifespan)
    app.state.settings = cfg
    app.state.translator = Translator(default_locale=cfg.default_locale)
    app.add_exception_handler(LoginRequired, _login_required_handler)

    app.include_router(public.router)
    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(site.router)
    app.mount("/admin-assets", StaticFiles(directory=str(_admin_static_dir)), name="admin-assets")
    return app


app = create_app()
