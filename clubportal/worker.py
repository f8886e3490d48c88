"""
Build worker process entrypoint.

    clubportal-worker            # or: python -m clubportal.worker

Polls the build queue every BUILD_POLL_INTERVAL, enqueues the nightly rebuild at
BUILD_NIGHTLY_AT and runs builds one at a time. Run exactly one worker per database.
"""
import logging
from datetime import datetime, timezone
from pathlib import Path

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv

# Load .env from the repository root before any clubportal code reads settings
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from clubportal.config import Settings, settings  # noqa: E402
from clubportal.core.constants import BUILD_WORKER_JOB_ID  # noqa: E402
from clubportal.core.i18n import Translator  # noqa: E402
from clubportal.db.session import SessionLocal, engine, init_db  # noqa: E402
from clubportal.scheduler.build_job import BuildWorker  # noqa: E402
from clubportal.site.builder import BuildOptions  # noqa: E402

logger = logging.getLogger(__name__)


def build_options(cfg: Settings) -> BuildOptions:
    return BuildOptions(
        output_dir=cfg.output_dir,
        template_dir=cfg.template_dir,
        asset_dir=cfg.asset_dir,
        translator=Translator(default_locale=cfg.default_locale),
    )


def create_scheduler(worker: BuildWorker, poll_seconds: float) -> BlockingScheduler:
    # One thread and max_instances=1: a long build delays the next tick instead of overlapping it.
    scheduler = BlockingScheduler(executors={"default": ThreadPoolExecutor(1)})
    scheduler.add_job(
        worker.tick,
        "interval",
        seconds=poll_seconds,
        id=BUILD_WORKER_JOB_ID,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
    )
    return scheduler


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if settings.auto_create_schema:
        init_db(engine)

    worker = BuildWorker(
        SessionLocal,
        build_options(settings),
        retry_delay=settings.build_retry_delay,
        nightly_at=settings.build_nightly_at,
        lease=settings.build_lease,
    )
    poll_seconds = settings.build_poll_interval.total_seconds()
    logger.info(
        "build worker started (poll every %ss, nightly at %s, next nightly %s, output %s)",
        poll_seconds,
        settings.build_nightly_at,
        worker.next_nightly.isoformat(),
        settings.output_dir,
    )
    scheduler = create_scheduler(worker, poll_seconds)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("build worker stopped")


if __name__ == "__main__":
    main()
