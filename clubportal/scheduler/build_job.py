"""
Build worker tick: nightly enqueue plus one pass over the build queue.

Runs in the worker process only (see clubportal.worker). One tick:
  1. if the nightly run time has passed, enqueue with zero debounce and move the nightly
     time to the next day;
  2. claim the build task if due, build the whole site from a fresh snapshot of all clubs,
     then complete the task, or reschedule it after retry_delay when the build failed.
Ticks never overlap (single executor thread, max_instances=1), so at most one build runs here.
"""
import enum
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session, sessionmaker

from clubportal.core.clock import next_nightly_run, parse_clock
from clubportal.services.build_queue import (
    claim_build_task,
    complete_build_task,
    enqueue_build_task,
    reschedule_build_task,
)
from clubportal.services.club_service import all_clubs
from clubportal.site.builder import BuildOptions, build_site

logger = logging.getLogger(__name__)


class BuildOutcome(str, enum.Enum):
    IDLE = "idle"  # nothing due
    BUILT = "built"
    FAILED = "failed"  # build raised; task rescheduled


class BuildWorker:
    def __init__(
        self,
        session_factory: sessionmaker,
        options: BuildOptions,
        retry_delay: timedelta,
        nightly_at: str,
        lease: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        parse_clock(nightly_at)
        self.clock = clock or _local_now
        self.session_factory = session_factory
        self.options = options
        self.retry_delay = retry_delay
        self.nightly_at = nightly_at
        self.lease = lease
        self.next_nightly = next_nightly_run(self.clock(), nightly_at)

    def tick(self, now: datetime | None = None) -> BuildOutcome | None:
        """One scheduler tick. Storage errors are logged, never raised: the next tick tries again."""
        now = now or self.clock()
        if now >= self.next_nightly:
            self.enqueue_nightly(now)
        try:
            return self.process_build_queue(now)
        except Exception:
            logger.exception("build queue pass failed")
            return None

    def enqueue_nightly(self, now: datetime) -> None:
        db = self.session_factory()
        try:
            enqueue_build_task(db, timedelta(0), now=now)
            logger.info("nightly build enqueued")
        except Exception:
            logger.exception("nightly enqueue failed")
        finally:
            db.close()
        # Failed or not, the next attempt is tomorrow; a missed nightly run is only staleness.
        self.next_nightly = next_nightly_run(now, self.nightly_at)
        logger.info("next nightly build at %s", self.next_nightly.isoformat())

    def process_build_queue(self, now: datetime | None = None) -> BuildOutcome:
        """Claim -> build -> complete/reschedule. Raises only for storage errors around the claim/complete."""
        db: Session = self.session_factory()
        try:
            task = claim_build_task(db, now=now, lease=self.lease)
        finally:
            db.close()
        if task is None:
            return BuildOutcome.IDLE
        logger.info("build task claimed (requested for %s, attempt %d)", task.next_run_at, task.attempts + 1)

        try:
            clubs = self._load_snapshot()
            result = build_site(clubs, self.options)
        except Exception as e:
            logger.exception("build failed")
            db = self.session_factory()
            try:
                error = f"{type(e).__name__}: {e}"
                retry_at = reschedule_build_task(db, task.id, self.retry_delay, now=self.clock(), error=error)
            finally:
                db.close()
            logger.warning("build rescheduled for %s", retry_at.isoformat())
            return BuildOutcome.FAILED

        db = self.session_factory()
        try:
            status = complete_build_task(db, task.id, now=self.clock())
        finally:
            db.close()
        logger.info("build finished (%d clubs, %d pages), task now %s", result.clubs, result.pages, status)
        return BuildOutcome.BUILT

    def _load_snapshot(self) -> list:
        db: Session = self.session_factory()
        try:
            return all_clubs(db)
        finally:
            # close() detaches the clubs without expiring them; they stay readable during the build
            db.close()


def _local_now() -> datetime:
    return datetime.now(timezone.utc).astimezone()
