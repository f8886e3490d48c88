"""
Build task coordinator: the persisted state machine behind "rebuild the static site".

  idle/pending --enqueue--> pending --claim (due)--> running --complete--> idle | pending
                                                        \\--reschedule--> pending

The web process enqueues, the worker claims/completes/reschedules. There is no shared memory
between them, so every transition is a single SQL statement on the one build_tasks row:
a concurrent enqueue is either applied before or after a transition, never lost.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import and_, case, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clubportal.core.clock import as_utc, utcnow
from clubportal.core.constants import (
    BUILD_STATUS_IDLE,
    BUILD_STATUS_PENDING,
    BUILD_STATUS_RUNNING,
    BUILD_TASK_KEY,
)
from clubportal.core.errors import BuildTaskNotFoundError
from clubportal.models.build_task import BuildTask

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

_MAX_ERROR_LENGTH = 2000


@dataclass(frozen=True)
class ClaimedBuildTask:
    """Snapshot of the task row taken right after a successful claim."""

    id: str
    claimed_at: datetime
    next_run_at: datetime | None
    last_event_at: datetime | None
    attempts: int
    reclaimed: bool = False


def _now(now: datetime | None) -> datetime:
    return as_utc(now) if now is not None else utcnow()


def enqueue_build_task(db: Session, debounce: timedelta, now: datetime | None = None) -> None:
    """
    Request a rebuild at now + debounce.

    Creates the row as pending on first use. Otherwise pushes next_run_at to now + debounce
    (repeated calls postpone the run: last call wins) and records the request in last_event_at.
    A running task stays running; complete_build_task() sees last_event_at and keeps it pending.
    """
    if debounce < timedelta(0):
        raise ValueError("debounce must not be negative")
    now = _now(now)
    run_at = now + debounce

    dialect = db.get_bind().dialect.name
    insert_fn = _UPSERT_INSERTS.get(dialect)
    if insert_fn is None:
        raise NotImplementedError(f"build queue needs INSERT ... ON CONFLICT support, got dialect {dialect!r}")

    stmt = insert_fn(BuildTask).values(
        id=BUILD_TASK_KEY,
        status=BUILD_STATUS_PENDING,
        next_run_at=run_at,
        last_event_at=now,
        attempts=0,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["id"],
        set_={
            "status": case(
                (BuildTask.status == BUILD_STATUS_RUNNING, BUILD_STATUS_RUNNING),
                else_=BUILD_STATUS_PENDING,
            ),
            "next_run_at": stmt.excluded.next_run_at,
            "last_event_at": stmt.excluded.last_event_at,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.debug("build task enqueued, due at %s", run_at.isoformat())


def _claim(db: Session, condition, now: datetime) -> bool:
    """Compare-and-set pending/expired-running -> running. True when this caller won."""
    try:
        result = db.execute(
            update(BuildTask)
            .where(BuildTask.id == BUILD_TASK_KEY, condition)
            .values(status=BUILD_STATUS_RUNNING, claimed_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            return False
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True


def claim_build_task(
    db: Session,
    now: datetime | None = None,
    lease: timedelta | None = None,
) -> ClaimedBuildTask | None:
    """
    Atomically move a due pending task to running. None when nothing is due or the task is
    already running (a normal outcome, not an error).

    With a positive lease, a task that has been running longer than the lease is treated as
    abandoned (worker killed mid-build) and claimed again.
    """
    now = _now(now)
    due = and_(BuildTask.status == BUILD_STATUS_PENDING, BuildTask.next_run_at <= now)
    reclaimed = False
    if not _claim(db, due, now):
        if not lease or lease <= timedelta(0):
            return None
        expired = and_(BuildTask.status == BUILD_STATUS_RUNNING, BuildTask.claimed_at <= now - lease)
        if not _claim(db, expired, now):
            return None
        reclaimed = True
        logger.warning("build task was running for more than %s; reclaimed", lease)

    row = db.get(BuildTask, BUILD_TASK_KEY)
    return ClaimedBuildTask(
        id=row.id,
        claimed_at=now,
        next_run_at=as_utc(row.next_run_at),
        last_event_at=as_utc(row.last_event_at),
        attempts=row.attempts or 0,
        reclaimed=reclaimed,
    )


def complete_build_task(db: Session, task_id: str, now: datetime | None = None) -> str:
    """
    Finish a successful run. Returns the resulting status.

    Stays pending when a newer request exists: next_run_at is still ahead of now (a debounced
    enqueue arrived mid-build) or last_event_at is after claimed_at (any enqueue arrived
    mid-build, including a zero-debounce one that is already due). Otherwise goes idle and
    next_run_at is cleared.
    """
    now = _now(now)
    newer_request = or_(
        BuildTask.next_run_at > now,
        BuildTask.last_event_at > BuildTask.claimed_at,
    )
    try:
        result = db.execute(
            update(BuildTask)
            .where(BuildTask.id == task_id)
            .values(
                status=case((newer_request, BUILD_STATUS_PENDING), else_=BUILD_STATUS_IDLE),
                next_run_at=case((newer_request, BuildTask.next_run_at), else_=None),
                claimed_at=None,
                attempts=0,
                last_error=None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise BuildTaskNotFoundError(task_id)
        status = db.execute(select(BuildTask.status).where(BuildTask.id == task_id)).scalar_one()
        db.commit()
    except (SQLAlchemyError, BuildTaskNotFoundError):
        db.rollback()
        raise
    return status


def reschedule_build_task(
    db: Session,
    task_id: str,
    delay: timedelta,
    now: datetime | None = None,
    error: str | None = None,
) -> datetime:
    """After a failed run: pending again at now + delay, whatever the previous state. Returns the retry time."""
    if delay < timedelta(0):
        raise ValueError("retry delay must not be negative")
    now = _now(now)
    retry_at = now + delay
    try:
        result = db.execute(
            update(BuildTask)
            .where(BuildTask.id == task_id)
            .values(
                status=BUILD_STATUS_PENDING,
                next_run_at=retry_at,
                claimed_at=None,
                attempts=BuildTask.attempts + 1,
                last_error=(error or "")[:_MAX_ERROR_LENGTH] or None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise BuildTaskNotFoundError(task_id)
        db.commit()
    except (SQLAlchemyError, BuildTaskNotFoundError):
        db.rollback()
        raise
    return retry_at


def reset_build_task(db: Session, now: datetime | None = None) -> bool:
    """Operator reset: a running task goes back to pending, due now. False when it was not running."""
    now = _now(now)
    try:
        result = db.execute(
            update(BuildTask)
            .where(BuildTask.id == BUILD_TASK_KEY, BuildTask.status == BUILD_STATUS_RUNNING)
            .values(status=BUILD_STATUS_PENDING, next_run_at=now, claimed_at=None, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        reset = result.rowcount == 1
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return reset


def get_build_task(db: Session) -> BuildTask | None:
    return db.get(BuildTask, BUILD_TASK_KEY)
