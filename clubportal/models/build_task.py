"""
The single static-site build task (id = BUILD_TASK_KEY).

Created lazily by the first enqueue, never deleted. All transitions live in
services.build_queue as single conditional statements.
"""
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from clubportal.db.base import Base


class BuildTask(Base):
    __tablename__ = "build_tasks"

    id = Column(String(32), primary_key=True)
    status = Column(String(16), nullable=False, default="idle")
    next_run_at = Column(DateTime(timezone=True), nullable=True)
    last_event_at = Column(DateTime(timezone=True), nullable=True)  # last enqueue
    claimed_at = Column(DateTime(timezone=True), nullable=True)  # set while running
    attempts = Column(Integer, nullable=False, default=0)  # consecutive failed runs
    last_error = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("status IN ('idle', 'pending', 'running')", name="ck_build_tasks_status"),
    )
