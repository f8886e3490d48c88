"""Initial schema: users, clubs, opening_hours, courses, build_tasks

Revision ID: 001
Revises:
Create Date: (run alembic upgrade head)

- users: club administrators, email unique (stored lower-case).
- clubs: one per owner, unique slug. opening_hours and courses are deleted with their club.
- build_tasks: the single static-site build task (id = "site"), created by the first enqueue.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "clubs",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("owner_id", sa.String(32), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("categories", sa.Text(), nullable=False, server_default=""),
        sa.Column("contact_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("contact_role", sa.String(200), nullable=False, server_default=""),
        sa.Column("contact_email", sa.String(320), nullable=False, server_default=""),
        sa.Column("contact_phone", sa.String(64), nullable=False, server_default=""),
        sa.Column("contact_website", sa.String(500), nullable=False, server_default=""),
        sa.Column("address_line1", sa.String(200), nullable=False, server_default=""),
        sa.Column("address_line2", sa.String(200), nullable=False, server_default=""),
        sa.Column("address_postal", sa.String(32), nullable=False, server_default=""),
        sa.Column("address_city", sa.String(200), nullable=False, server_default=""),
        sa.Column("address_country", sa.String(200), nullable=False, server_default=""),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("owner_id", name="uq_clubs_owner_id"),
    )
    op.create_index("ix_clubs_slug", "clubs", ["slug"], unique=True)

    op.create_table(
        "opening_hours",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("club_id", sa.String(32), sa.ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("opens_at", sa.String(16), nullable=False, server_default=""),
        sa.Column("closes_at", sa.String(16), nullable=False, server_default=""),
        sa.Column("note", sa.String(200), nullable=False, server_default=""),
        sa.CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_opening_hours_day"),
    )
    op.create_index("ix_opening_hours_club_id", "opening_hours", ["club_id"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("club_id", sa.String(32), sa.ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("start_time", sa.String(16), nullable=False, server_default=""),
        sa.Column("end_time", sa.String(16), nullable=False, server_default=""),
        sa.Column("location", sa.String(200), nullable=False, server_default=""),
        sa.Column("instructor", sa.String(200), nullable=False, server_default=""),
        sa.Column("level", sa.String(100), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_courses_day"),
    )
    op.create_index("ix_courses_club_id", "courses", ["club_id"])

    op.create_table(
        "build_tasks",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="idle"),
        sa.Column("next_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_event_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('idle', 'pending', 'running')", name="ck_build_tasks_status"),
    )


def downgrade() -> None:
    op.drop_table("build_tasks")
    op.drop_index("ix_courses_club_id", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_opening_hours_club_id", table_name="opening_hours")
    op.drop_table("opening_hours")
    op.drop_index("ix_clubs_slug", table_name="clubs")
    op.drop_table("clubs")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
