"""
Single source of truth for database tables created by migration 001.

Use these names when writing raw SQL (e.g. the operator scripts).
"""
# All tables that exist in the DB. Must match models and alembic/versions.
ALL_TABLE_NAMES = (
    "users",
    "clubs",
    "opening_hours",
    "courses",
    "build_tasks",
)
