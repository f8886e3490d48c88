"""
Centralized constants for the build queue, the worker and the web layer.

Change keys, job IDs or defaults here instead of scattering literals across modules.
"""

# The one build task row. It stands for "the static site needs rebuilding", not a job queue.
BUILD_TASK_KEY = "site"

BUILD_STATUS_IDLE = "idle"
BUILD_STATUS_PENDING = "pending"
BUILD_STATUS_RUNNING = "running"
BUILD_STATUSES = (BUILD_STATUS_IDLE, BUILD_STATUS_PENDING, BUILD_STATUS_RUNNING)

# Scheduler job ID (worker.py add_job)
BUILD_WORKER_JOB_ID = "build_worker_tick"

# Static output layout
CLUB_PAGE_PATTERN = "clubs/:slug/index"
CLUB_PAGE_TEMPLATE = "club.html"
ASSET_TARGET_DIR = "assets"

# Session cookie (web process)
SESSION_COOKIE_NAME = "club_portal_session"
SESSION_ALGORITHM = "HS256"

# Admin form: blank course rows appended below the saved ones
EXTRA_COURSE_ROWS = 3

WEEKDAYS = (1, 2, 3, 4, 5, 6, 7)

# Demo data seeded into an empty store
EXAMPLE_OWNER_EMAIL = "demo@example.com"
EXAMPLE_OWNER_PASSWORD = "demo12345"
