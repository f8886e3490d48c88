from clubportal.services.build_queue import (
    claim_build_task,
    complete_build_task,
    enqueue_build_task,
    reschedule_build_task,
)
from clubportal.services.club_service import all_clubs, save_club_profile, upsert_club
from clubportal.services.user_service import authenticate, create_user

__all__ = [
    "enqueue_build_task",
    "claim_build_task",
    "complete_build_task",
    "reschedule_build_task",
    "all_clubs",
    "save_club_profile",
    "upsert_club",
    "authenticate",
    "create_user",
]
