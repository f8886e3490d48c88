from clubportal.models.build_task import BuildTask
from clubportal.models.club import Club, Course, OpeningHour
from clubportal.models.user import User

__all__ = [
    "BuildTask",
    "Club",
    "Course",
    "OpeningHour",
    "User",
]
