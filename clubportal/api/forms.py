"""
Admin form parsing: repeated form fields -> ClubUpdate / OpeningHourInput / CourseInput.

Opening hours come as seven rows (one per weekday), courses as any number of rows; the
i-th value of each course_* field belongs to row i.
"""
from typing import Mapping, Sequence

from starlette.datastructures import FormData

from clubportal.core.categories import categories_from_form
from clubportal.core.constants import WEEKDAYS
from clubportal.services.club_service import ClubUpdate, CourseInput, OpeningHourInput

CLUB_FIELDS = (
    "name",
    "description",
    "contact_name",
    "contact_role",
    "contact_email",
    "contact_phone",
    "contact_website",
    "address_line1",
    "address_line2",
    "address_postal",
    "address_city",
    "address_country",
)

COURSE_FIELDS = ("title", "start", "end", "location", "instructor", "level", "description")


def parse_day(value: str | None, fallback: int) -> int:
    try:
        day = int((value or "").strip())
    except ValueError:
        return fallback
    return day if day in WEEKDAYS else fallback


def _at(values: Sequence[str], i: int) -> str:
    return values[i].strip() if i < len(values) else ""


def _getlist(form: FormData | Mapping, key: str) -> list[str]:
    if isinstance(form, FormData):
        return [v for v in form.getlist(key) if isinstance(v, str)]
    value = form.get(key, [])
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _get(form: FormData | Mapping, key: str) -> str:
    value = form.get(key)
    return value.strip() if isinstance(value, str) else ""


def club_update_from_form(form: FormData | Mapping) -> ClubUpdate:
    values = {name: _get(form, name) for name in CLUB_FIELDS}
    categories = categories_from_form(_getlist(form, "category"), _get(form, "category_custom"))
    return ClubUpdate(categories=categories, **values)


def opening_hours_from_form(form: FormData | Mapping) -> list[OpeningHourInput]:
    days = _getlist(form, "opening_day")
    opens = _getlist(form, "opening_open")
    closes = _getlist(form, "opening_close")
    notes = _getlist(form, "opening_note")
    rows = max(len(days), len(opens), len(closes), len(notes))
    return [
        OpeningHourInput(
            day_of_week=parse_day(_at(days, i), i + 1),
            opens_at=_at(opens, i),
            closes_at=_at(closes, i),
            note=_at(notes, i),
        )
        for i in range(rows)
    ]


def courses_from_form(form: FormData | Mapping) -> list[CourseInput]:
    """All submitted course rows, trailing blank rows removed (the store drops untitled ones)."""
    days = _getlist(form, "course_day")
    columns = {name: _getlist(form, f"course_{name}") for name in COURSE_FIELDS}
    rows = max([len(days)] + [len(v) for v in columns.values()])
    courses = [
        CourseInput(
            day_of_week=parse_day(_at(days, i), 1),
            title=_at(columns["title"], i),
            start_time=_at(columns["start"], i),
            end_time=_at(columns["end"], i),
            location=_at(columns["location"], i),
            instructor=_at(columns["instructor"], i),
            level=_at(columns["level"], i),
            description=_at(columns["description"], i),
        )
        for i in range(rows)
    ]
    while courses and _is_blank(courses[-1]):
        courses.pop()
    return courses


def _is_blank(course: CourseInput) -> bool:
    return not any(
        (course.title, course.start_time, course.end_time, course.location, course.instructor, course.level, course.description)
    )
