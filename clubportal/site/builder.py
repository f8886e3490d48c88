"""
Static club pages: turns the full club list into render-ready view models and drives the
pipeline (one page per club at clubs/<slug>/index.html, site assets under assets/).

Pure with respect to its input: same clubs in, same bytes out. No timestamps, no set/dict
iteration order leaking into the HTML.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

from clubportal.core.categories import category_label_for_value, split_categories
from clubportal.core.constants import (
    ASSET_TARGET_DIR,
    CLUB_PAGE_PATTERN,
    CLUB_PAGE_TEMPLATE,
    WEEKDAYS,
)
from clubportal.core.i18n import Translator
from clubportal.site.pipeline import Builder, CopyTask, HTMLRenderer, PageGenerator, PagePayload

logger = logging.getLogger(__name__)

_package_dir = Path(__file__).resolve().parent.parent


@dataclass
class BuildOptions:
    output_dir: str | Path = "public"
    template_dir: str | Path = _package_dir / "templates" / "site"
    asset_dir: str | Path = _package_dir / "static" / "site"
    translator: Translator = field(default_factory=Translator)


@dataclass(frozen=True)
class BuildResult:
    clubs: int
    pages: int
    output_dir: Path


@dataclass(frozen=True)
class OpeningHourView:
    day_of_week: int
    day: str
    open: str
    close: str
    note: str


@dataclass(frozen=True)
class CourseView:
    title: str
    start: str
    end: str
    location: str
    instructor: str
    level: str
    description: str


@dataclass
class ScheduleSlotView:
    time: str
    courses: list[CourseView] = field(default_factory=list)


@dataclass
class ScheduleDayView:
    day_of_week: int
    day: str
    slots: list[ScheduleSlotView] = field(default_factory=list)


def _text(value: str | None) -> str:
    return (value or "").strip()


def time_key(value: str | None) -> str:
    """Sortable form of a time string: "9:00" -> "09:00", anything else unchanged (trimmed)."""
    value = _text(value)
    if len(value) == 4 and ":" in value:
        return "0" + value
    return value


def format_time_range(start: str | None, end: str | None, translator: Translator | None = None) -> str:
    start, end = _text(start), _text(end)
    if start and end:
        return f"{start} - {end}"
    if start or end:
        return start or end
    return (translator or Translator()).text("schedule.by_arrangement")


def build_opening_hours(hours: Iterable[Any] | None, translator: Translator | None = None) -> tuple[list[OpeningHourView], bool]:
    """
    Exactly seven entries, Monday (1) to Sunday (7). Weekdays without a row get empty values;
    if a weekday appears more than once the first row wins. The flag is True when any entry
    has an opening time, a closing time or a note.
    """
    translator = translator or Translator()
    by_day: dict[int, Any] = {}
    for hour in hours or ():
        day = hour.day_of_week
        if day in WEEKDAYS and day not in by_day:
            by_day[day] = hour

    result: list[OpeningHourView] = []
    has_any = False
    for day in WEEKDAYS:
        hour = by_day.get(day)
        open_ = _text(hour.opens_at) if hour is not None else ""
        close = _text(hour.closes_at) if hour is not None else ""
        note = _text(hour.note) if hour is not None else ""
        if open_ or close or note:
            has_any = True
        result.append(OpeningHourView(day_of_week=day, day=translator.weekday(day), open=open_, close=close, note=note))
    return result, has_any


def _course_sort_key(course: Any) -> tuple:
    return (course.day_of_week, time_key(course.start_time), time_key(course.end_time), _text(course.title))


def build_schedule(courses: Iterable[Any] | None, translator: Translator | None = None) -> tuple[list[ScheduleDayView], bool]:
    """
    Group courses into weekday -> time slot -> courses.

    Sorted by weekday, start, end (times compared zero-padded) and title; consecutive courses
    with the same start and end share a slot. Courses outside weekdays 1..7 are skipped.
    """
    translator = translator or Translator()
    schedule: list[ScheduleDayView] = []
    current_day: ScheduleDayView | None = None
    current_slot: ScheduleSlotView | None = None
    current_slot_key = ""

    for course in sorted(courses or (), key=_course_sort_key):
        day = course.day_of_week
        if day not in WEEKDAYS:
            continue
        slot_key = f"{time_key(course.start_time)}|{time_key(course.end_time)}"
        if current_day is None or current_day.day_of_week != day:
            current_day = ScheduleDayView(day_of_week=day, day=translator.weekday(day))
            schedule.append(current_day)
            current_slot = None
        if current_slot is None or current_slot_key != slot_key:
            current_slot = ScheduleSlotView(time=format_time_range(course.start_time, course.end_time, translator))
            current_day.slots.append(current_slot)
            current_slot_key = slot_key
        current_slot.courses.append(
            CourseView(
                title=_text(course.title),
                start=_text(course.start_time),
                end=_text(course.end_time),
                location=_text(course.location),
                instructor=_text(course.instructor),
                level=_text(course.level),
                description=_text(course.description),
            )
        )
    return schedule, bool(schedule)


_CONTACT_FIELDS = ("contact_name", "contact_role", "contact_email", "contact_phone", "contact_website")
_ADDRESS_FIELDS = ("address_line1", "address_line2", "address_postal", "address_city", "address_country")


def has_contact(club: Any) -> bool:
    return any(_text(getattr(club, f, "")) for f in _CONTACT_FIELDS)


def has_address(club: Any) -> bool:
    return any(_text(getattr(club, f, "")) for f in _ADDRESS_FIELDS)


def club_page_data(club: Any, translator: Translator) -> dict[str, Any]:
    opening_hours, has_opening_hours = build_opening_hours(club.opening_hours, translator)
    schedule, has_schedule = build_schedule(club.courses, translator)
    data: dict[str, Any] = {
        "name": _text(club.name),
        "description": _text(club.description),
        "slug": club.slug,
        "categories": [category_label_for_value(c) for c in split_categories(club.categories)],
        "opening_hours": opening_hours,
        "has_opening_hours": has_opening_hours,
        "schedule": schedule,
        "has_schedule": has_schedule,
        "has_contact": has_contact(club),
        "has_address": has_address(club),
    }
    for name in _CONTACT_FIELDS + _ADDRESS_FIELDS:
        data[name] = _text(getattr(club, name, ""))
    return data


def missing_club_data(slug: str, translator: Translator) -> dict[str, Any]:
    """Placeholder page data for a slug with no club behind it."""
    opening_hours, _ = build_opening_hours(None, translator)
    data: dict[str, Any] = {
        "name": "Club",
        "description": "",
        "slug": slug,
        "categories": [],
        "opening_hours": opening_hours,
        "has_opening_hours": False,
        "schedule": [],
        "has_schedule": False,
        "has_contact": False,
        "has_address": False,
    }
    for name in _CONTACT_FIELDS + _ADDRESS_FIELDS:
        data[name] = ""
    return data


def build_site(clubs: Sequence[Any], options: BuildOptions | None = None) -> BuildResult:
    """Render every club page and copy the assets. Raises SiteBuildError on any failure."""
    options = options or BuildOptions()
    translator = options.translator

    club_by_slug = {club.slug: club for club in clubs}
    paths = [CLUB_PAGE_PATTERN.replace(":slug", slug) for slug in club_by_slug]

    def get_data(payload: PagePayload) -> dict[str, Any]:
        slug = payload.params.get("slug", "")
        club = club_by_slug.get(slug)
        if club is None:
            return missing_club_data(slug, translator)
        return club_page_data(club, translator)

    renderer = HTMLRenderer(
        options.template_dir,
        globals={"app_name": translator.app_name(), "asset_base": "/" + ASSET_TARGET_DIR},
    )
    builder = Builder(
        output_dir=options.output_dir,
        generators=[
            PageGenerator(
                template=CLUB_PAGE_TEMPLATE,
                pattern=CLUB_PAGE_PATTERN,
                get_paths=lambda: paths,
                get_data=get_data,
                renderer=renderer,
            )
        ],
        before_tasks=[CopyTask(options.asset_dir, ASSET_TARGET_DIR)],
    )
    pages = builder.build()
    logger.debug("site build wrote %d pages to %s", pages, options.output_dir)
    return BuildResult(clubs=len(club_by_slug), pages=pages, output_dir=Path(options.output_dir))
