"""
Template contexts for the web pages (home listing, admin dashboard).
"""
from typing import Any, Iterable, Sequence

from clubportal.core.categories import (
    CATEGORY_OPTIONS,
    category_label_for_value,
    category_selection,
    split_categories,
)
from clubportal.core.constants import EXTRA_COURSE_ROWS, WEEKDAYS
from clubportal.core.i18n import Translator
from clubportal.models.build_task import BuildTask

_DASHBOARD_FIELDS = (
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


def _text(value: str | None) -> str:
    return (value or "").strip()


def club_location(city: str, country: str) -> str:
    city, country = _text(city), _text(country)
    if city and country:
        return f"{city}, {country}"
    return city or country


def home_data(
    clubs: Sequence[Any],
    translator: Translator,
    city: str = "",
    category: str = "",
    query: str = "",
) -> dict[str, Any]:
    """
    Club cards plus the filter lists. Filters: exact city, category (case-insensitive label
    or option value) and free text over name, description, location and categories.
    """
    cards: list[dict[str, Any]] = []
    cities: set[str] = set()
    used_categories: dict[str, str] = {}  # lower-case label -> label
    city_filter = _text(city)
    category_filter = category_label_for_value(_text(category)).lower()
    query_filter = _text(query).lower()

    for club in clubs:
        club_city = _text(club.address_city)
        labels = [category_label_for_value(c) for c in split_categories(club.categories)]
        for label in labels:
            used_categories.setdefault(label.lower(), label)
        if club_city:
            cities.add(club_city)

        location = club_location(club.address_city, club.address_country)
        search_text = " ".join([_text(club.name), _text(club.description), location, " ".join(labels)]).lower()
        if city_filter and club_city != city_filter:
            continue
        if category_filter and category_filter not in {label.lower() for label in labels}:
            continue
        if query_filter and query_filter not in search_text:
            continue
        cards.append(
            {
                "name": _text(club.name),
                "slug": club.slug,
                "description": _text(club.description),
                "location": location,
                "city": club_city,
                "categories": labels,
            }
        )

    return {
        "title": translator.text("title.home"),
        "club_count": len(clubs),
        "clubs": cards,
        "cities": sorted(cities),
        "categories": home_categories(used_categories),
        "filter_city": city_filter,
        "filter_category": _text(category),
        "filter_query": _text(query),
    }


def home_categories(used: dict[str, str]) -> list[dict[str, str]]:
    """Predefined options first (in option order), then the remaining labels alphabetically."""
    result = []
    for option in CATEGORY_OPTIONS:
        if option.value in used:
            result.append({"value": option.value, "label": used[option.value] or option.label})
    known = {option.value for option in CATEGORY_OPTIONS}
    unknown = sorted(
        ({"value": value, "label": label} for value, label in used.items() if value not in known and label),
        key=lambda c: c["label"].lower(),
    )
    return result + unknown


def opening_rows(hours: Iterable[Any] | None, translator: Translator) -> list[dict[str, Any]]:
    """Seven form rows, Monday to Sunday, prefilled from the first entry per weekday."""
    by_day: dict[int, Any] = {}
    for hour in hours or ():
        if hour.day_of_week in WEEKDAYS and hour.day_of_week not in by_day:
            by_day[hour.day_of_week] = hour
    rows = []
    for day in WEEKDAYS:
        hour = by_day.get(day)
        rows.append(
            {
                "day": day,
                "label": translator.weekday(day),
                "open": _text(hour.opens_at) if hour else "",
                "close": _text(hour.closes_at) if hour else "",
                "note": _text(hour.note) if hour else "",
            }
        )
    return rows


def course_rows(courses: Iterable[Any] | None, extra: int = EXTRA_COURSE_ROWS) -> list[dict[str, Any]]:
    rows = [
        {
            "day": course.day_of_week if course.day_of_week in WEEKDAYS else 1,
            "title": _text(course.title),
            "start": _text(course.start_time),
            "end": _text(course.end_time),
            "location": _text(course.location),
            "instructor": _text(course.instructor),
            "level": _text(course.level),
            "description": _text(course.description),
        }
        for course in courses or ()
    ]
    blank = {"day": 1, "title": "", "start": "", "end": "", "location": "", "instructor": "", "level": "", "description": ""}
    rows.extend(dict(blank) for _ in range(extra))
    return rows


def build_status_text(task: BuildTask | None, translator: Translator) -> str:
    if task is None:
        return translator.text("build.status.unknown")
    return translator.text(f"build.status.{task.status}")


def dashboard_data(
    club: Any | None,
    translator: Translator,
    opening_hours: Iterable[Any] | None = None,
    courses: Iterable[Any] | None = None,
    build_task: BuildTask | None = None,
    error: str = "",
    info: str = "",
) -> dict[str, Any]:
    """
    Context for the admin form. `club` is a Club or, when redisplaying a rejected submission,
    the ClubUpdate that was posted (same attribute names).
    """
    fields = {name: _text(getattr(club, name, "")) if club is not None else "" for name in _DASHBOARD_FIELDS}
    categories = getattr(club, "categories", "") if club is not None else ""
    selection, custom = category_selection(categories)
    slug = _text(getattr(club, "slug", "")) if club is not None else ""
    if opening_hours is None and club is not None:
        opening_hours = getattr(club, "opening_hours", None)
    if courses is None and club is not None:
        courses = getattr(club, "courses", None)
    return {
        "title": translator.text("title.dashboard"),
        "club": fields,
        "categories": categories,
        "category_options": CATEGORY_OPTIONS,
        "category_selection": selection,
        "category_custom": custom,
        "slug": slug,
        "preview_path": f"/clubs/{slug}/" if slug else "",
        "opening_rows": opening_rows(opening_hours, translator),
        "course_rows": course_rows(courses),
        "weekdays": [(day, translator.weekday(day)) for day in WEEKDAYS],
        "build_status": build_status_text(build_task, translator),
        "error": error,
        "info": info,
    }
