"""
Club profiles: create/update, unique slugs, and the replace-on-save opening hours and courses.

Opening hours and courses are never diffed: every save replaces the whole collection, so what
the site builder sees is exactly what the admin form last submitted.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from clubportal.core.categories import normalize_categories
from clubportal.core.constants import EXAMPLE_OWNER_EMAIL, EXAMPLE_OWNER_PASSWORD, WEEKDAYS
from clubportal.core.errors import ClubNameRequiredError, ClubNotFoundError
from clubportal.models.club import Club, Course, OpeningHour
from clubportal.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)

_TRANSLITERATIONS = (("ä", "ae"), ("ö", "oe"), ("ü", "ue"), ("ß", "ss"))
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")

# Concurrent saves can collide on the slug or owner unique constraints; retry with fresh state.
_SAVE_ATTEMPTS = 3


@dataclass
class ClubUpdate:
    name: str
    description: str = ""
    categories: str = ""
    contact_name: str = ""
    contact_role: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    contact_website: str = ""
    address_line1: str = ""
    address_line2: str = ""
    address_postal: str = ""
    address_city: str = ""
    address_country: str = ""


@dataclass
class OpeningHourInput:
    day_of_week: int
    opens_at: str = ""
    closes_at: str = ""
    note: str = ""


@dataclass
class CourseInput:
    day_of_week: int
    title: str
    start_time: str = ""
    end_time: str = ""
    location: str = ""
    instructor: str = ""
    level: str = ""
    description: str = ""


@dataclass
class ExampleSeed:
    email: str
    password: str
    club: Club


def slugify(name: str) -> str:
    """Lower-case, umlauts transliterated, other runs collapsed to "-". "SV Grün-Weiß 09" -> "sv-gruen-weiss-09"."""
    value = (name or "").strip().lower()
    for src, dst in _TRANSLITERATIONS:
        value = value.replace(src, dst)
    value = _NON_SLUG_RE.sub("-", value).strip("-")
    return value or "club"


def unique_slug(db: Session, desired: str, club_id: str | None = None) -> str:
    """desired, or desired-2, desired-3, ... skipping slugs held by other clubs."""
    base = desired or "club"
    q = db.query(Club.slug).filter(or_(Club.slug == base, Club.slug.like(f"{base}-%")))
    if club_id is not None:
        q = q.filter(Club.id != club_id)
    taken = {slug for (slug,) in q.all()}
    slug = base
    n = 2
    while slug in taken:
        slug = f"{base}-{n}"
        n += 1
    return slug


def get_club_by_owner(db: Session, owner_id: str) -> Club | None:
    return db.query(Club).filter(Club.owner_id == owner_id).first()


def get_club_by_slug(db: Session, slug: str) -> Club | None:
    return db.query(Club).filter(Club.slug == slug).first()


def all_clubs(db: Session) -> list[Club]:
    """Every club with opening hours and courses loaded, ordered by name then slug."""
    return (
        db.query(Club)
        .options(selectinload(Club.opening_hours), selectinload(Club.courses))
        .order_by(Club.name, Club.slug)
        .all()
    )


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _apply_club(db: Session, owner_id: str, update: ClubUpdate) -> Club:
    name = _clean(update.name)
    if not name:
        raise ClubNameRequiredError("club name is required")

    club = get_club_by_owner(db, owner_id)
    # Before db.add(): the slug query would otherwise autoflush a club without a slug
    slug = unique_slug(db, slugify(name), club.id if club is not None else None)
    if club is None:
        club = Club(owner_id=owner_id)
        db.add(club)

    club.name = name
    club.description = _clean(update.description)
    club.categories = normalize_categories(update.categories)
    club.contact_name = _clean(update.contact_name)
    club.contact_role = _clean(update.contact_role)
    club.contact_email = _clean(update.contact_email)
    club.contact_phone = _clean(update.contact_phone)
    club.contact_website = _clean(update.contact_website)
    club.address_line1 = _clean(update.address_line1)
    club.address_line2 = _clean(update.address_line2)
    club.address_postal = _clean(update.address_postal)
    club.address_city = _clean(update.address_city)
    club.address_country = _clean(update.address_country)
    club.slug = slug
    db.flush()
    return club


def _opening_hour_rows(inputs: Iterable[OpeningHourInput]) -> list[OpeningHour]:
    """Valid weekday, something filled in, first row per weekday wins."""
    rows: list[OpeningHour] = []
    seen: set[int] = set()
    for item in inputs:
        day = item.day_of_week
        if day not in WEEKDAYS or day in seen:
            continue
        opens_at, closes_at, note = _clean(item.opens_at), _clean(item.closes_at), _clean(item.note)
        if not (opens_at or closes_at or note):
            continue
        seen.add(day)
        rows.append(OpeningHour(day_of_week=day, opens_at=opens_at, closes_at=closes_at, note=note))
    return rows


def _course_rows(inputs: Iterable[CourseInput]) -> list[Course]:
    rows: list[Course] = []
    for item in inputs:
        title = _clean(item.title)
        if not title or item.day_of_week not in WEEKDAYS:
            continue
        rows.append(
            Course(
                day_of_week=item.day_of_week,
                title=title,
                start_time=_clean(item.start_time),
                end_time=_clean(item.end_time),
                location=_clean(item.location),
                instructor=_clean(item.instructor),
                level=_clean(item.level),
                description=_clean(item.description),
            )
        )
    return rows


def _get_club(db: Session, club_id: str) -> Club:
    club = db.get(Club, club_id)
    if club is None:
        raise ClubNotFoundError(club_id)
    return club


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def upsert_club(db: Session, owner_id: str, update: ClubUpdate) -> Club:
    """Create the owner's club or update it; the slug follows the name."""
    return save_club_profile(db, owner_id, update)


def replace_opening_hours(db: Session, club_id: str, inputs: Iterable[OpeningHourInput]) -> list[OpeningHour]:
    club = _get_club(db, club_id)
    club.opening_hours = _opening_hour_rows(inputs)
    _commit(db)
    return list(club.opening_hours)


def replace_courses(db: Session, club_id: str, inputs: Iterable[CourseInput]) -> list[Course]:
    club = _get_club(db, club_id)
    club.courses = _course_rows(inputs)
    _commit(db)
    return list(club.courses)


def save_club_profile(
    db: Session,
    owner_id: str,
    update: ClubUpdate,
    opening_hours: Iterable[OpeningHourInput] | None = None,
    courses: Iterable[CourseInput] | None = None,
) -> Club:
    """
    Club fields plus (when given) the full opening-hour and course lists, in one transaction.

    None leaves a collection untouched; an empty list clears it.
    """
    opening_hours = list(opening_hours) if opening_hours is not None else None
    courses = list(courses) if courses is not None else None
    attempt = 1
    while True:
        try:
            club = _apply_club(db, owner_id, update)
            if opening_hours is not None:
                club.opening_hours = _opening_hour_rows(opening_hours)
            if courses is not None:
                club.courses = _course_rows(courses)
            db.commit()
        except IntegrityError:
            db.rollback()
            if attempt >= _SAVE_ATTEMPTS:
                raise
            logger.warning("club save for owner %s hit a unique constraint; retrying (%d/%d)", owner_id, attempt, _SAVE_ATTEMPTS)
            attempt += 1
            continue
        except Exception:
            db.rollback()
            raise
        db.refresh(club)
        return club


def ensure_example_club(db: Session) -> tuple[ExampleSeed | None, bool]:
    """Seed a demo owner and club into an empty store. Returns (seed, created)."""
    if db.query(Club.id).first() is not None:
        return None, False

    owner = get_user_by_email(db, EXAMPLE_OWNER_EMAIL)
    if owner is None:
        owner = create_user(db, EXAMPLE_OWNER_EMAIL, EXAMPLE_OWNER_PASSWORD)

    club = save_club_profile(
        db,
        owner.id,
        ClubUpdate(
            name="SV Beispiel 1920",
            description="Breitensport fuer alle Generationen: Fitness, Yoga und Volleyball im Herzen der Stadt.",
            categories="Fitness, Yoga, Teamsport",
            contact_name="Maria Muster",
            contact_role="Vorsitzende",
            contact_email="info@sv-beispiel.example",
            contact_phone="+49 30 1234567",
            contact_website="https://sv-beispiel.example",
            address_line1="Sportplatzweg 1",
            address_postal="10115",
            address_city="Berlin",
            address_country="Deutschland",
        ),
        opening_hours=[
            OpeningHourInput(1, "17:00", "21:00"),
            OpeningHourInput(3, "17:00", "21:00"),
            OpeningHourInput(6, "10:00", "14:00", "nur Geschaeftsstelle"),
        ],
        courses=[
            CourseInput(2, "Yoga am Abend", "18:00", "19:30", "Halle 2", "Jana", "Alle Level"),
            CourseInput(2, "Rueckenfit", "9:00", "10:00", "Halle 1", "Tom"),
            CourseInput(3, "Kinderturnen", "17:00", "18:00", "Halle 1", "Lea", "6-10 Jahre"),
            CourseInput(4, "Volleyball", "19:00", "20:30", "Grosse Halle", level="Fortgeschrittene"),
        ],
    )
    return ExampleSeed(email=EXAMPLE_OWNER_EMAIL, password=EXAMPLE_OWNER_PASSWORD, club=club), True
