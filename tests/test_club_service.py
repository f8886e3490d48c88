"""Tests for clubportal.services.club_service and user_service."""

from __future__ import annotations

import pytest

from clubportal.core.constants import EXAMPLE_OWNER_EMAIL
from clubportal.core.errors import (
    ClubNameRequiredError,
    ClubNotFoundError,
    EmailExistsError,
    EmailRequiredError,
    InvalidCredentialsError,
    PasswordTooShortError,
)
from clubportal.models import Club, Course, OpeningHour
from clubportal.services.club_service import (
    ClubUpdate,
    CourseInput,
    OpeningHourInput,
    all_clubs,
    ensure_example_club,
    get_club_by_owner,
    get_club_by_slug,
    replace_courses,
    replace_opening_hours,
    save_club_profile,
    slugify,
    unique_slug,
    upsert_club,
)
from clubportal.services.user_service import authenticate, create_user, get_user_by_email


# ---------------------------------------------------------------------------
# slugs
# ---------------------------------------------------------------------------

class TestSlugify:
    def test_basic(self):
        assert slugify("SV Adler") == "sv-adler"

    def test_umlauts(self):
        assert slugify("SV Grün-Weiß 09") == "sv-gruen-weiss-09"

    def test_collapses_punctuation(self):
        assert slugify("  TSV  1860 / München!! ") == "tsv-1860-muenchen"

    def test_fallback(self):
        assert slugify("!!!") == "club"
        assert slugify("") == "club"


class TestUniqueSlug:
    def test_second_club_with_same_name_gets_suffix(self, db, owner):
        other = create_user(db, "other@example.com", "secret-password")
        first = upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        second = upsert_club(db, other.id, ClubUpdate(name="SV Adler"))
        assert first.slug == "sv-adler"
        assert second.slug == "sv-adler-2"
        assert unique_slug(db, "sv-adler") == "sv-adler-3"

    def test_own_slug_is_kept_on_resave(self, db, owner):
        club = upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        again = upsert_club(db, owner.id, ClubUpdate(name="SV Adler", description="neu"))
        assert again.id == club.id
        assert again.slug == "sv-adler"

    def test_slug_follows_rename(self, db, owner):
        upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        club = upsert_club(db, owner.id, ClubUpdate(name="SV Falke"))
        assert club.slug == "sv-falke"
        assert get_club_by_slug(db, "sv-adler") is None


# ---------------------------------------------------------------------------
# club profile
# ---------------------------------------------------------------------------

class TestSaveClubProfile:
    def test_creates_club_with_trimmed_fields(self, db, owner):
        club = upsert_club(
            db,
            owner.id,
            ClubUpdate(name="  SV Adler ", categories="yoga, Yoga , Tanz,,", address_city=" Berlin "),
        )
        assert club.name == "SV Adler"
        assert club.categories == "yoga, Tanz"
        assert club.address_city == "Berlin"
        assert get_club_by_owner(db, owner.id).id == club.id

    def test_one_club_per_owner(self, db, owner):
        upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        assert db.query(Club).count() == 1

    def test_name_required(self, db, owner):
        with pytest.raises(ClubNameRequiredError):
            upsert_club(db, owner.id, ClubUpdate(name="   "))
        assert db.query(Club).count() == 0

    def test_hours_and_courses_saved_together(self, db, owner):
        club = save_club_profile(
            db,
            owner.id,
            ClubUpdate(name="SV Adler"),
            opening_hours=[
                OpeningHourInput(1, "17:00", "21:00"),
                OpeningHourInput(1, "08:00", "10:00"),
                OpeningHourInput(2),
                OpeningHourInput(9, "08:00", "10:00"),
                OpeningHourInput(6, note="nach Absprache"),
            ],
            courses=[
                CourseInput(2, "Yoga", "18:00", "19:30"),
                CourseInput(3, "   "),
                CourseInput(0, "Geister"),
            ],
        )
        assert [(h.day_of_week, h.opens_at, h.note) for h in club.opening_hours] == [
            (1, "17:00", ""),
            (6, "", "nach Absprache"),
        ]
        assert [c.title for c in club.courses] == ["Yoga"]

    def test_none_leaves_collections_alone(self, db, owner):
        save_club_profile(db, owner.id, ClubUpdate(name="SV Adler"), courses=[CourseInput(1, "Yoga")])
        club = save_club_profile(db, owner.id, ClubUpdate(name="SV Adler"))
        assert [c.title for c in club.courses] == ["Yoga"]

    def test_empty_list_clears(self, db, owner):
        save_club_profile(db, owner.id, ClubUpdate(name="SV Adler"), courses=[CourseInput(1, "Yoga")])
        club = save_club_profile(db, owner.id, ClubUpdate(name="SV Adler"), courses=[])
        assert club.courses == []
        assert db.query(Course).count() == 0


class TestReplace:
    def test_replace_opening_hours(self, db, owner):
        club = upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        replace_opening_hours(db, club.id, [OpeningHourInput(1, "09:00", "12:00")])
        rows = replace_opening_hours(db, club.id, [OpeningHourInput(4, "14:00", "18:00")])
        assert [r.day_of_week for r in rows] == [4]
        assert db.query(OpeningHour).count() == 1

    def test_replace_courses(self, db, owner):
        club = upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        replace_courses(db, club.id, [CourseInput(1, "Yoga"), CourseInput(2, "Tanz")])
        rows = replace_courses(db, club.id, [CourseInput(5, "Lauftreff")])
        assert [r.title for r in rows] == ["Lauftreff"]
        assert db.query(Course).count() == 1

    def test_unknown_club(self, db):
        with pytest.raises(ClubNotFoundError):
            replace_courses(db, "missing", [])


def test_all_clubs_ordered_by_name_then_slug(db):
    for i, name in enumerate(["TSV Nord", "SV Adler", "SV Adler"]):
        user = create_user(db, f"owner{i}@example.com", "secret-password")
        upsert_club(db, user.id, ClubUpdate(name=name))
    clubs = all_clubs(db)
    assert [(c.name, c.slug) for c in clubs] == [
        ("SV Adler", "sv-adler"),
        ("SV Adler", "sv-adler-2"),
        ("TSV Nord", "tsv-nord"),
    ]


class TestEnsureExampleClub:
    def test_seeds_empty_store(self, db):
        seed, created = ensure_example_club(db)
        assert created is True
        assert seed.email == EXAMPLE_OWNER_EMAIL
        assert seed.club.slug == "sv-beispiel-1920"
        assert len(seed.club.opening_hours) == 3
        assert len(seed.club.courses) == 4
        assert authenticate(db, seed.email, seed.password).id == seed.club.owner_id

    def test_noop_when_clubs_exist(self, db, owner):
        upsert_club(db, owner.id, ClubUpdate(name="SV Adler"))
        seed, created = ensure_example_club(db)
        assert (seed, created) == (None, False)
        assert get_user_by_email(db, EXAMPLE_OWNER_EMAIL) is None


# ---------------------------------------------------------------------------
# users
# ---------------------------------------------------------------------------

class TestUsers:
    def test_email_normalized(self, db):
        user = create_user(db, "  Trainer@Example.COM ", "secret-password")
        assert user.email == "trainer@example.com"
        assert user.password_hash != "secret-password"

    def test_duplicate_email(self, db, owner):
        with pytest.raises(EmailExistsError):
            create_user(db, "OWNER@example.com", "another-password")

    def test_email_required(self, db):
        with pytest.raises(EmailRequiredError):
            create_user(db, "  ", "secret-password")

    def test_password_too_short(self, db):
        with pytest.raises(PasswordTooShortError) as exc:
            create_user(db, "a@example.com", "short", min_length=10)
        assert exc.value.min_length == 10

    def test_authenticate(self, db, owner):
        assert authenticate(db, "Owner@Example.com", "secret-password").id == owner.id
        with pytest.raises(InvalidCredentialsError):
            authenticate(db, "owner@example.com", "wrong-password")
        with pytest.raises(InvalidCredentialsError):
            authenticate(db, "nobody@example.com", "secret-password")
