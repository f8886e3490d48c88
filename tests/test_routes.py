"""End-to-end tests for the web routes (TestClient against a temporary SQLite store)."""

from __future__ import annotations

from pathlib import Path

import pytest

from clubportal.core.constants import SESSION_COOKIE_NAME
from clubportal.services.build_queue import get_build_task
from clubportal.services.club_service import ClubUpdate, get_club_by_owner, upsert_club
from clubportal.services.user_service import get_user_by_email


def _register(client, email="trainer@example.com", password="secret-password"):
    return client.post("/register", data={"email": email, "password": password}, follow_redirects=False)


def _club_form(name="SV Adler", **extra):
    form = {
        "name": name,
        "description": "Sport im Kiez",
        "address_city": "Berlin",
        "category": ["yoga", "tanz"],
        "category_custom": "Klettern",
        "opening_day": [str(d) for d in range(1, 8)],
        "opening_open": ["17:00", "", "", "", "", "", ""],
        "opening_close": ["21:00", "", "", "", "", "", ""],
        "opening_note": [""] * 7,
        "course_day": ["2", "1"],
        "course_title": ["Yoga", ""],
        "course_start": ["18:00", ""],
        "course_end": ["19:30", ""],
    }
    form.update(extra)
    return form


@pytest.fixture
def logged_in(client):
    response = _register(client)
    assert response.status_code == 303
    return client


class TestPublicPages:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_home_lists_clubs(self, client, db, owner):
        upsert_club(db, owner.id, ClubUpdate(name="SV Adler", address_city="Berlin", categories="Yoga"))
        response = client.get("/")
        assert response.status_code == 200
        assert "SV Adler" in response.text
        assert 'href="/clubs/sv-adler/"' in response.text

    def test_home_filters(self, client, db, owner):
        upsert_club(db, owner.id, ClubUpdate(name="SV Adler", address_city="Berlin"))
        response = client.get("/", params={"city": "Hamburg"})
        assert "SV Adler" not in response.text

    def test_login_form(self, client):
        response = client.get("/login")
        assert response.status_code == 200
        assert 'action="/login"' in response.text


class TestAuth:
    def test_register_sets_session(self, client, db):
        response = _register(client)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin"
        assert SESSION_COOKIE_NAME in response.cookies
        assert get_user_by_email(db, "trainer@example.com") is not None

    def test_register_duplicate(self, client, owner):
        response = _register(client, email="owner@example.com")
        assert response.status_code == 400
        assert "bereits registriert" in response.text

    def test_register_short_password(self, client):
        response = _register(client, password="kurz")
        assert response.status_code == 400
        assert "zu kurz" in response.text

    def test_login_success(self, client, owner):
        response = client.post(
            "/login",
            data={"email": "owner@example.com", "password": "secret-password"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert SESSION_COOKIE_NAME in response.cookies

    def test_login_failure(self, client, owner):
        response = client.post(
            "/login",
            data={"email": "owner@example.com", "password": "wrong-password"},
            follow_redirects=False,
        )
        assert response.status_code == 401
        assert "Login fehlgeschlagen" in response.text

    def test_logged_in_user_skips_login_form(self, logged_in):
        response = logged_in.get("/login", follow_redirects=False)
        assert response.status_code == 303

    def test_logout(self, logged_in):
        response = logged_in.post("/logout", follow_redirects=False)
        assert response.status_code == 303
        assert logged_in.get("/admin", follow_redirects=False).headers["location"] == "/login"


class TestAdmin:
    def test_requires_login(self, client):
        response = client.get("/admin", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_tampered_cookie_is_rejected(self, client):
        client.cookies.set(SESSION_COOKIE_NAME, "forged")
        assert client.get("/admin", follow_redirects=False).status_code == 303

    def test_empty_dashboard(self, logged_in):
        response = logged_in.get("/admin")
        assert response.status_code == 200
        assert 'action="/admin/club"' in response.text

    def test_save_club_enqueues_build(self, logged_in, db):
        response = logged_in.post("/admin/club", data=_club_form(), follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin?saved=1"

        user = get_user_by_email(db, "trainer@example.com")
        club = get_club_by_owner(db, user.id)
        assert club.slug == "sv-adler"
        assert club.categories == "Yoga, Tanz, Klettern"
        assert [(h.day_of_week, h.opens_at) for h in club.opening_hours] == [(1, "17:00")]
        assert [c.title for c in club.courses] == ["Yoga"]
        assert get_build_task(db).status == "pending"

        page = logged_in.get("/admin?saved=1")
        assert "Club gespeichert." in page.text
        assert "/clubs/sv-adler/" in page.text

    def test_save_without_name_redisplays_form(self, logged_in, db):
        response = logged_in.post("/admin/club", data=_club_form(name="  ", description="Entwurf"), follow_redirects=False)
        assert response.status_code == 400
        assert "Bitte einen Clubnamen angeben." in response.text
        assert "Entwurf" in response.text
        assert get_build_task(db) is None

    def test_publish_now(self, logged_in, db):
        response = logged_in.post("/admin/build", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin?build=1"
        assert get_build_task(db).status == "pending"


class TestGeneratedSite:
    def _write_page(self, settings, slug="sv-adler"):
        page = Path(settings.output_dir) / "clubs" / slug / "index.html"
        page.parent.mkdir(parents=True)
        page.write_text("<h1>SV Adler</h1>", encoding="utf-8")
        asset = Path(settings.output_dir) / "assets" / "style.css"
        asset.parent.mkdir(parents=True)
        asset.write_text("body {}", encoding="utf-8")

    def test_serves_club_page(self, client, settings):
        self._write_page(settings)
        response = client.get("/clubs/sv-adler/")
        assert response.status_code == 200
        assert "<h1>SV Adler</h1>" in response.text
        assert client.get("/clubs/sv-adler/index.html").status_code == 200

    def test_redirects_to_trailing_slash(self, client, settings):
        self._write_page(settings)
        response = client.get("/clubs/sv-adler", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/clubs/sv-adler/"

    def test_serves_assets(self, client, settings):
        self._write_page(settings)
        assert client.get("/assets/style.css").text == "body {}"

    def test_missing_page(self, client):
        assert client.get("/clubs/unknown/").status_code == 404

    def test_no_escape_from_output_dir(self, client, settings):
        self._write_page(settings)
        assert client.get("/assets/..%2F..%2Fclubportal.db").status_code == 404
