"""Tests for the static site builder (view models, grouping, pipeline output)."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from clubportal.core.errors import SiteBuildError
from clubportal.core.i18n import Translator
from clubportal.site.builder import (
    BuildOptions,
    build_opening_hours,
    build_schedule,
    build_site,
    format_time_range,
    missing_club_data,
    time_key,
)
from clubportal.site.pipeline import match_pattern


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hour(day, opens="", closes="", note=""):
    return SimpleNamespace(day_of_week=day, opens_at=opens, closes_at=closes, note=note)


def _course(day, title, start="", end="", **extra):
    values = {"location": "", "instructor": "", "level": "", "description": ""}
    values.update(extra)
    return SimpleNamespace(day_of_week=day, title=title, start_time=start, end_time=end, **values)


def _club(slug="sv-adler", name="SV Adler", **extra):
    values = {
        "description": "",
        "categories": "",
        "contact_name": "",
        "contact_role": "",
        "contact_email": "",
        "contact_phone": "",
        "contact_website": "",
        "address_line1": "",
        "address_line2": "",
        "address_postal": "",
        "address_city": "",
        "address_country": "",
        "opening_hours": [],
        "courses": [],
    }
    values.update(extra)
    return SimpleNamespace(slug=slug, name=name, **values)


def _options(tmp_path, **extra):
    return BuildOptions(output_dir=tmp_path / "public", **extra)


def _snapshot(root: Path) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


# ---------------------------------------------------------------------------
# time helpers
# ---------------------------------------------------------------------------

class TestTimeKey:
    def test_pads_single_digit_hour(self):
        assert time_key("9:00") == "09:00"

    def test_keeps_padded(self):
        assert time_key("18:30") == "18:30"

    def test_trims(self):
        assert time_key(" 7:15 ") == "07:15"

    def test_other_text_unchanged(self):
        assert time_key("abends") == "abends"
        assert time_key(None) == ""


class TestFormatTimeRange:
    def test_both(self):
        assert format_time_range("18:00", "19:30") == "18:00 - 19:30"

    def test_only_start(self):
        assert format_time_range("18:00", "") == "18:00"

    def test_only_end(self):
        assert format_time_range(" ", "19:30") == "19:30"

    def test_neither_uses_translation(self):
        assert format_time_range("", "") == "nach Vereinbarung"
        assert format_time_range("", "", Translator(default_locale="en")) == "by arrangement"


# ---------------------------------------------------------------------------
# opening hours / schedule
# ---------------------------------------------------------------------------

class TestOpeningHours:
    def test_seven_entries_monday_first(self):
        hours, has_any = build_opening_hours([_hour(3, "17:00", "21:00"), _hour(1, "17:00", "21:00")])
        assert [h.day_of_week for h in hours] == [1, 2, 3, 4, 5, 6, 7]
        assert hours[0].day == "Montag"
        assert (hours[0].open, hours[0].close) == ("17:00", "21:00")
        assert (hours[1].open, hours[1].close, hours[1].note) == ("", "", "")
        assert hours[2].open == "17:00"
        assert has_any is True

    def test_first_row_per_day_wins(self):
        hours, _ = build_opening_hours([_hour(2, "08:00", "12:00"), _hour(2, "14:00", "18:00")])
        assert hours[1].open == "08:00"

    def test_note_only_counts(self):
        _, has_any = build_opening_hours([_hour(6, note="nur nach Absprache")])
        assert has_any is True

    def test_empty(self):
        hours, has_any = build_opening_hours(None)
        assert len(hours) == 7
        assert has_any is False

    def test_out_of_range_days_ignored(self):
        hours, has_any = build_opening_hours([_hour(0, "08:00"), _hour(8, "08:00")])
        assert has_any is False


class TestSchedule:
    def test_groups_by_day_and_slot(self):
        courses = [
            _course(3, "Kinderturnen", "17:00", "18:00"),
            _course(2, "Yoga", "18:00", "19:30"),
            _course(2, "Pilates", "18:00", "19:30"),
            _course(2, "Rueckenfit", "9:00", "10:00"),
            _course(3, "Volleyball", "19:00", "20:30"),
        ]
        schedule, has_schedule = build_schedule(courses)
        assert has_schedule is True
        assert [d.day for d in schedule] == ["Dienstag", "Mittwoch"]
        tuesday = schedule[0]
        assert [s.time for s in tuesday.slots] == ["9:00 - 10:00", "18:00 - 19:30"]
        assert [c.title for c in tuesday.slots[1].courses] == ["Pilates", "Yoga"]
        assert [len(s.courses) for s in schedule[1].slots] == [1, 1]

    def test_tuesday_morning_before_evening(self):
        courses = [
            _course(2, "Yoga", "18:00", "19:00"),
            _course(2, "Rueckenfit", "09:00", "10:00"),
            _course(3, "Kinderturnen", "17:00", "18:00"),
        ]
        schedule, _ = build_schedule(courses)
        assert [d.day_of_week for d in schedule] == [2, 3]
        assert [s.time for s in schedule[0].slots] == ["09:00 - 10:00", "18:00 - 19:00"]

    def test_slot_sizes(self):
        courses = [
            _course(1, "A", "10:00", "11:00"),
            _course(1, "B", "10:00", "11:00"),
            _course(1, "C", "12:00", "13:00"),
            _course(1, "D", "12:00", "13:00"),
            _course(1, "E", "14:00", "15:00"),
            _course(1, "F", "14:00", "15:00"),
            _course(1, "G", "14:00", "15:00"),
        ]
        schedule, _ = build_schedule(courses)
        assert [len(s.courses) for s in schedule[0].slots] == [2, 2, 3]

    def test_courses_without_times(self):
        schedule, _ = build_schedule([_course(5, "Lauftreff")])
        assert schedule[0].slots[0].time == "nach Vereinbarung"

    def test_invalid_day_skipped(self):
        schedule, has_schedule = build_schedule([_course(9, "Geister")])
        assert schedule == []
        assert has_schedule is False

    def test_input_order_untouched(self):
        courses = [_course(4, "Z", "20:00"), _course(1, "A", "08:00")]
        build_schedule(courses)
        assert [c.title for c in courses] == ["Z", "A"]


class TestMatchPattern:
    def test_captures_params(self):
        assert match_pattern("clubs/:slug/index", "clubs/sv-adler/index") == {"slug": "sv-adler"}

    def test_mismatch(self):
        assert match_pattern("clubs/:slug/index", "clubs/sv-adler") is None
        assert match_pattern("clubs/:slug/index", "teams/sv-adler/index") is None


def test_missing_club_placeholder():
    data = missing_club_data("ghost", Translator())
    assert data["name"] == "Club"
    assert data["has_schedule"] is False
    assert len(data["opening_hours"]) == 7


# ---------------------------------------------------------------------------
# build_site
# ---------------------------------------------------------------------------

class TestBuildSite:
    def test_writes_one_page_per_club_and_assets(self, tmp_path):
        clubs = [
            _club(
                categories="yoga, Klettern",
                description="Sport im Kiez",
                address_city="Berlin",
                contact_email="info@adler.example",
                opening_hours=[_hour(1, "17:00", "21:00")],
                courses=[_course(2, "Yoga", "18:00", "19:30", level="Alle Level")],
            ),
            _club(slug="tsv-nord", name="TSV Nord"),
        ]
        result = build_site(clubs, _options(tmp_path))
        out = tmp_path / "public"
        assert result.clubs == 2
        assert result.pages == 2
        assert (out / "assets" / "style.css").is_file()
        html = (out / "clubs" / "sv-adler" / "index.html").read_text(encoding="utf-8")
        assert "<h1>SV Adler</h1>" in html
        assert "Yoga" in html and "Klettern" in html
        assert "18:00 - 19:30" in html
        assert "Montag" in html
        assert "info@adler.example" in html
        assert (out / "clubs" / "tsv-nord" / "index.html").is_file()

    def test_escapes_club_text(self, tmp_path):
        build_site([_club(name="<script>alert(1)</script>")], _options(tmp_path))
        html = (tmp_path / "public" / "clubs" / "sv-adler" / "index.html").read_text(encoding="utf-8")
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_same_input_same_bytes(self, tmp_path):
        clubs = [_club(courses=[_course(1, "B", "10:00"), _course(1, "A", "10:00")])]
        build_site(clubs, _options(tmp_path))
        first = _snapshot(tmp_path / "public")
        build_site(clubs, _options(tmp_path))
        assert _snapshot(tmp_path / "public") == first

    def test_removed_club_page_disappears(self, tmp_path):
        build_site([_club(), _club(slug="tsv-nord", name="TSV Nord")], _options(tmp_path))
        build_site([_club()], _options(tmp_path))
        out = tmp_path / "public"
        assert (out / "clubs" / "sv-adler" / "index.html").is_file()
        assert not (out / "clubs" / "tsv-nord").exists()

    def test_failed_build_keeps_previous_output(self, tmp_path):
        build_site([_club()], _options(tmp_path))
        before = _snapshot(tmp_path / "public")
        empty_templates = tmp_path / "no-templates"
        empty_templates.mkdir()
        with pytest.raises(SiteBuildError):
            build_site([_club(), _club(slug="tsv-nord", name="TSV Nord")], _options(tmp_path, template_dir=empty_templates))
        assert _snapshot(tmp_path / "public") == before
        assert not (tmp_path / "public.staging").exists()

    def test_missing_asset_dir_fails(self, tmp_path):
        with pytest.raises(SiteBuildError):
            build_site([_club()], _options(tmp_path, asset_dir=tmp_path / "nope"))
        assert not (tmp_path / "public").exists()

    def test_no_clubs_still_builds(self, tmp_path):
        result = build_site([], _options(tmp_path))
        assert result.pages == 0
        assert (tmp_path / "public" / "assets" / "style.css").is_file()
