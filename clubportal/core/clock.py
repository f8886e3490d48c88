"""
Wall-clock helpers for the nightly build schedule and stored timestamps.

Nightly times are "HH:MM" on the worker's local clock. Stored timestamps are UTC;
SQLite hands them back naive, so every comparison goes through as_utc().
"""
import re
from datetime import datetime, timedelta, timezone

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

# Go-style durations ("5s", "5m", "1h30m", "250ms") as used in existing deployments' env files.
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_clock(value: str) -> tuple[int, int]:
    """Parse "HH:MM" (24h). Raises ValueError when the format or range is invalid."""
    match = _CLOCK_RE.match(value or "")
    if not match:
        raise ValueError(f"invalid time {value!r}, expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if not 0 <= hour <= 23:
        raise ValueError(f"invalid hour in {value!r}")
    if not 0 <= minute <= 59:
        raise ValueError(f"invalid minute in {value!r}")
    return hour, minute


def next_nightly_run(now: datetime, at: str) -> datetime:
    """Next occurrence of `at` strictly after `now` (today if still ahead, otherwise tomorrow)."""
    hour, minute = parse_clock(at)
    run = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if run <= now:
        run += timedelta(days=1)
    return run


def parse_go_duration(value: str) -> timedelta | None:
    """Return a timedelta for strings like "90s" or "1h30m"; None when the string is not in that form."""
    text = (value or "").strip().lower()
    if not text:
        return None
    pos = 0
    seconds = 0.0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            return None
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        return None
    return timedelta(seconds=seconds)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
