"""Clock Utilities — pure duration math and countdown formatting between two instants.

Invariants:
    - Every function takes `now` explicitly; nothing here reads the wall clock
    - Durations returned are never negative (a past instant yields timedelta(0))
    - Naive datetimes are interpreted as UTC (SQLite drops tzinfo on read)

Design Decisions:
    - Two countdown formats: rounds show "Nd Hh" / "Hh", vote cards show "Nd Hh" / "Hh Mm"
      because votes close on a finer schedule than 72h discussion rounds
    - Hall-of-fame week key pairs the ISO week number with the calendar year, matching
      how the weekly ranking job writes (week_number, year)
"""

from datetime import date, datetime, timedelta, timezone

ENDED_LABEL = "ended"

_SECONDS_PER_HOUR = 3600
_SECONDS_PER_DAY = 86_400


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def remaining(ends_at: datetime, now: datetime) -> timedelta:
    """Time left until ends_at, floored at zero."""
    delta = ensure_utc(ends_at) - ensure_utc(now)
    return max(delta, timedelta(0))


def elapsed(start: datetime, now: datetime) -> timedelta:
    """Time since start, floored at zero."""
    delta = ensure_utc(now) - ensure_utc(start)
    return max(delta, timedelta(0))


def split_days_hours(delta: timedelta) -> tuple[int, int]:
    """Whole days, and whole hours within the last day."""
    seconds = max(int(delta.total_seconds()), 0)
    days = seconds // _SECONDS_PER_DAY
    hours = (seconds // _SECONDS_PER_HOUR) % 24
    return days, hours


def format_round_countdown(delta: timedelta) -> str:
    """'2d 5h' while days remain, '5h' on the last day."""
    days, hours = split_days_hours(delta)
    if days > 0:
        return f"{days}d {hours}h"
    return f"{hours}h"


def format_vote_countdown(ends_at: datetime, now: datetime) -> str:
    """Vote card countdown: 'ended', 'Nd Hh' (>= 24h left) or 'Hh Mm'."""
    left = remaining(ends_at, now)
    seconds = int(left.total_seconds())
    if seconds <= 0:
        return ENDED_LABEL
    hours = seconds // _SECONDS_PER_HOUR
    minutes = (seconds % _SECONDS_PER_HOUR) // 60
    if hours >= 24:
        return f"{hours // 24}d {hours % 24}h"
    return f"{hours}h {minutes}m"


def vote_time_left_pct(
    created_at: datetime, ends_at: datetime, now: datetime,
) -> float:
    """Share of the vote window still left, 100 at creation draining to 0."""
    total = (ensure_utc(ends_at) - ensure_utc(created_at)).total_seconds()
    if total <= 0:
        return 0.0
    left = (ensure_utc(ends_at) - ensure_utc(now)).total_seconds()
    return max(0.0, min(100.0, left / total * 100))


def hall_of_fame_week(day: date) -> tuple[int, int]:
    """(calendar year, ISO week number) — the key the weekly ranking job writes."""
    return day.year, day.isocalendar()[1]
