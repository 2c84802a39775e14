# workweek.py
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple
from zoneinfo import ZoneInfo

# Work weeks run Sunday 00:00 to Sunday 00:00 in US Central time.
BUSINESS_TZ = ZoneInfo("America/Chicago")

_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt ]([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?"
    r"(?:([Zz])|([+-])([0-9]{2}):([0-9]{2}))"
)


class WeekBounds(NamedTuple):
    start_of_week: datetime
    end_of_week: datetime
    end_start_of_week: datetime
    start_week_date: date
    end_week_date: date

    @property
    def spans_two_weeks(self) -> bool:
        return self.start_of_week != self.end_start_of_week


def parse_rfc3339(value: str) -> datetime:
    """
    Parses an RFC3339 timestamp and returns it as an aware UTC datetime.
    The UTC offset is mandatory; fractional seconds are truncated to microseconds.
    A leap second (:60) is the instant one second after :59.
    Raises ValueError on anything else.
    """
    m = _RFC3339.fullmatch(value)
    if m is None:
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")
    year, month, day, hour, minute, second = (int(g) for g in m.group(1, 2, 3, 4, 5, 6))
    frac = m.group(7) or ""
    micro = int((frac + "000000")[:6])
    if m.group(8):
        tz = timezone.utc
    else:
        off_h, off_m = int(m.group(10)), int(m.group(11))
        if off_h > 23 or off_m > 59:
            raise ValueError(f"invalid UTC offset in {value!r}")
        offset = timedelta(hours=off_h, minutes=off_m)
        tz = timezone(-offset if m.group(9) == "-" else offset)
    leap = second == 60
    # datetime() rejects out-of-range calendar and clock fields
    parsed = datetime(year, month, day, hour, minute, 59 if leap else second, micro, tzinfo=tz)
    if leap:
        parsed += timedelta(seconds=1)
    return parsed.astimezone(timezone.utc)


def days_since_sunday(d: date) -> int:
    return (d.weekday() + 1) % 7


def start_of_week(instant: datetime, tz: ZoneInfo = BUSINESS_TZ) -> datetime:
    """Local Sunday midnight of the work week containing `instant`, as an aware datetime in `tz`."""
    local = instant.astimezone(tz)
    sunday = local.date() - timedelta(days=days_since_sunday(local.date()))
    return datetime.combine(sunday, time(0, 0), tzinfo=tz)


def week_bounds(start: datetime, end: datetime, tz: ZoneInfo = BUSINESS_TZ) -> WeekBounds:
    """
    Resolves the work-week boundaries of a shift.

    The week of `end` is resolved from the local weekday of `end` itself, never
    from the weekday of `start`. The end of the start week is computed on the
    local calendar (next Sunday midnight), so a DST change inside the week
    yields a 167 or 169 hour week.
    """
    week_start_local = start_of_week(start, tz)
    week_end_local = week_start_local + timedelta(days=7)  # wall-clock arithmetic
    end_week_start_local = start_of_week(end, tz)
    return WeekBounds(
        start_of_week=week_start_local.astimezone(timezone.utc),
        end_of_week=week_end_local.astimezone(timezone.utc),
        end_start_of_week=end_week_start_local.astimezone(timezone.utc),
        start_week_date=week_start_local.date(),
        end_week_date=end_week_start_local.date(),
    )


def whole_minutes(delta: timedelta) -> int:
    """Duration in minutes, truncated toward zero."""
    return int(delta.total_seconds() / 60)


def hours_between(start: datetime, end: datetime) -> float:
    return whole_minutes(end - start) / 60
