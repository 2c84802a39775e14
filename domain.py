# domain.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class RawShift:
    """A shift record as it arrives from the input file, timestamps unparsed."""
    shift_id: int
    employee_id: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class Shift:
    """A validated shift. Both instants are timezone-aware UTC datetimes."""
    shift_id: int
    employee_id: int
    start_time: datetime
    end_time: datetime

    @property
    def dedup_key(self) -> tuple[int, int, datetime]:
        """Records colliding on this key are merged, not summed."""
        return (self.employee_id, self.shift_id, self.start_time)


@dataclass
class WeekSummary:
    """Hours worked by one employee during one work week."""
    employee_id: int
    week_start: date
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    invalid_shifts: list[int] = field(default_factory=list)

    @property
    def key(self) -> tuple[int, date]:
        return (self.employee_id, self.week_start)


class MalformedTimestamp(ValueError):
    """A start or end time of a raw shift is not a valid RFC3339 timestamp."""

    def __init__(self, field_name: str, record: RawShift):
        self.field = field_name
        self.record = record
        self.value = getattr(record, field_name)
        super().__init__(f"{field_name} was not rfc3339 compliant: {self.value!r} in {record!r}")
