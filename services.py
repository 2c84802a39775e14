# services.py
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Tuple

from domain import MalformedTimestamp, RawShift, Shift, WeekSummary
from workweek import hours_between, parse_rfc3339, week_bounds

logger = logging.getLogger(__name__)

WEEKLY_OVERTIME_THRESHOLD = 40.0

SummaryKey = Tuple[int, date]


def validate_shift(raw: RawShift) -> Shift:
    """
    Turns a raw record into a Shift, parsing both timestamps.
    Raises MalformedTimestamp naming the offending field.
    """
    # end before start is accepted as is, only reported
    try:
        start = parse_rfc3339(raw.start_time)
    except ValueError as exc:
        raise MalformedTimestamp("start_time", raw) from exc
    try:
        end = parse_rfc3339(raw.end_time)
    except ValueError as exc:
        raise MalformedTimestamp("end_time", raw) from exc
    if end < start:
        logger.warning("Shift %s of employee %s ends before it starts (%s < %s)",
                       raw.shift_id, raw.employee_id, raw.end_time, raw.start_time)
    return Shift(shift_id=raw.shift_id, employee_id=raw.employee_id, start_time=start, end_time=end)


def validate_shifts(
    raw_shifts: Iterable[RawShift], skip_invalid: bool = False
) -> Tuple[List[Shift], List[MalformedTimestamp]]:
    """
    Validates a batch. By default the first malformed record aborts the batch.
    With skip_invalid=True malformed records are dropped and returned as errors.
    """
    shifts: List[Shift] = []
    errors: List[MalformedTimestamp] = []
    for raw in raw_shifts:
        try:
            shifts.append(validate_shift(raw))
        except MalformedTimestamp as exc:
            if not skip_invalid:
                raise
            logger.warning("Skipping shift %s: %s", raw.shift_id, exc)
            errors.append(exc)
    return shifts, errors


def shifts_conflict(a: Shift, b: Shift) -> bool:
    """True if an endpoint of either shift lies strictly inside the other one."""
    if b.start_time < a.start_time < b.end_time:
        return True
    if b.start_time < a.end_time < b.end_time:
        return True
    # both directions, so a shift fully containing the other is caught too
    if a.start_time < b.start_time < a.end_time:
        return True
    if a.start_time < b.end_time < a.end_time:
        return True
    return False


def overlaps_another(shift: Shift, employee_shifts: Iterable[Shift]) -> bool:
    """Checks `shift` against the other shifts of the same employee, compared by shift id."""
    for other in employee_shifts:
        if other.employee_id != shift.employee_id or other.shift_id == shift.shift_id:
            continue
        if shifts_conflict(shift, other):
            return True
    return False


def deduplicate(shifts: Iterable[Shift]) -> List[Shift]:
    """Collapses shifts sharing (employee, shift id, start); the last record wins."""
    unique: Dict[tuple, Shift] = {}
    total = 0
    for s in shifts:
        unique[s.dedup_key] = s
        total += 1
    if total != len(unique):
        logger.debug("Merged %d duplicate shift records", total - len(unique))
    return list(unique.values())


class PayrollCalculator:
    """Business rules for weekly regular hours, overtime and overlapping shifts."""
    def __init__(self, weekly_threshold: float = WEEKLY_OVERTIME_THRESHOLD):
        self.weekly_threshold = weekly_threshold

    @staticmethod
    def _summary_for(summaries: Dict[SummaryKey, WeekSummary], employee_id: int, week: date) -> WeekSummary:
        key = (employee_id, week)
        summary = summaries.get(key)
        if summary is None:
            summary = summaries[key] = WeekSummary(employee_id=employee_id, week_start=week)
        return summary

    def aggregate(self, shifts: Iterable[Shift]) -> Dict[SummaryKey, WeekSummary]:
        """
        Builds one summary per (employee, work week) with uncapped regular hours.
        Conflicting shifts add no hours and are listed under the week of their start.
        A shift crossing Sunday midnight is split between both weeks.
        """
        unique = deduplicate(shifts)
        by_employee: Dict[int, List[Shift]] = defaultdict(list)
        for s in unique:
            by_employee[s.employee_id].append(s)

        summaries: Dict[SummaryKey, WeekSummary] = {}
        for s in unique:
            bounds = week_bounds(s.start_time, s.end_time)

            if overlaps_another(s, by_employee[s.employee_id]):
                self._summary_for(summaries, s.employee_id, bounds.start_week_date).invalid_shifts.append(s.shift_id)
                continue

            if bounds.spans_two_weeks:
                first = self._summary_for(summaries, s.employee_id, bounds.start_week_date)
                first.regular_hours += hours_between(s.start_time, bounds.end_of_week)
                second = self._summary_for(summaries, s.employee_id, bounds.end_week_date)
                second.regular_hours += hours_between(bounds.end_start_of_week, s.end_time)
            else:
                summary = self._summary_for(summaries, s.employee_id, bounds.start_week_date)
                summary.regular_hours += hours_between(s.start_time, s.end_time)

        logger.debug("Aggregated %d shifts into %d weekly summaries", len(unique), len(summaries))
        return summaries

    def apply_overtime(self, summaries: Iterable[WeekSummary]) -> None:
        """Moves hours above the weekly threshold into overtime. Running it twice is a no-op."""
        for summary in summaries:
            if summary.regular_hours > self.weekly_threshold:
                summary.overtime_hours = summary.regular_hours - self.weekly_threshold
                summary.regular_hours = self.weekly_threshold

    def summarize(self, shifts: Iterable[Shift]) -> List[WeekSummary]:
        summaries = self.aggregate(shifts)
        result = [summaries[k] for k in sorted(summaries)]
        self.apply_overtime(result)
        return result


def summarize(shifts: Iterable[Shift], weekly_threshold: float = WEEKLY_OVERTIME_THRESHOLD) -> List[WeekSummary]:
    """Weekly summaries for validated shifts, ordered by employee and week."""
    return PayrollCalculator(weekly_threshold).summarize(shifts)
