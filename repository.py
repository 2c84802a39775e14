# repository.py
from __future__ import annotations

import errno
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from domain import RawShift, WeekSummary
from services import WEEKLY_OVERTIME_THRESHOLD, summarize, validate_shifts

logger = logging.getLogger(__name__)

# attribute name -> key used in the JSON files
RAW_SHIFT_FIELDS = {
    "shift_id": "ShiftID",
    "employee_id": "EmployeeID",
    "start_time": "StartTime",
    "end_time": "EndTime",
}

SUMMARY_FIELDS = {
    "employee_id": "EmployeeID",
    "week_start": "StartOfWeek",
    "regular_hours": "RegularHours",
    "overtime_hours": "OvertimeHours",
    "invalid_shifts": "InvalidShifts",
}

_ID_FIELDS = ("shift_id", "employee_id")


class ShiftFileError(ValueError):
    """The shift file is not a JSON array of well-formed shift objects."""


def raw_shift_from_dict(item: Any, index: int = 0) -> RawShift:
    if not isinstance(item, dict):
        raise ShiftFileError(f"element {index}: expected an object, got {type(item).__name__}")
    values = {}
    for attr, key in RAW_SHIFT_FIELDS.items():
        if key not in item:
            raise ShiftFileError(f"element {index}: missing field {key!r}")
        value = item[key]
        if attr in _ID_FIELDS:
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ShiftFileError(f"element {index}: {key} must be a non-negative integer, got {value!r}")
        elif not isinstance(value, str):
            raise ShiftFileError(f"element {index}: {key} must be a string, got {value!r}")
        values[attr] = value
    return RawShift(**values)


def parse_raw_shifts(payload: Any) -> List[RawShift]:
    """Maps a decoded JSON document to raw shift records."""
    if not isinstance(payload, list):
        raise ShiftFileError(f"expected a JSON array of shifts, got {type(payload).__name__}")
    return [raw_shift_from_dict(item, i) for i, item in enumerate(payload)]


def loads_raw_shifts(text: str | bytes) -> List[RawShift]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ShiftFileError(f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e
    return parse_raw_shifts(payload)


def summary_to_dict(summary: WeekSummary) -> dict:
    return {
        SUMMARY_FIELDS["employee_id"]: summary.employee_id,
        SUMMARY_FIELDS["week_start"]: summary.week_start.isoformat(),
        SUMMARY_FIELDS["regular_hours"]: summary.regular_hours,
        SUMMARY_FIELDS["overtime_hours"]: summary.overtime_hours,
        SUMMARY_FIELDS["invalid_shifts"]: list(summary.invalid_shifts),
    }


def dumps_summaries(summaries: Iterable[WeekSummary]) -> str:
    return json.dumps([summary_to_dict(s) for s in summaries], indent=2)


class ShiftFileRepository:
    """Reads shift files and writes summary files. Nothing is kept between runs."""
    def __init__(self, data_dir: Path | str = "."):
        self.data_dir = Path(data_dir)

    def resolve(self, path: Path | str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.data_dir / p

    def load_raw(self, path: Path | str) -> List[RawShift]:
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as e:
            raise ShiftFileError(f"Failed to open file: {p}: {e.strerror}") from e
        shifts = loads_raw_shifts(text)
        logger.info("Read %d shift records from %s", len(shifts), p)
        return shifts

    def write_summaries(self, path: Path | str, summaries: Iterable[WeekSummary]) -> Path:
        """Writes the summaries as pretty JSON, replacing the target atomically."""
        return self.write_bytes(path, dumps_summaries(summaries).encode("utf-8"))

    def write_bytes(self, path: Path | str, data: bytes) -> Path:
        return self.write_outputs({path: data})[0]

    def write_outputs(self, outputs: Dict[Path | str, bytes]) -> List[Path]:
        """
        Writes several files as one unit: every payload is staged in a temp file
        next to its target first, and targets are only replaced once all staged.
        If staging fails no target is touched.
        """
        staged: List[Tuple[str, Path]] = []
        try:
            for path, data in outputs.items():
                dest = self.resolve(path)
                if dest.is_dir():
                    raise IsADirectoryError(errno.EISDIR, "Is a directory", str(dest))
                dest.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp")
                staged.append((tmp, dest))
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
            for tmp, dest in staged:
                os.replace(tmp, dest)
                logger.info("Wrote %s", dest)
        except BaseException:
            for tmp, _ in staged:
                Path(tmp).unlink(missing_ok=True)
            raise
        return [dest for _, dest in staged]


def summarize_shifts_file(
    path: Path | str,
    skip_invalid: bool = False,
    weekly_threshold: float = WEEKLY_OVERTIME_THRESHOLD,
) -> List[WeekSummary]:
    """Reads, validates and summarizes a shift file. Fails on the first malformed record by default."""
    raw = ShiftFileRepository().load_raw(path)
    shifts, _ = validate_shifts(raw, skip_invalid=skip_invalid)
    return summarize(shifts, weekly_threshold)


__all__ = [
    "RAW_SHIFT_FIELDS",
    "SUMMARY_FIELDS",
    "ShiftFileError",
    "ShiftFileRepository",
    "dumps_summaries",
    "loads_raw_shifts",
    "parse_raw_shifts",
    "summarize_shifts_file",
]
