from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from domain import MalformedTimestamp, RawShift, WeekSummary
from repository import (
    ShiftFileError,
    ShiftFileRepository,
    dumps_summaries,
    loads_raw_shifts,
    parse_raw_shifts,
    summarize_shifts_file,
)

DATA_DIR = Path(__file__).resolve().parent / "data"


def _record(**overrides) -> dict:
    record = {
        "ShiftID": 1,
        "EmployeeID": 2,
        "StartTime": "2024-07-02T12:00:00Z",
        "EndTime": "2024-07-02T20:00:00Z",
    }
    record.update(overrides)
    return record


def test_read_multiple_employee_shifts() -> None:
    shifts = ShiftFileRepository().load_raw(DATA_DIR / "shifts_multiple.json")

    assert len(shifts) == 3
    assert shifts[0] == RawShift(
        shift_id=2663141019,
        employee_id=41488322,
        start_time="2021-08-30T12:30:00.000000Z",
        end_time="2021-08-30T21:00:00.000000Z",
    )
    assert shifts[2].shift_id == 2662828955
    assert shifts[2].employee_id == 38410756


def test_summarize_shifts_file() -> None:
    summaries = summarize_shifts_file(DATA_DIR / "shifts_multiple.json")
    by_key = {s.key: s for s in summaries}

    assert by_key[(41488322, date(2021, 8, 29))].regular_hours == 8.5
    assert by_key[(34009849, date(2021, 8, 22))].regular_hours == 12.5
    assert by_key[(38410756, date(2021, 8, 22))].regular_hours == 12.5


def test_summarize_shifts_file_fails_on_malformed_timestamp(tmp_path: Path) -> None:
    path = tmp_path / "shifts.json"
    path.write_text(json.dumps([_record(), _record(ShiftID=2, EndTime="yesterday")]))

    with pytest.raises(MalformedTimestamp) as exc_info:
        summarize_shifts_file(path)
    assert exc_info.value.record.shift_id == 2

    summaries = summarize_shifts_file(path, skip_invalid=True)
    assert [(s.employee_id, s.regular_hours) for s in summaries] == [(2, 8.0)]


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"ShiftID": 1}, "JSON array"),
        ([42], "expected an object"),
        ([{"ShiftID": 1, "EmployeeID": 2, "StartTime": "x"}], "EndTime"),
        ([_record(ShiftID=True)], "ShiftID"),
        ([_record(EmployeeID=-4)], "EmployeeID"),
        ([_record(EmployeeID="2")], "EmployeeID"),
        ([_record(StartTime=1719921600)], "StartTime"),
    ],
)
def test_parse_rejects_malformed_records(payload: object, message: str) -> None:
    with pytest.raises(ShiftFileError, match=message):
        parse_raw_shifts(payload)


def test_loads_reports_invalid_json() -> None:
    with pytest.raises(ShiftFileError, match="line 1"):
        loads_raw_shifts("[{")


def test_missing_file_is_a_shift_file_error(tmp_path: Path) -> None:
    with pytest.raises(ShiftFileError, match="Failed to open file"):
        ShiftFileRepository().load_raw(tmp_path / "nope.json")


def test_summaries_use_wire_field_names() -> None:
    summary = WeekSummary(7, date(2024, 6, 30), regular_hours=40.0, overtime_hours=2.5, invalid_shifts=[3, 1])

    payload = json.loads(dumps_summaries([summary]))

    assert payload == [
        {
            "EmployeeID": 7,
            "StartOfWeek": "2024-06-30",
            "RegularHours": 40.0,
            "OvertimeHours": 2.5,
            "InvalidShifts": [3, 1],
        }
    ]


def test_write_summaries_into_data_dir(tmp_path: Path) -> None:
    repo = ShiftFileRepository(tmp_path)
    summary = WeekSummary(7, date(2024, 6, 30), regular_hours=8.5)

    dest = repo.write_summaries("out/employee_summaries.json", [summary])

    assert dest == tmp_path / "out" / "employee_summaries.json"
    text = dest.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert json.loads(text)[0]["RegularHours"] == 8.5
    assert [p.name for p in dest.parent.iterdir()] == ["employee_summaries.json"]
