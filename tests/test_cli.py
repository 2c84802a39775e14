from __future__ import annotations

import json
from pathlib import Path

import pytest

import config
from cli import main

DATA_DIR = Path(__file__).resolve().parent / "data"


def test_cli_writes_summary_file(tmp_path: Path) -> None:
    out = tmp_path / "employee_summaries.json"

    code = main([str(DATA_DIR / "shifts_multiple.json"), "-o", str(out)])

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert {(row["EmployeeID"], row["StartOfWeek"]) for row in payload} == {
        (41488322, "2021-08-29"),
        (34009849, "2021-08-22"),
        (38410756, "2021-08-22"),
    }


def test_cli_malformed_input_writes_nothing(tmp_path: Path) -> None:
    src = tmp_path / "shifts.json"
    src.write_text(json.dumps([{"ShiftID": 1, "EmployeeID": 2, "StartTime": "bad", "EndTime": "2024-07-02T20:00:00Z"}]))
    out = tmp_path / "out.json"

    assert main([str(src), "-o", str(out)]) == 1
    assert not out.exists()


def test_cli_skip_invalid_and_pdf(tmp_path: Path) -> None:
    src = tmp_path / "shifts.json"
    src.write_text(json.dumps([
        {"ShiftID": 1, "EmployeeID": 2, "StartTime": "bad", "EndTime": "2024-07-02T20:00:00Z"},
        {"ShiftID": 2, "EmployeeID": 2, "StartTime": "2024-07-01T13:00:00Z", "EndTime": "2024-07-02T01:00:00Z"},
    ]))
    out = tmp_path / "out.json"
    pdf = tmp_path / "report.pdf"

    code = main([str(src), "-o", str(out), "--skip-invalid", "--pdf", str(pdf), "--threshold", "10"])

    assert code == 0
    assert json.loads(out.read_text(encoding="utf-8")) == [
        {"EmployeeID": 2, "StartOfWeek": "2024-06-30", "RegularHours": 10.0, "OvertimeHours": 2.0, "InvalidShifts": []}
    ]
    assert pdf.read_bytes().startswith(b"%PDF")


def test_cli_failed_pdf_write_leaves_no_summary(tmp_path: Path) -> None:
    out = tmp_path / "out.json"
    pdf_dir = tmp_path / "report.pdf"
    pdf_dir.mkdir()

    code = main([str(DATA_DIR / "shifts_multiple.json"), "-o", str(out), "--pdf", str(pdf_dir)])

    assert code == 1
    assert not out.exists()
    assert [p.name for p in tmp_path.iterdir()] == ["report.pdf"]


def test_cli_absolute_outputs_do_not_probe_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail() -> Path:
        raise AssertionError("data directory probed")

    monkeypatch.setattr(config, "pick_data_dir", fail)
    out = tmp_path / "out.json"

    assert main([str(DATA_DIR / "shifts_multiple.json"), "-o", str(out)]) == 0
    assert out.exists()


def test_cli_relative_output_lands_in_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAYROLL_DATA_DIR", str(tmp_path / "payroll"))

    assert main([str(DATA_DIR / "shifts_multiple.json"), "-o", "weekly.json"]) == 0
    assert (tmp_path / "payroll" / "weekly.json").exists()
