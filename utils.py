# utils.py
import pandas as pd
from typing import Iterable
from domain import WeekSummary

SUMMARY_COLUMNS = ["Employee", "Week start", "Regular hours", "Overtime hours", "Invalid shifts"]


def hours_to_minutes(hours: float) -> int:
    return int(round(float(hours) * 60))


def format_minutes(minutes: int) -> str:
    if minutes == 0:
        return "0 min"
    sign = "-" if minutes < 0 else ""
    minutes = abs(int(minutes))
    h, m = divmod(minutes, 60)
    if h == 0:
        return f"{sign}{m} min"
    if m == 0:
        return f"{sign}{h} h"
    return f"{sign}{h} h {m} min"


def format_hours(hours: float) -> str:
    return format_minutes(hours_to_minutes(hours))


def summaries_to_dataframe(summaries: Iterable[WeekSummary]) -> pd.DataFrame:
    rows = []
    for s in summaries:
        rows.append({
            "Employee": s.employee_id,
            "Week start": s.week_start.isoformat(),
            "Regular hours": round(s.regular_hours, 2),
            "Overtime hours": round(s.overtime_hours, 2),
            "Invalid shifts": ", ".join(str(i) for i in s.invalid_shifts),
        })
    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    if not df.empty:
        df = df.sort_values(["Employee", "Week start"]).reset_index(drop=True)
    return df
