# config.py
# Environment-driven settings. The data directory is probed on demand.
import logging
import os
from pathlib import Path

from services import WEEKLY_OVERTIME_THRESHOLD

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = "employee_summaries.json"
REPORT_FILENAME = "employee_summaries.pdf"


def pick_data_dir() -> Path:
    """First writable directory of PAYROLL_DATA_DIR, /data, ./data; falls back to the working directory."""
    candidates = []
    env = os.getenv("PAYROLL_DATA_DIR")
    if env:
        candidates.append(Path(env))
    candidates += [Path("/data"), Path.cwd() / "data"]

    for p in candidates:
        try:
            p.mkdir(parents=True, exist_ok=True)
            t = p / ".rwtest"
            t.write_text("ok")
            t.unlink(missing_ok=True)
            return p
        except OSError:
            continue
    return Path.cwd()


def _threshold_from_env() -> float:
    raw = os.getenv("PAYROLL_OVERTIME_THRESHOLD")
    if not raw:
        return WEEKLY_OVERTIME_THRESHOLD
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring PAYROLL_OVERTIME_THRESHOLD=%r, using %.1f", raw, WEEKLY_OVERTIME_THRESHOLD)
        return WEEKLY_OVERTIME_THRESHOLD


OVERTIME_THRESHOLD_H = _threshold_from_env()
LOG_LEVEL = os.getenv("PAYROLL_LOG_LEVEL", "INFO").upper()
