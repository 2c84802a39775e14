# app.py
# -----------------------------------------------
# ⏱️ Weekly payroll summary (Streamlit)
# -----------------------------------------------
# Upload a JSON file of shifts, review regular/overtime hours per employee
# and work week (Sunday–Saturday, US Central), download JSON or PDF.

import logging

import streamlit as st

import config
from logging_utils import configure_logging
from repository import ShiftFileError, dumps_summaries, loads_raw_shifts
from report import summaries_to_pdf
from services import PayrollCalculator, validate_shifts
from utils import format_hours, summaries_to_dataframe

configure_logging(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# =========================
# Global parameters
# =========================
APP_TITLE = "Weekly payroll summary"

# =========================
# Page setup + header
# =========================
st.set_page_config(page_title=APP_TITLE, page_icon="⏱️", layout="centered")

st.markdown("""
<style>
.app-header {
  font-weight: 600;
  font-size: 1.5rem;
  line-height: 1.2;
  margin: 0.2rem 0 0.6rem 0;
}
@media (max-width: 480px) {
  .app-header {
    font-size: 1.05rem !important;
    white-space: nowrap !important;
    overflow: hidden !important;
    text-overflow: ellipsis !important;
  }
}
</style>
""", unsafe_allow_html=True)

st.markdown(f'<div class="app-header">⏱️ {APP_TITLE}</div>', unsafe_allow_html=True)
st.caption(f"Weeks start Sunday 00:00 US Central. Overtime above {config.OVERTIME_THRESHOLD_H:g} h per week.")

st.sidebar.empty()

# =========================
# 📤 Upload
# =========================
uploaded = st.file_uploader("Shift file (JSON)", type=["json"])
skip_invalid = st.checkbox("Skip records with malformed timestamps", value=False)

if uploaded is None:
    st.info("Upload a JSON array of shifts with ShiftID, EmployeeID, StartTime and EndTime.")
    st.stop()

try:
    raw_shifts = loads_raw_shifts(uploaded.getvalue())
    shifts, errors = validate_shifts(raw_shifts, skip_invalid=skip_invalid)
except ShiftFileError as e:
    st.error(f"Could not read the shift file: {e}")
    st.stop()
except ValueError as e:
    # MalformedTimestamp: the whole batch is rejected
    st.error(f"Malformed shift record, nothing was summarized: {e}")
    st.stop()

summaries = PayrollCalculator(config.OVERTIME_THRESHOLD_H).summarize(shifts)
logger.info("Summarized %d shifts from %s", len(shifts), uploaded.name)

if errors:
    with st.expander(f"⚠️ {len(errors)} records skipped", expanded=False):
        for err in errors:
            st.markdown(f"- Shift **{err.record.shift_id}**: {err.field} = `{err.value}`")

# =========================
# 📅 Weekly summary
# =========================
st.subheader("📅 Weekly summary")
df = summaries_to_dataframe(summaries)
if df.empty:
    st.info("No shifts in this file.")
else:
    st.dataframe(df, use_container_width=True, hide_index=True)

    for s in summaries:
        label = f"Employee {s.employee_id} · week of {s.week_start.strftime('%d/%m/%Y')} · {format_hours(s.regular_hours + s.overtime_hours)}"
        with st.expander(label, expanded=False):
            st.markdown(f"- **Regular hours**: {format_hours(s.regular_hours)}")
            st.markdown(f"- **Overtime hours**: {format_hours(s.overtime_hours)}")
            if s.invalid_shifts:
                st.markdown(f"- **Overlapping shifts (not counted)**: {', '.join(str(i) for i in s.invalid_shifts)}")

# =========================
# ⬇️ Downloads
# =========================
st.subheader("⬇️ Downloads")
st.download_button(
    "Download summary (JSON)",
    data=dumps_summaries(summaries).encode("utf-8"),
    file_name=config.OUTPUT_FILENAME,
    mime="application/json",
    use_container_width=True,
)
pdf_bytes = summaries_to_pdf(summaries, title=APP_TITLE)
st.download_button(
    "Download summary (PDF)",
    data=pdf_bytes,
    file_name=config.REPORT_FILENAME,
    mime="application/pdf",
    disabled=(len(pdf_bytes) == 0),
    use_container_width=True,
)
