# report.py
# PDF export of the weekly summaries: one row per employee-week, overtime rows
# highlighted, totals box under the table.
from __future__ import annotations

import io
from typing import Iterable, List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain import WeekSummary
from utils import format_hours

BORDER_COLOR = colors.HexColor("#C7CCD6")
OVERTIME_ROW_COLOR = colors.HexColor("#FDECEA")
HEADER = ["Employee", "Week start", "Regular", "Overtime", "Overlapping shifts (not counted)"]
# Regular / Overtime
HOUR_COLUMNS = (2, 3)
COL_WIDTHS = [90, 80, 90, 90, 400]


def _rows(summaries: List[WeekSummary], cell_style: ParagraphStyle) -> list:
    rows = []
    for s in summaries:
        invalid = ", ".join(str(i) for i in s.invalid_shifts) or "-"
        rows.append([
            str(s.employee_id),
            s.week_start.isoformat(),
            format_hours(s.regular_hours),
            format_hours(s.overtime_hours),
            # Paragraph so long id lists wrap inside the column
            Paragraph(invalid, cell_style),
        ])
    return rows


def _table_style(summaries: List[WeekSummary]) -> TableStyle:
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (0, 0), (1, -1), "CENTER"),
        ("ALIGN", (HOUR_COLUMNS[0], 0), (HOUR_COLUMNS[-1], -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for row, s in enumerate(summaries, start=1):
        if s.overtime_hours > 0:
            commands.append(("BACKGROUND", (0, row), (-1, row), OVERTIME_ROW_COLOR))
            commands.append(("FONTNAME", (HOUR_COLUMNS[-1], row), (HOUR_COLUMNS[-1], row), "Helvetica-Bold"))
    return TableStyle(commands)


def _totals_box(summaries: List[WeekSummary], width: float, styles) -> Table:
    regular = sum(s.regular_hours for s in summaries)
    overtime = sum(s.overtime_hours for s in summaries)
    invalid = sum(len(s.invalid_shifts) for s in summaries)
    employees = len({s.employee_id for s in summaries})
    overtime_weeks = sum(1 for s in summaries if s.overtime_hours > 0)
    main = ParagraphStyle(name="TotalsMain", parent=styles["Normal"], alignment=TA_CENTER, fontSize=11, leading=13)
    detail = ParagraphStyle(name="TotalsDetail", parent=styles["Normal"], alignment=TA_CENTER, fontSize=10, leading=12)
    box = Table(
        [
            [Paragraph(f"Regular: {format_hours(regular)} · Overtime: {format_hours(overtime)}", main)],
            [Paragraph(
                f"{employees} employees · {len(summaries)} employee-weeks · "
                f"{overtime_weeks} with overtime · {invalid} overlapping shifts excluded",
                detail,
            )],
        ],
        colWidths=[width],
        hAlign="CENTER",
    )
    box.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 0.6, BORDER_COLOR),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    return box


def _draw_page(canvas, doc):
    canvas.saveState()
    w, h = doc.pagesize
    canvas.setStrokeColor(BORDER_COLOR)
    canvas.setLineWidth(0.8)
    canvas.rect(12, 12, w - 24, h - 24)
    canvas.setFont("Helvetica", 8)
    canvas.drawRightString(w - 24, 18, f"Page {doc.page} · weeks start Sunday 00:00 US Central")
    canvas.restoreState()


def summaries_to_pdf(summaries: Iterable[WeekSummary], title: str = "Weekly hours summary") -> bytes:
    """Renders the summaries, ordered by employee and week, as PDF bytes."""
    summaries = sorted(summaries, key=lambda s: s.key)
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(A4), topMargin=24, bottomMargin=36, leftMargin=24, rightMargin=24)
    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle(name="InvalidShifts", parent=styles["Normal"], fontSize=9, leading=11)

    story = [Paragraph(title, styles["Title"]), Spacer(1, 8)]
    if not summaries:
        story.append(Paragraph("No shifts to summarize.", styles["Normal"]))
    else:
        table = Table([HEADER] + _rows(summaries, cell_style), colWidths=COL_WIDTHS, repeatRows=1, hAlign="CENTER")
        table.setStyle(_table_style(summaries))
        story += [table, Spacer(1, 12), _totals_box(summaries, min(520, 0.65 * doc.width), styles)]

    doc.build(story, onFirstPage=_draw_page, onLaterPages=_draw_page)
    return buf.getvalue()
