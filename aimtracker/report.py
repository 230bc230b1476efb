"""
PDF export of the current dashboard view.

Title block, stats summary, the last AI coach text and a grid table of every
entry in the current filter. Uses fpdf2's core Helvetica font, so text is
folded to ASCII first.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Sequence

from fpdf import FPDF, XPos, YPos
from fpdf.fonts import FontFace

from aimtracker.coaching_prompt import format_number, plain_number
from aimtracker.models import BenchmarkEntry
from aimtracker.stats import CurrentStats

ACCENT_RGB = (161, 224, 211)
ALT_ROW_RGB = (245, 245, 245)
TABLE_HEADINGS = ("Date", "Scenario", "Score", "Accuracy", "Difficulty")
TABLE_COL_WIDTHS = (25, 75, 30, 25, 25)

_HEADING_MARKER_RE = re.compile(r"^#+\s+", re.MULTILINE)


def strip_heading_markers(text: str) -> str:
    return _HEADING_MARKER_RE.sub("", text)


def _sanitize_for_pdf(text: str) -> str:
    """
    Replace common Unicode punctuation with ASCII equivalents.
    Helvetica doesn't cover them; anything left that isn't ASCII is dropped.
    """
    replacements = {
        "—": "-",    # em-dash
        "–": "-",    # en-dash
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
        "…": "...",
        "≥": ">=",
        "≤": "<=",
        "±": "+/-",
        "×": "x",
        "→": "->",
        "←": "<-",
        "•": "*",
        "‑": "-",    # non-breaking hyphen
        " ": " ",
    }
    for unicode_char, ascii_char in replacements.items():
        text = text.replace(unicode_char, ascii_char)
    return text.encode("ascii", "ignore").decode("ascii")


def _inject_breaks(text: str, max_len: int = 50) -> str:
    """Insert spaces into very long runs of non-space characters so lines can wrap."""
    def _chunk(m):
        s = m.group(0)
        return " ".join(s[i:i + max_len] for i in range(0, len(s), max_len))

    return re.sub(r"\S{%d,}" % (max_len + 1), _chunk, text)


def filter_label(selected: Sequence[str]) -> str:
    return ", ".join(selected) if selected else "All"


def report_filename(selected: Sequence[str], today: Optional[date] = None) -> str:
    scope = "selected" if selected else "all"
    return f"aimplified_report_{scope}_{(today or date.today()).isoformat()}.pdf"


class _ReportPDF(FPDF):
    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(0, 0, 0)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")


def _section_heading(pdf: FPDF, text: str) -> None:
    pdf.set_font("Helvetica", "B", 14)
    pdf.set_text_color(*ACCENT_RGB)
    pdf.cell(0, 8, _sanitize_for_pdf(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(0, 0, 0)


def _two_columns(pdf: FPDF, left: str, right: str, h: float = 7) -> None:
    pdf.cell(70, h, _sanitize_for_pdf(left))
    pdf.cell(0, h, _sanitize_for_pdf(right), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def generate_pdf_report(
    entries: Sequence[BenchmarkEntry],
    stats: CurrentStats,
    recommendation: str,
    user_game: str = "",
    user_sensitivity: str = "",
    selected_scenarios: Sequence[str] = (),
    generated_at: Optional[datetime] = None,
) -> bytes:
    """
    Render the filtered view as a PDF.

    Args:
        entries: the filtered, sorted entries shown in the list
        stats: aggregate stats of that filter
        recommendation: last AI coach text (placeholder or error strings are
            rendered as-is)
        user_game / user_sensitivity: player setup shown in the title block
        selected_scenarios: active scenario filter (empty means all)
        generated_at: timestamp printed in the title block

    Returns:
        PDF document as bytes
    """
    generated_at = generated_at or datetime.now()
    pdf = _ReportPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.set_margins(15, 15, 15)
    pdf.add_page()

    # Title block
    pdf.set_font("Helvetica", "B", 18)
    pdf.set_text_color(*ACCENT_RGB)
    pdf.cell(0, 10, "Aim Training Benchmark Report", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 8, f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", "", 12)
    _two_columns(pdf, f"Game: {user_game}", f"Sensitivity: {user_sensitivity}", h=8)
    pdf.multi_cell(
        0, 8,
        _inject_breaks(_sanitize_for_pdf(f"Scenario Filter: {filter_label(selected_scenarios)}")),
        new_x=XPos.LMARGIN, new_y=YPos.NEXT,
    )
    pdf.ln(5)

    # Stats
    scope = "Selected Scenarios" if selected_scenarios else "All Scenarios"
    _section_heading(pdf, f"Stats ({scope})")
    pdf.set_font("Helvetica", "", 11)
    _two_columns(
        pdf,
        f"- Avg Score: {format_number(stats.avg_score)}",
        f"- Avg Accuracy: {plain_number(stats.avg_accuracy)}%",
    )
    _two_columns(pdf, f"- Best Score: {format_number(stats.best_score)}", f"- Entries: {stats.count}")
    pdf.ln(6)

    # AI coach text
    _section_heading(pdf, "AI Coach Recommendation")
    pdf.set_font("Helvetica", "", 10)
    cleaned = _inject_breaks(_sanitize_for_pdf(strip_heading_markers(recommendation or "")))
    pdf.multi_cell(0, 5, cleaned or "-", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(6)

    # History table
    _section_heading(pdf, f"Benchmark History ({'Selected' if selected_scenarios else 'All'})")
    pdf.set_font("Helvetica", "", 9)
    headings_style = FontFace(emphasis="BOLD", color=(0, 0, 0), fill_color=ACCENT_RGB)
    with pdf.table(
        col_widths=TABLE_COL_WIDTHS,
        headings_style=headings_style,
        cell_fill_color=ALT_ROW_RGB,
        cell_fill_mode="ROWS",
        line_height=6,
    ) as table:
        heading_row = table.row()
        for heading in TABLE_HEADINGS:
            heading_row.cell(heading)
        for entry in entries:
            row = table.row()
            row.cell(_sanitize_for_pdf(entry.date))
            row.cell(_inject_breaks(_sanitize_for_pdf(entry.scenario), max_len=30))
            row.cell(format_number(entry.score))
            row.cell(f"{plain_number(entry.accuracy)}%")
            row.cell(entry.difficulty.value)

    return bytes(pdf.output())
