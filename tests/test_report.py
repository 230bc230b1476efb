"""
Tests for PDF report export
"""

import unittest
from datetime import date, datetime

from aimtracker.models import BenchmarkEntry, Difficulty
from aimtracker.report import (
    _inject_breaks,
    _sanitize_for_pdf,
    filter_label,
    generate_pdf_report,
    report_filename,
    strip_heading_markers,
)
from aimtracker.stats import compute_current_stats


def _entries():
    return [
        BenchmarkEntry(
            id=i,
            scenario="Gridshot “Ultimate” – Small" if i % 2 else "1w4ts Reload",
            score=1000 + i,
            accuracy=75.5,
            date="2024-01-10",
            difficulty=Difficulty.INSANE,
        )
        for i in range(60)
    ]


class TestReportHelpers(unittest.TestCase):

    def test_report_filename(self):
        self.assertEqual(
            report_filename([], today=date(2024, 1, 10)),
            "aimplified_report_all_2024-01-10.pdf",
        )
        self.assertEqual(
            report_filename(["Gridshot"], today=date(2024, 1, 10)),
            "aimplified_report_selected_2024-01-10.pdf",
        )

    def test_filter_label(self):
        self.assertEqual(filter_label([]), "All")
        self.assertEqual(filter_label(["A", "B"]), "A, B")

    def test_strip_heading_markers(self):
        self.assertEqual(strip_heading_markers("## Analysis\n- x\n# Plan"), "Analysis\n- x\nPlan")

    def test_sanitize_for_pdf(self):
        self.assertEqual(_sanitize_for_pdf("a – b “c” … 🎯"), 'a - b "c" ... ')

    def test_inject_breaks(self):
        broken = _inject_breaks("x" * 120, max_len=50)
        self.assertEqual([len(p) for p in broken.split(" ")], [50, 50, 20])


class TestGeneratePdf(unittest.TestCase):

    def test_renders_pdf_bytes(self):
        entries = _entries()
        pdf = generate_pdf_report(
            entries=entries,
            stats=compute_current_stats(entries),
            recommendation="## Analysis\n- Slow flicks — work on speed.",
            user_game="Valorant",
            user_sensitivity="0.3 @ 800 DPI",
            selected_scenarios=["Gridshot"],
            generated_at=datetime(2024, 1, 10, 12, 0, 0),
        )
        self.assertIsInstance(pdf, bytes)
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_error_text_and_empty_view(self):
        pdf = generate_pdf_report(
            entries=[],
            stats=compute_current_stats([]),
            recommendation="Failed to get AI recommendation: OpenAI Error: bad key",
        )
        self.assertTrue(pdf.startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
