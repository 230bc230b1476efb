"""
Tests for KovaaK's challenge report import

Covers filename parsing, summary parsing and directory scanning, including the
per-file skip rules and directory-level errors.
"""

import shutil
import tempfile
import unittest
from datetime import date
from pathlib import Path

from aimtracker.kovaaks_import import (
    StatsDirectoryNotFoundError,
    accuracy_from_counts,
    is_challenge_report,
    parse_report,
    parse_report_filename,
    parse_report_summary,
    read_challenge_reports,
)
from aimtracker.models import Difficulty

GRIDSHOT_NAME = "Gridshot - Challenge - 2023.11.15-18.28.41 - Report.csv"

GRIDSHOT_REPORT = """Kill #,Timestamp,Bot,Weapon,TTK,Shots,Hits
1,18:27:42.123,Target,gun,0.5s,1,1

Score: ,1234.5
Hit Count: ,80
Miss Count: ,20
Scenario:,Gridshot
"""


class TestFilenameParsing(unittest.TestCase):

    def test_challenge_report_detection(self):
        self.assertTrue(is_challenge_report(GRIDSHOT_NAME))
        self.assertFalse(is_challenge_report("Gridshot - Challenge - 2023.11.15.txt"))
        self.assertFalse(is_challenge_report("Gridshot - Freeplay - 2023.11.15 - Report.csv"))

    def test_scenario_and_date(self):
        self.assertEqual(parse_report_filename(GRIDSHOT_NAME), ("Gridshot", "2023-11-15"))

    def test_scenario_with_dashes(self):
        name = "1w4ts - Reload - Challenge - 2024.02.01-10.00.00 - Report.csv"
        self.assertEqual(parse_report_filename(name), ("1w4ts - Reload", "2024-02-01"))

    def test_missing_date_falls_back_to_today(self):
        name = "Gridshot - Challenge - latest - Report.csv"
        self.assertEqual(
            parse_report_filename(name, today=date(2024, 5, 6)),
            ("Gridshot", "2024-05-06"),
        )

    def test_no_scenario(self):
        self.assertIsNone(parse_report_filename(" - Challenge - 2023.11.15 - Report.csv"))


class TestSummaryParsing(unittest.TestCase):

    def test_gridshot_summary(self):
        summary = parse_report_summary(GRIDSHOT_REPORT)
        self.assertEqual(summary.score, 1234.5)
        self.assertEqual(summary.hits, 80)
        self.assertEqual(summary.misses, 20)
        self.assertTrue(summary.complete)

    def test_labels_are_case_insensitive(self):
        summary = parse_report_summary("SCORE:,10\nhit count:,3\nMISS COUNT:,1\n")
        self.assertEqual((summary.score, summary.hits, summary.misses), (10.0, 3, 1))

    def test_first_non_empty_value_wins(self):
        summary = parse_report_summary("Score:,\nScore:,50\nScore:,70\nHit Count:,1\nMiss Count:,1")
        self.assertEqual(summary.score, 50.0)

    def test_non_numeric_value(self):
        summary = parse_report_summary("Score:,abc\nHit Count:,1\nMiss Count:,1")
        self.assertIsNone(summary.score)
        self.assertFalse(summary.complete)

    def test_accuracy_from_counts(self):
        self.assertEqual(accuracy_from_counts(80, 20), 80.0)
        self.assertEqual(accuracy_from_counts(2, 1), 66.7)
        self.assertEqual(accuracy_from_counts(0, 0), 0)


class TestParseReport(unittest.TestCase):

    def test_gridshot_entry(self):
        entry = parse_report(GRIDSHOT_NAME, GRIDSHOT_REPORT)
        self.assertIsNotNone(entry)
        self.assertEqual(entry.scenario, "Gridshot")
        self.assertEqual(entry.date, "2023-11-15")
        self.assertEqual(entry.score, 1234.5)
        self.assertEqual(entry.accuracy, 80.0)
        self.assertEqual(entry.difficulty, Difficulty.MEDIUM)
        self.assertEqual(entry.id, f"{GRIDSHOT_NAME}-2023-11-15")
        self.assertEqual(entry.notes, f"Imported from {GRIDSHOT_NAME}")

    def test_missing_miss_count_is_skipped(self):
        text = "Score: ,1234.5\nHit Count: ,80\n"
        self.assertIsNone(parse_report(GRIDSHOT_NAME, text))

    def test_missing_score_is_skipped(self):
        self.assertIsNone(parse_report(GRIDSHOT_NAME, "Hit Count: ,80\nMiss Count: ,20\n"))


class TestReadChallengeReports(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write(self, name, text):
        (self.tmpdir / name).write_text(text, encoding="utf-8")

    def test_reads_valid_reports_and_skips_the_rest(self):
        self._write(GRIDSHOT_NAME, GRIDSHOT_REPORT)
        self._write(
            "Sixshot - Challenge - 2023.11.16-09.00.00 - Report.csv",
            "Score: ,500\nHit Count: ,40\n",
        )
        self._write("notes.txt", "not a report")
        (self.tmpdir / "subdir - Challenge - x.csv").mkdir()

        result = read_challenge_reports(self.tmpdir)

        self.assertEqual(len(result.entries), 1)
        self.assertEqual(result.entries[0].scenario, "Gridshot")
        self.assertIn("notes.txt", result.skipped)
        self.assertIn("Sixshot - Challenge - 2023.11.16-09.00.00 - Report.csv", result.skipped)

    def test_utf8_bom_is_accepted(self):
        (self.tmpdir / GRIDSHOT_NAME).write_bytes(b"\xef\xbb\xbf" + GRIDSHOT_REPORT.encode("utf-8"))
        result = read_challenge_reports(self.tmpdir)
        self.assertEqual(len(result.entries), 1)

    def test_empty_directory(self):
        result = read_challenge_reports(self.tmpdir)
        self.assertEqual(result.entries, [])

    def test_missing_directory_raises(self):
        missing = self.tmpdir / "does-not-exist"
        with self.assertRaises(StatsDirectoryNotFoundError) as ctx:
            read_challenge_reports(missing)
        self.assertIn(str(missing), ctx.exception.message)
        self.assertIn("KOVAAK_STATS_DIR", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
