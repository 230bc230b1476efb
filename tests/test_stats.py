"""
Tests for benchmark statistics

Covers aggregate stats, extended scenario stats, time windows and trend
calculation. All dates are pinned so results do not depend on the clock.
"""

import math
import unittest
from datetime import date

from aimtracker.models import BenchmarkEntry, Difficulty, TimePeriod
from aimtracker.stats import (
    CurrentStats,
    PeriodStats,
    compute_current_stats,
    compute_period_stats,
    compute_scenario_stats,
    filter_by_period,
    percent_change,
    population_std_dev,
    round_half_up,
    round_one_decimal,
)


def _entry(entry_id, score, accuracy, day="2024-01-10", scenario="Gridshot"):
    return BenchmarkEntry(
        id=entry_id,
        scenario=scenario,
        score=score,
        accuracy=accuracy,
        date=day,
        difficulty=Difficulty.MEDIUM,
    )


class TestRounding(unittest.TestCase):

    def test_round_half_up_ties_go_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(3.5), 4)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(150.4), 150)

    def test_round_one_decimal(self):
        self.assertEqual(round_one_decimal(1.25), 1.3)
        self.assertEqual(round_one_decimal(82.5), 82.5)
        self.assertEqual(round_one_decimal(7.04), 7.0)


class TestCurrentStats(unittest.TestCase):

    def test_empty_entries_are_all_zero(self):
        """No entries gives zeros, not an exception."""
        stats = compute_current_stats([])
        self.assertEqual(stats, CurrentStats())
        self.assertEqual(stats.count, 0)
        self.assertEqual(stats.avg_score, 0)
        self.assertEqual(stats.avg_accuracy, 0)
        self.assertEqual(stats.best_score, 0)

    def test_averages_use_display_rounding(self):
        stats = compute_current_stats([
            _entry(1, 100, 80),
            _entry(2, 201, 81),
        ])
        self.assertEqual(stats.count, 2)
        self.assertEqual(stats.avg_score, 151)  # 150.5 rounds up
        self.assertEqual(stats.avg_accuracy, 80.5)
        self.assertEqual(stats.best_score, 201)

    def test_best_score_never_below_zero(self):
        stats = compute_current_stats([_entry(1, -5, 10), _entry(2, -10, 20)])
        self.assertEqual(stats.best_score, 0)


class TestScenarioStats(unittest.TestCase):

    def test_overall_name_without_selection(self):
        stats = compute_scenario_stats([_entry(1, 100, 90)])
        self.assertEqual(stats.scenario_name, "Overall")

    def test_selection_restricts_and_names(self):
        entries = [
            _entry(1, 100, 90, scenario="Gridshot"),
            _entry(2, 300, 70, scenario="Gridshot"),
            _entry(3, 999, 99, scenario="Sixshot"),
        ]
        stats = compute_scenario_stats(entries, ["Gridshot"])
        self.assertEqual(stats.scenario_name, "Gridshot")
        self.assertEqual(stats.count, 2)
        self.assertEqual(stats.avg_score, 200)
        self.assertEqual(stats.best_score, 300)
        self.assertEqual(stats.lowest_score, 100)
        self.assertEqual(stats.avg_accuracy, 80.0)
        self.assertEqual(stats.best_accuracy, 90)
        self.assertEqual(stats.lowest_accuracy, 70)

    def test_multiple_selection_joined(self):
        stats = compute_scenario_stats([], ["A", "B"])
        self.assertEqual(stats.scenario_name, "A, B")
        self.assertEqual(stats.count, 0)


class TestDispersionAndChange(unittest.TestCase):

    def test_repeated_value_has_zero_std_dev(self):
        self.assertEqual(population_std_dev([42, 42, 42, 42]), 0.0)

    def test_population_std_dev(self):
        self.assertAlmostEqual(population_std_dev([2, 4, 4, 4, 5, 5, 7, 9]), 2.0)
        self.assertEqual(population_std_dev([5]), 0.0)

    def test_percent_change(self):
        self.assertEqual(percent_change(100, 150), 50.0)
        self.assertEqual(percent_change(0, 0), 0.0)
        self.assertTrue(math.isinf(percent_change(0, 5)))


class TestPeriodStats(unittest.TestCase):

    TODAY = date(2024, 1, 31)

    def setUp(self):
        self.entries = [
            _entry(1, 150, 60, day="2024-01-30"),
            _entry(2, 100, 50, day="2024-01-01"),
            _entry(3, 50, 40, day="2023-12-01"),
        ]

    def test_filter_by_period_is_inclusive(self):
        kept = filter_by_period(self.entries, TimePeriod.MONTH, today=self.TODAY)
        self.assertEqual([e.id for e in kept], [1, 2])

    def test_all_period_keeps_everything(self):
        entries = self.entries + [_entry(4, 10, 10, day="not-a-date")]
        self.assertEqual(len(filter_by_period(entries, TimePeriod.ALL, today=self.TODAY)), 4)

    def test_single_entry_window_has_no_change(self):
        stats = compute_period_stats(self.entries, period=TimePeriod.WEEK, today=self.TODAY)
        self.assertEqual(stats.score_std_dev, 0.0)
        self.assertIsNone(stats.score_change_percent)
        self.assertIsNone(stats.accuracy_change_percent)

    def test_month_window_trend(self):
        stats = compute_period_stats(self.entries, period=TimePeriod.MONTH, today=self.TODAY)
        self.assertEqual(stats.score_change_percent, 50.0)
        self.assertEqual(stats.accuracy_change_percent, 20.0)
        self.assertEqual(stats.score_std_dev, 25.0)
        self.assertEqual(stats.accuracy_std_dev, 5.0)

    def test_all_window_uses_chronological_order(self):
        stats = compute_period_stats(self.entries, period=TimePeriod.ALL, today=self.TODAY)
        self.assertEqual(stats.score_change_percent, 200.0)
        self.assertEqual(stats.accuracy_change_percent, 50.0)

    def test_zero_baseline_reports_no_value(self):
        """A zero starting score gives None rather than infinity."""
        entries = [
            _entry(1, 0, 50, day="2024-01-01"),
            _entry(2, 500, 60, day="2024-01-05"),
        ]
        stats = compute_period_stats(entries, today=self.TODAY)
        self.assertIsNone(stats.score_change_percent)
        self.assertEqual(stats.accuracy_change_percent, 20.0)

    def test_malformed_dates_left_out_of_all_time_trend(self):
        """Undated entries never count, even for the unbounded window."""
        entries = [_entry(4, 9999, 99, day="yesterday")] + self.entries + [_entry(5, 1, 1, day="2024-13-45")]
        stats = compute_period_stats(entries, period=TimePeriod.ALL, today=self.TODAY)
        expected = compute_period_stats(self.entries, period=TimePeriod.ALL, today=self.TODAY)
        self.assertEqual(stats, expected)
        self.assertEqual(stats.score_change_percent, 200.0)

    def test_empty_selection_result(self):
        stats = compute_period_stats(self.entries, selected=["Missing"], today=self.TODAY)
        self.assertEqual(stats, PeriodStats())


if __name__ == "__main__":
    unittest.main()
