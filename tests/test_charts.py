"""
Tests for chart data preparation and theming helpers.
"""

import unittest

from aimtracker.charts import (
    accuracy_radar_points,
    area_chart_frame,
    radar_figure,
    score_radar_points,
)
from aimtracker.models import BenchmarkEntry, Difficulty, Theme
from aimtracker.stats import ScenarioStats, compute_scenario_stats
from aimtracker.theme import difficulty_badge_html, get_palette


def _entry(entry_id, day, score):
    return BenchmarkEntry(
        id=entry_id,
        scenario="Gridshot",
        score=score,
        accuracy=70,
        date=day,
        difficulty=Difficulty.EASY,
    )


class TestAreaChartFrame(unittest.TestCase):

    def test_sorted_by_date_and_malformed_dropped(self):
        df = area_chart_frame([
            _entry(1, "2024-01-03", 300),
            _entry(2, "bad", 999),
            _entry(3, "2024-01-01", 100),
        ])
        self.assertEqual(list(df["Score"]), [100, 300])
        self.assertEqual(list(df.columns), ["Score", "Accuracy"])

    def test_empty(self):
        df = area_chart_frame([])
        self.assertTrue(df.empty)


class TestRadar(unittest.TestCase):

    def test_points_for_stats(self):
        stats = compute_scenario_stats([_entry(1, "2024-01-01", 100), _entry(2, "2024-01-02", 300)])
        self.assertEqual(
            score_radar_points(stats),
            [("Avg Score", 200), ("Best Score", 300), ("Lowest Score", 100)],
        )
        self.assertEqual([label for label, _ in accuracy_radar_points(stats)], ["Avg Acc", "Best Acc", "Lowest Acc"])

    def test_no_points_without_data(self):
        self.assertEqual(score_radar_points(ScenarioStats(scenario_name="Overall")), [])

    def test_figure_closes_polygon(self):
        palette = get_palette(Theme.DARK)
        fig = radar_figure([("a", 1), ("b", 2), ("c", 3)], palette, "Score", palette.chart_score)
        self.assertEqual(list(fig.data[0].theta), ["a", "b", "c", "a"])

    def test_empty_figure(self):
        fig = radar_figure([], get_palette(Theme.LIGHT), "Score", "#000000", radial_max=100)
        self.assertEqual(len(fig.data), 0)


class TestTheme(unittest.TestCase):

    def test_badge_contains_label(self):
        html = difficulty_badge_html(Difficulty.INSANE, Theme.LIGHT)
        self.assertIn(">Insane</span>", html)


if __name__ == "__main__":
    unittest.main()
