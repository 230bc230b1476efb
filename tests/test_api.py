"""
Tests for the local import API

KOVAAK_STATS_DIR is pointed at a temporary directory and the cached settings
are reset around every test.
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from aimtracker.config import get_settings
from app.main import create_app

REPORT_NAME = "Gridshot - Challenge - 2023.11.15-18.28.41 - Report.csv"
REPORT_TEXT = "Score: ,1234.5\nHit Count: ,80\nMiss Count: ,20\n"


class TestKovaakStatsEndpoint(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.stats_dir = self.tmpdir / "stats"
        self.stats_dir.mkdir()
        self._env = mock.patch.dict(os.environ, {"KOVAAK_STATS_DIR": str(self.stats_dir)})
        self._env.start()
        get_settings.cache_clear()
        self.client = TestClient(create_app())

    def tearDown(self):
        self._env.stop()
        get_settings.cache_clear()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_returns_parsed_entries(self):
        (self.stats_dir / REPORT_NAME).write_text(REPORT_TEXT, encoding="utf-8")
        (self.stats_dir / "broken - Challenge - 2023.11.15 - Report.csv").write_text("Score: ,1\n", encoding="utf-8")

        resp = self.client.get("/api/kovaak-stats")

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["scenario"], "Gridshot")
        self.assertEqual(data[0]["date"], "2023-11-15")
        self.assertEqual(data[0]["score"], 1234.5)
        self.assertEqual(data[0]["accuracy"], 80.0)
        self.assertEqual(data[0]["difficulty"], "Medium")

    def test_empty_directory_returns_empty_list(self):
        resp = self.client.get("/api/kovaak-stats")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    def test_missing_directory_is_404(self):
        shutil.rmtree(self.stats_dir)
        resp = self.client.get("/api/kovaak-stats")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("Stats directory not found", resp.json()["error"])

    def test_health_reports_stats_dir(self):
        body = self.client.get("/health").json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["stats_dir"], str(self.stats_dir.absolute()))
        self.assertTrue(body["stats_dir_exists"])

        shutil.rmtree(self.stats_dir)
        self.assertFalse(self.client.get("/health").json()["stats_dir_exists"])

    def test_root(self):
        self.assertEqual(self.client.get("/").json()["service"], "aim-tracker-api")


if __name__ == "__main__":
    unittest.main()
