"""
Tests for the liveness, readiness, startup and detailed health probes.
Run from project root: python -m pytest tests/test_health_api.py -v
"""
import unittest
from unittest import mock

from fastapi.testclient import TestClient

from config import settings
from main import app


async def _unreachable():
    raise ConnectionError("database is down")


class TestHealthProbes(unittest.TestCase):
    def setUp(self):
        self._ctx = TestClient(app)
        self.client = self._ctx.__enter__()

    def tearDown(self):
        self._ctx.__exit__(None, None, None)

    def test_liveness_is_always_healthy(self):
        resp = self.client.get("/api/health/live")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "Healthy")
        self.assertEqual(resp.json()["check"], "liveness")

    def test_startup_reports_version(self):
        resp = self.client.get("/api/health/startup")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "Started")
        self.assertEqual(resp.json()["version"], settings.app_version)

    def test_readiness_checks_database(self):
        resp = self.client.get("/api/health/ready")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "Healthy")
        self.assertEqual({c["name"] for c in body["checks"]}, {"database", "self"})

    def test_readiness_fails_when_database_unreachable(self):
        with mock.patch("api.health.check_database", _unreachable):
            resp = self.client.get("/api/health/ready")
        self.assertEqual(resp.status_code, 503)
        body = resp.json()
        self.assertEqual(body["status"], "Unhealthy")
        db_check = next(c for c in body["checks"] if c["name"] == "database")
        self.assertEqual(db_check["status"], "Unhealthy")
        self.assertEqual(db_check["exception"], "database is down")

    def test_detailed_report(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["version"], settings.app_version)
        self.assertEqual(body["environment"], settings.environment)
        self.assertIn("totalDuration", body)


if __name__ == "__main__":
    unittest.main()
