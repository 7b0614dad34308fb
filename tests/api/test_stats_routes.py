"""
Integration tests for statistics routes (/api/stats/*).

Uses the shared TestClient from conftest.py (JSON stores, no real DB).
"""
from uuid import uuid4

import pytest

from tests.conftest import bearer


@pytest.fixture
def fresh_headers():
    return bearer(str(uuid4()))


def _daily_task(client, headers, title="Stretch"):
    resp = client.post("/api/tasks", headers=headers,
                       json={"title": title, "freq_times": 1, "freq_per": "day"})
    return resp.json()


def _complete(client, headers, task_id):
    resp = client.post(f"/api/tasks/{task_id}/complete", headers=headers,
                       json={"proof_type": "override", "proof_note": "done"})
    assert resp.status_code == 200


class TestStats:
    def test_empty(self, client, fresh_headers):
        resp = client.get("/api/stats", headers=fresh_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["mode"] == "day"
        assert data["progress"] == []
        assert data["summary"] == {"due": 0, "completed": 0, "remaining": 0, "pct": 0}
        assert len(data["history"]["buckets"]) == 7
        assert data["history"]["max"] == 1

    def test_completion_counts(self, client, fresh_headers):
        done = _daily_task(client, fresh_headers, "Done today")
        _daily_task(client, fresh_headers, "Still open")
        _complete(client, fresh_headers, done["id"])

        data = client.get("/api/stats?mode=day", headers=fresh_headers).json()
        by_title = {p["title"]: p for p in data["progress"]}
        assert by_title["Done today"]["done"] == 1
        assert by_title["Done today"]["pct"] == 100
        assert by_title["Still open"]["pct"] == 0
        assert data["progress"][0]["title"] == "Still open"
        assert data["summary"]["due"] == 2
        assert data["summary"]["completed"] == 1
        assert data["streaks"][done["id"]] == 1
        assert data["history"]["buckets"][-1]["count"] == 1

    @pytest.mark.parametrize("mode, buckets", [("week", 8), ("month", 12), ("year", 5)])
    def test_modes(self, client, fresh_headers, mode, buckets):
        data = client.get(f"/api/stats?mode={mode}", headers=fresh_headers).json()
        assert data["mode"] == mode
        assert len(data["history"]["buckets"]) == buckets

    def test_bad_mode(self, client, fresh_headers):
        assert client.get("/api/stats?mode=decade", headers=fresh_headers).status_code == 422

    def test_requires_auth(self, client):
        assert client.get("/api/stats").status_code == 401


class TestCondition:
    def test_nothing_tracked(self, client, fresh_headers):
        data = client.get("/api/stats/condition", headers=fresh_headers).json()
        assert data["score"] == 100
        assert data["tier"] == "great"

    def test_keys(self, client, fresh_headers):
        task = _daily_task(client, fresh_headers)
        _complete(client, fresh_headers, task["id"])
        data = client.get("/api/stats/condition", headers=fresh_headers).json()
        assert set(data) == {"score", "tier", "tracked_days", "half_life", "rates"}
        assert 0 <= data["score"] <= 100
