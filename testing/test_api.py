"""
API Tests: /intervention endpoints

Exercises the intervention router through FastAPI's TestClient.

Run with: pytest testing/test_api.py -v
"""

from datetime import datetime

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi import FastAPI
from fastapi.testclient import TestClient

from utils import activity_logger
from intervention import api as intervention_api
from intervention.history_store import InterventionHistory
from intervention.models import TIME_BUCKETS
from intervention.situations import get_time_bucket

SITUATION = {
    "id": "sit-api",
    "type": "WAITING_CONTEXT",
    "confidence": 0.9,
    "context": {"time_of_day": "afternoon", "recent_cognitive_load": "medium"}
}

USER = {
    "id": "user-api",
    "identity_anchors": [{"id": "a1", "label": "Mindful"}],
    "preferences": {"quiet_hours": []}
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(activity_logger, "INTERVENTION_LOG_DIR", str(tmp_path))
    app = FastAPI()
    app.state.intervention_history = InterventionHistory()
    app.include_router(intervention_api.router)
    return TestClient(app)


class TestInterventionApi:

    def test_generate(self, client):
        response = client.post("/intervention/generate", json={"situation": SITUATION, "user": USER})

        assert response.status_code == 200
        body = response.json()
        assert body["triggered"] is True
        assert body["effort_budget"]["level"] == "medium"
        assert body["itches"][0]["itch"] == "BOREDOM"
        assert body["decision"]["primary"]["required_effort"] in ["very_low", "low", "medium"]
        assert len(body["decision"]["alternatives"]) <= 3

    def test_generate_with_catalog_override(self, client):
        candidates = [{
            "id": "only-one",
            "label": "Only one",
            "modality": {},
            "required_effort": "high"
        }]

        response = client.post(
            "/intervention/generate",
            json={"situation": SITUATION, "user": USER, "candidates": candidates}
        )

        assert response.status_code == 200
        assert response.json()["decision"]["primary"]["id"] == "only-one"

    def test_generate_empty_catalog_is_400(self, client):
        response = client.post(
            "/intervention/generate",
            json={"situation": SITUATION, "user": USER, "candidates": []}
        )

        assert response.status_code == 400

    def test_outcome_then_cooldown(self, client):
        client.post("/intervention/generate", json={"situation": SITUATION, "user": USER})

        outcome = client.post("/intervention/outcome", json={"action": "accepted", "follow_through": True})
        assert outcome.status_code == 200
        assert outcome.json()["action_taken"] == "accepted"

        again = client.post("/intervention/generate", json={"situation": SITUATION, "user": USER})
        assert again.json()["triggered"] is False
        assert again.json()["decision"] is None

        stats = client.get("/intervention/stats").json()
        assert stats["total_interventions"] == 1
        assert stats["accepted_count"] == 1
        assert stats["acceptance_rate"] == pytest.approx(1.0)
        assert stats["in_cooldown"] is True

    def test_outcome_without_active_is_404(self, client):
        response = client.post("/intervention/outcome", json={"action": "dismissed"})

        assert response.status_code == 404

    def test_dismiss_active(self, client):
        generated = client.post("/intervention/generate", json={"situation": SITUATION, "user": USER}).json()

        response = client.post("/intervention/dismiss")

        assert response.status_code == 200
        assert response.json()["action_taken"] == "dismissed"
        assert response.json()["intervention_id"] == generated["decision"]["id"]

        stats = client.get("/intervention/stats").json()
        assert stats["dismissed_count"] == 1
        assert stats["active_intervention_id"] is None
        assert stats["in_cooldown"] is True

    def test_dismiss_without_active_is_404(self, client):
        assert client.post("/intervention/dismiss").status_code == 404

    def test_clear_drops_active_without_cooldown(self, client):
        client.post("/intervention/generate", json={"situation": SITUATION, "user": USER})

        response = client.post("/intervention/clear")

        assert response.status_code == 200
        body = response.json()
        assert body["active_intervention_id"] is None
        assert body["in_cooldown"] is False
        assert body["dismissed_count"] == 0
        assert client.post("/intervention/outcome", json={"action": "accepted"}).status_code == 404

    def test_set_cooldown_zero_allows_next_trigger(self, client):
        client.post("/intervention/generate", json={"situation": SITUATION, "user": USER})
        client.post("/intervention/outcome", json={"action": "dismissed"})

        response = client.put("/intervention/cooldown", json={"minutes": 0})

        assert response.status_code == 200
        assert response.json()["cooldown_minutes"] == 0
        assert response.json()["in_cooldown"] is False

        again = client.post("/intervention/generate", json={"situation": SITUATION, "user": USER})
        assert again.json()["triggered"] is True

    def test_negative_cooldown_is_422(self, client):
        assert client.put("/intervention/cooldown", json={"minutes": -5}).status_code == 422

    def test_time_bucket_in_timezone(self, client):
        response = client.get("/intervention/time-bucket", params={"timezone": "Asia/Tokyo"})

        assert response.status_code == 200
        body = response.json()
        assert body["timezone"] == "Asia/Tokyo"
        assert body["time_bucket"] in TIME_BUCKETS
        hour = int(body["local_time"].split(":")[0])
        assert body["time_bucket"] == get_time_bucket(datetime(2026, 1, 1, hour, 0))

    def test_time_bucket_unknown_timezone_uses_utc(self, client):
        body = client.get("/intervention/time-bucket", params={"timezone": "Nowhere/Atlantis"}).json()

        assert body["timezone"] == "UTC"
        assert body["time_bucket"] in TIME_BUCKETS

    def test_simulate(self, client):
        response = client.post("/intervention/simulate", json={"user": USER})

        assert response.status_code == 200
        assert response.json()["decision"] is not None

    def test_health(self, client):
        assert client.get("/intervention/health").json()["status"] == "healthy"

    def test_history_created_on_demand(self, tmp_path, monkeypatch):
        monkeypatch.setattr(activity_logger, "INTERVENTION_LOG_DIR", str(tmp_path))
        app = FastAPI()
        app.include_router(intervention_api.router)

        stats = TestClient(app).get("/intervention/stats")

        assert stats.status_code == 200
        assert stats.json()["total_interventions"] == 0
