"""
Unit Tests: generate_intervention() and the request orchestrator

Covers decision assembly (primary, alternatives, explanation), the
empty-filter fallback, end-to-end scenarios and the trigger/history flow.

Run with: pytest testing/test_intervention.py -v
"""

import json
from datetime import datetime

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils import activity_logger
from intervention.catalog import DEFAULT_INTERVENTIONS, build_catalog, load_catalog
from intervention.effort_budget import estimate_effort_budget
from intervention.history_store import InterventionHistory
from intervention.intervention import (
    generate_intervention,
    process_generate_request,
    process_simulate_request,
    EXPLANATIONS
)
from intervention.itch_inference import infer_itches
from intervention.models import GenerateInterventionRequest, EFFORT_LEVELS
from helpers import FixedRandom, make_candidate, make_situation, make_user

AFTERNOON = datetime(2026, 3, 2, 14, 30)


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Redirect activity logs into a temp directory."""
    monkeypatch.setattr(activity_logger, "INTERVENTION_LOG_DIR", str(tmp_path))
    return tmp_path


# =============================================================================
# Test Suite: Decision Assembly
# =============================================================================

class TestGenerateIntervention:

    def test_primary_and_alternatives(self):
        situation = make_situation("WORK_BREAK", time_of_day="morning", location="home")

        decision = generate_intervention(situation, make_user("Mindful"), rng=FixedRandom(0.0))

        assert decision.situation_id == situation.id
        assert decision.primary is not None
        assert len(decision.alternatives) == 3
        ids = [decision.primary.id] + [a.id for a in decision.alternatives]
        assert len(set(ids)) == 4
        assert decision.explanation == EXPLANATIONS["WORK_BREAK"][0]
        assert len(decision.id) == 9

    def test_alternatives_capped_by_available_candidates(self):
        candidates = [make_candidate("a", effort="very_low"), make_candidate("b", effort="very_low")]

        decision = generate_intervention(make_situation(), make_user(), candidates, rng=FixedRandom(0.0))

        assert decision.primary.id == "a"
        assert [c.id for c in decision.alternatives] == ["b"]

    def test_falls_back_to_first_catalog_entry_when_everything_filtered(self):
        """late_night + high load → very_low budget, which excludes every candidate."""
        candidates = [make_candidate("walk", effort="high"), make_candidate("tidy", effort="medium")]
        situation = make_situation("LATE_NIGHT_IDLE", time_of_day="late_night", load="high")

        decision = generate_intervention(situation, make_user(), candidates)

        assert estimate_effort_budget(situation).level == "very_low"
        assert decision.primary.id == "walk"
        assert decision.alternatives == []

    def test_unknown_situation_type_uses_default_explanation(self):
        decision = generate_intervention(make_situation("MYSTERY"), make_user())

        assert decision.explanation == "A moment to pause."

    def test_explanation_drawn_from_pool(self):
        for _ in range(10):
            decision = generate_intervention(make_situation("LATE_NIGHT_IDLE"), make_user())
            assert decision.explanation in EXPLANATIONS["LATE_NIGHT_IDLE"]

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError):
            generate_intervention(make_situation(), make_user(), [])

    def test_out_of_range_confidence_degrades(self):
        decision = generate_intervention(make_situation(confidence=4.0), make_user())

        assert decision.primary is not None


# =============================================================================
# Test Suite: End-to-End Scenarios
# =============================================================================

class TestScenarios:

    def test_waiting_context_afternoon_mindful_user(self):
        situation = make_situation("WAITING_CONTEXT", confidence=0.9, time_of_day="afternoon", load="medium")
        user = make_user("Mindful")

        itches = infer_itches(situation)
        budget = estimate_effort_budget(situation)

        assert itches.itches[0].itch == "BOREDOM"
        assert itches.itches[0].weight == pytest.approx(0.72)
        assert budget.level == "medium"

        for _ in range(20):
            decision = generate_intervention(situation, user)
            assert decision.primary.required_effort in {"very_low", "low", "medium"}

    def test_post_meeting_morning_high_load(self):
        situation = make_situation("POST_MEETING_TRANSITION", time_of_day="morning", load="high")

        assert estimate_effort_budget(situation).level == "low"

        decision = generate_intervention(situation, make_user())
        limit = EFFORT_LEVELS.index("low")
        for candidate in [decision.primary] + decision.alternatives:
            assert EFFORT_LEVELS.index(candidate.required_effort) <= limit


# =============================================================================
# Test Suite: Catalog
# =============================================================================

class TestCatalog:

    def test_default_catalog_loaded(self):
        assert len(DEFAULT_INTERVENTIONS) > 4
        assert {c.required_effort for c in DEFAULT_INTERVENTIONS} == set(EFFORT_LEVELS)

    def test_empty_catalog_fails_fast(self):
        with pytest.raises(ValueError):
            build_catalog([])

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{
            "id": "hum",
            "label": "Hum a tune",
            "modality": {"expressive_consumptive": 0.8},
            "required_effort": "very_low"
        }]))

        catalog = load_catalog(str(path))

        assert [c.id for c in catalog] == ["hum"]
        assert catalog[0].surface == "off_phone"


# =============================================================================
# Test Suite: Request Flow
# =============================================================================

class TestProcessGenerateRequest:

    def test_triggered_request_records_history(self, log_dir):
        history = InterventionHistory()
        request = GenerateInterventionRequest(
            situation=make_situation("WAITING_CONTEXT", time_of_day="afternoon"),
            user=make_user("Mindful")
        )

        response = process_generate_request(request, history, now=AFTERNOON)

        assert response.triggered is True
        assert response.decision is not None
        assert response.effort_budget.level == "medium"
        assert response.itches[0].itch == "BOREDOM"
        assert history.active_intervention.id == response.decision.id
        assert history.total_interventions == 1

        [log_file] = list(log_dir.iterdir())
        entry = json.loads(log_file.read_text().strip())
        assert entry["status"] == "success"
        assert entry["decision"]["primary"] == response.decision.primary.id

    def test_cooldown_skips_generation(self, log_dir):
        history = InterventionHistory()
        request = GenerateInterventionRequest(situation=make_situation(), user=make_user())
        process_generate_request(request, history, now=AFTERNOON)
        history.record_outcome("dismissed")

        response = process_generate_request(request, history, now=AFTERNOON)

        assert response.triggered is False
        assert response.decision is None
        assert "cooldown" in response.reasoning.lower()

    def test_empty_catalog_override_raises(self, log_dir):
        request = GenerateInterventionRequest(situation=make_situation(), user=make_user(), candidates=[])

        with pytest.raises(ValueError):
            process_generate_request(request, InterventionHistory(), now=AFTERNOON)

        entry = json.loads(next(log_dir.iterdir()).read_text().strip())
        assert entry["status"] == "error"

    def test_simulated_request(self, log_dir):
        response = process_simulate_request(make_user(), InterventionHistory(), now=AFTERNOON)

        assert response.triggered is True
        assert response.decision is not None
