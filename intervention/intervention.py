"""
Intervention Orchestrator

This module assembles intervention decisions and orchestrates the request flow:
- Infers itches and estimates the effort budget for a situation
- Filters and ranks catalog candidates
- Picks the primary suggestion, alternatives and an explanation
- Runs the trigger gate and records shown interventions in history
"""

import logging
import random
from datetime import datetime
from typing import List, Optional

from utils import activity_logger
from intervention.catalog import DEFAULT_INTERVENTIONS, SOCIAL_MEDIA_MODALITY
from intervention.config_loader import load_config
from intervention.decision_engine import decide_trigger_intervention
from intervention.effort_budget import estimate_effort_budget
from intervention.history_store import InterventionHistory
from intervention.itch_inference import infer_itches
from intervention.situations import generate_id, now_ms, simulate_situation
from intervention.suggestion_engine import filter_candidates, rank_candidates
from intervention.models import (
    GenerateInterventionRequest,
    GenerateInterventionResponse,
    InterventionCandidate,
    InterventionDecision,
    Situation,
    User
)

logger = logging.getLogger(__name__)

_config = load_config()
_decision_config = _config.get("decision", {})

MAX_ALTERNATIVES = _decision_config.get("max_alternatives", 3)
DEFAULT_EXPLANATIONS = _decision_config.get("default_explanations", ["A moment to pause."])

EXPLANATIONS = {
    'REPEATED_APP_OPEN': [
        "You've been reaching for your phone frequently.",
        "Noticed a pattern of quick app checks."
    ],
    'LONG_SINGLE_APP_SESSION': [
        "You've been on this app for a while.",
        "A longer session than usual."
    ],
    'POST_MEETING_TRANSITION': [
        "Transitioning after your meeting.",
        "A natural break in your day."
    ],
    'ARRIVED_HOME_AFTER_WORK': [
        "Welcome home. Transition moment.",
        "End of workday, new context."
    ],
    'LATE_NIGHT_IDLE': [
        "Getting late. Wind-down time.",
        "Late night moment."
    ],
    'WAITING_CONTEXT': [
        "Looks like you're waiting.",
        "A brief pause in your day."
    ],
    'MORNING_ROUTINE': [
        "Starting the day.",
        "Morning moment."
    ],
    'WORK_BREAK': [
        "Taking a break.",
        "Brief pause from work."
    ]
}


def generate_intervention(
    situation: Situation,
    user: User,
    candidates: Optional[List[InterventionCandidate]] = None,
    rng=None
) -> InterventionDecision:
    """
    Produce an intervention decision for a situation.

    Pipeline:
    1. Infer itches
    2. Estimate effort budget
    3. Filter candidates against the budget and context
    4. Rank against the default (social media) modality
    5. Primary = top ranked, or the first catalog entry if nothing survived filtering
    6. Alternatives = next ranked candidates (up to 3)
    7. Explanation drawn from the situation type's pool

    Args:
        situation: Classified situation
        user: User profile
        candidates: Catalog override. Defaults to DEFAULT_INTERVENTIONS.
        rng: Random source with random() and choice(). Defaults to the random module.

    Returns:
        InterventionDecision

    Raises:
        ValueError: If the candidate catalog is empty
    """
    candidates = DEFAULT_INTERVENTIONS if candidates is None else candidates
    if not candidates:
        raise ValueError("Intervention catalog must contain at least one candidate")
    rng = rng or random

    itch_inference = infer_itches(situation)
    effort_budget = estimate_effort_budget(situation)
    filtered = filter_candidates(candidates, effort_budget, situation, user)
    ranked = rank_candidates(filtered, SOCIAL_MEDIA_MODALITY, user, itch_inference, rng=rng)

    if ranked:
        primary = ranked[0]
    else:
        logger.warning(
            f"No candidates within budget '{effort_budget.level}' for situation {situation.id}, "
            f"falling back to '{candidates[0].id}'"
        )
        primary = candidates[0]
    alternatives = ranked[1:1 + MAX_ALTERNATIVES]

    explanations = EXPLANATIONS.get(situation.type, DEFAULT_EXPLANATIONS)
    explanation = rng.choice(explanations)

    decision = InterventionDecision(
        id=generate_id(),
        situation_id=situation.id,
        primary=primary,
        alternatives=alternatives,
        explanation=explanation,
        timestamp=now_ms()
    )

    logger.info(
        f"Intervention {decision.id}: primary={primary.id}, "
        f"alternatives=[{', '.join(a.id for a in alternatives)}], budget={effort_budget.level}"
    )
    return decision


def process_generate_request(
    request: GenerateInterventionRequest,
    history: InterventionHistory,
    now: Optional[datetime] = None,
    rng=None
) -> GenerateInterventionResponse:
    """
    Process an intervention request end to end.

    1. Run the trigger gate (eligibility, cooldown, quiet hours, confidence)
    2. If allowed, generate a decision and mark it active in history
    3. Log the activity

    Args:
        request: GenerateInterventionRequest with situation, user and optional catalog
        history: History store for cooldown and the active intervention
        now: Local time for the quiet-hours check
        rng: Random source passed through to the engine

    Returns:
        GenerateInterventionResponse
    """
    situation = request.situation
    user = request.user
    start_time = datetime.now()

    logger.info(f"Processing intervention request for user {user.id}, situation {situation.type}")

    try:
        if request.candidates is not None and not request.candidates:
            raise ValueError("Intervention catalog must contain at least one candidate")

        itch_inference = infer_itches(situation)
        effort_budget = estimate_effort_budget(situation)

        # Cooldown check and show must not interleave with a concurrent request
        with history.exclusive():
            triggered, reasoning = decide_trigger_intervention(
                situation=situation,
                user=user,
                in_cooldown=history.is_in_cooldown(),
                now=now
            )

            decision = None
            if triggered:
                decision = generate_intervention(situation, user, request.candidates, rng=rng)
                history.show_intervention(decision, situation)

        response = GenerateInterventionResponse(
            triggered=triggered,
            reasoning=reasoning,
            decision=decision,
            itches=itch_inference.itches,
            effort_budget=effort_budget
        )

        activity_logger.log_intervention_activity(
            user_id=user.id,
            timestamp=start_time,
            status="success" if triggered else "skipped",
            situation_id=situation.id,
            situation_type=situation.type,
            situation_confidence=situation.confidence,
            trigger_intervention=triggered,
            trigger_reasoning=reasoning,
            effort_level=effort_budget.level,
            itches=[i.model_dump() for i in itch_inference.itches],
            decision_id=decision.id if decision else None,
            primary_id=decision.primary.id if decision else None,
            alternative_ids=[a.id for a in decision.alternatives] if decision else None,
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        return response

    except Exception as e:
        logger.error(f"Error processing intervention request for user {user.id}: {e}", exc_info=True)
        activity_logger.log_intervention_activity(
            user_id=user.id,
            timestamp=start_time,
            status="error",
            situation_id=situation.id,
            situation_type=situation.type,
            situation_confidence=situation.confidence,
            error=str(e),
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        raise


def process_simulate_request(
    user: User,
    history: InterventionHistory,
    now: Optional[datetime] = None,
    rng=None
) -> GenerateInterventionResponse:
    """Run the request flow for a simulated situation (demo)."""
    situation = simulate_situation(rng=rng)
    logger.info(f"Simulated situation {situation.type} ({situation.confidence:.2f}) for user {user.id}")
    return process_generate_request(
        GenerateInterventionRequest(situation=situation, user=user),
        history,
        now=now,
        rng=rng
    )
