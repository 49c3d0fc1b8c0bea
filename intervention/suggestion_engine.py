"""
Suggestion Engine

This module filters the candidate catalog down to activities that fit the
current effort budget and context, then ranks what remains.
"""

import logging
import random
from typing import List, Dict, Optional

from intervention.config_loader import load_config
from intervention.effort_budget import effort_index
from intervention.modality import calculate_modality_similarity
from intervention.models import (
    InterventionCandidate,
    ContextConstraint,
    EffortBudget,
    ItchInference,
    ModalityVector,
    Situation,
    User,
    EFFORT_LEVELS
)

logger = logging.getLogger(__name__)

# Load configuration
_config = load_config()
_ranking_config = _config.get("ranking", {})
_effort_config = _config.get("effort_budget", {})

MODALITY_WEIGHT = _ranking_config.get("modality_weight", 0.40)
IDENTITY_WEIGHT = _ranking_config.get("identity_weight", 0.30)
EFFORT_WEIGHT = _ranking_config.get("effort_weight", 0.15)
# Upper bound of the random variety bonus (already weighted)
VARIETY_MAX = _ranking_config.get("variety_max", 0.15)
NEUTRAL_IDENTITY_SCORE = _ranking_config.get("neutral_identity_score", 0.5)
DEFAULT_TIME_OF_DAY = _effort_config.get("default_time_of_day", "afternoon")


def _context_value(constraint_type: str, situation: Situation) -> Optional[str]:
    """Situation context field a constraint type is evaluated against."""
    if constraint_type == 'location':
        return situation.context.location_category
    if constraint_type == 'time':
        return situation.context.time_of_day or DEFAULT_TIME_OF_DAY
    if constraint_type == 'app':
        return situation.context.app_category
    return None


def constraint_passes(constraint: ContextConstraint, situation: Situation) -> bool:
    """
    Evaluate one context constraint against a situation.

    location, time and app constraints support equals / not_equals.
    custom constraints and the contains operator are not evaluated and always pass.
    """
    if constraint.type == 'custom' or constraint.operator == 'contains':
        logger.debug(f"Constraint {constraint.type}/{constraint.operator} not evaluated, passing")
        return True

    actual = _context_value(constraint.type, situation)
    if constraint.operator == 'equals':
        return actual == constraint.value
    return actual != constraint.value


def filter_candidates(
    candidates: List[InterventionCandidate],
    effort_budget: EffortBudget,
    situation: Situation,
    user: User
) -> List[InterventionCandidate]:
    """
    Remove candidates that exceed the effort budget or violate a context constraint.

    Args:
        candidates: Candidate catalog
        effort_budget: Current effort budget
        situation: Situation the constraints are checked against
        user: User profile (excluded apps)

    Returns:
        Candidates that passed, in their original order
    """
    budget_idx = effort_index(effort_budget.level)
    excluded_apps = set(user.preferences.excluded_apps)

    filtered = []
    for candidate in candidates:
        if effort_index(candidate.required_effort) > budget_idx:
            logger.debug(f"Filtered {candidate.id}: effort {candidate.required_effort} > {effort_budget.level}")
            continue

        if candidate.launch_target and candidate.launch_target in excluded_apps:
            logger.debug(f"Filtered {candidate.id}: launch target {candidate.launch_target} excluded by user")
            continue

        if not all(constraint_passes(c, situation) for c in candidate.context_constraints):
            logger.debug(f"Filtered {candidate.id}: context constraint failed")
            continue

        filtered.append(candidate)

    logger.info(f"Filtered candidates: {len(filtered)}/{len(candidates)} within budget '{effort_budget.level}'")
    return filtered


def identity_alignment(candidate: InterventionCandidate, user_identities: List[str]) -> float:
    """
    Fraction of the candidate's identity tags matching the user's anchors.

    Tags are compared case-insensitively and counted once, normalized by
    min(distinct tag count, anchor count). Users without anchors get a neutral score.
    """
    if not user_identities:
        return NEUTRAL_IDENTITY_SCORE
    if not candidate.identity_tags:
        return 0.0

    tags = {tag.lower() for tag in candidate.identity_tags}
    anchors = set(user_identities)
    return len(tags & anchors) / min(len(tags), len(anchors))


def effort_appropriateness(candidate: InterventionCandidate) -> float:
    """Linear preference for low effort: 1.0 for very_low, 0.0 for high."""
    return 1 - effort_index(candidate.required_effort) / (len(EFFORT_LEVELS) - 1)


def score_candidates(
    candidates: List[InterventionCandidate],
    default_modality: ModalityVector,
    user: User,
    rng=None
) -> List[Dict]:
    """
    Score each candidate.

    Score = 0.40 * modality similarity + 0.30 * identity alignment
            + 0.15 * effort appropriateness + variety bonus in [0, 0.15]

    Args:
        candidates: Candidates to score
        default_modality: Modality of the default behaviour being interrupted
        user: User profile (identity anchors)
        rng: Random source with a random() method. Defaults to the random module.

    Returns:
        List of dicts with 'candidate', 'score' and the individual factors, in input order
    """
    rng = rng or random
    user_identities = [anchor.label.lower() for anchor in user.identity_anchors]

    scored = []
    for candidate in candidates:
        modality_score = calculate_modality_similarity(candidate.modality, default_modality)
        identity_score = identity_alignment(candidate, user_identities)
        effort_score = effort_appropriateness(candidate)
        variety_score = rng.random() * VARIETY_MAX

        score = (
            modality_score * MODALITY_WEIGHT
            + identity_score * IDENTITY_WEIGHT
            + effort_score * EFFORT_WEIGHT
            + variety_score
        )
        scored.append({
            'candidate': candidate,
            'score': score,
            'modality': modality_score,
            'identity': identity_score,
            'effort': effort_score,
            'variety': variety_score
        })

    return scored


def rank_candidates(
    candidates: List[InterventionCandidate],
    default_modality: ModalityVector,
    user: User,
    itch_inference: ItchInference,
    rng=None
) -> List[InterventionCandidate]:
    """
    Rank candidates by composite score (descending, stable on ties).

    Args:
        candidates: Filtered candidates
        default_modality: Modality of the default behaviour being interrupted
        user: User profile
        itch_inference: Inferred itches. Not used in scoring yet.
        rng: Random source for the variety bonus

    Returns:
        The same candidates, reordered
    """
    scored = score_candidates(candidates, default_modality, user, rng=rng)
    scored.sort(key=lambda x: x['score'], reverse=True)

    if scored:
        summary = ", ".join(f"{s['candidate'].id} ({s['score']:.3f})" for s in scored)
        logger.debug(f"Ranked candidates for situation {itch_inference.situation_id}: {summary}")

    return [s['candidate'] for s in scored]
