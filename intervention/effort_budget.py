"""
Effort Budget Estimator

Estimates the highest effort tier a user can reasonably accept right now,
from the time of day, recent cognitive load and the situation type.
"""

import logging

from intervention.config_loader import load_config
from intervention.models import Situation, EffortBudget, EFFORT_LEVELS

logger = logging.getLogger(__name__)

# Load configuration
_config = load_config()
_effort_config = _config.get("effort_budget", {})

TIME_EFFORT_MAP = _effort_config.get("time_effort_map", {
    'early_morning': 'low',
    'morning': 'high',
    'afternoon': 'medium',
    'evening': 'medium',
    'night': 'low',
    'late_night': 'very_low'
})
DEFAULT_TIME_OF_DAY = _effort_config.get("default_time_of_day", "afternoon")
CONFIDENCE_FACTOR = _effort_config.get("confidence_factor", 0.8)

# Situation types that cost an extra tier of effort
DRAINING_SITUATIONS = ['POST_MEETING_TRANSITION']


def effort_index(level: str) -> int:
    """Position of an effort tier in EFFORT_LEVELS (0 = very_low)."""
    return EFFORT_LEVELS.index(level)


def downgrade_effort(level: str) -> str:
    """Move one tier toward very_low, staying put at the bottom."""
    return EFFORT_LEVELS[max(0, effort_index(level) - 1)]


def upgrade_effort(level: str) -> str:
    """Move one tier toward high, staying put at the top."""
    return EFFORT_LEVELS[min(len(EFFORT_LEVELS) - 1, effort_index(level) + 1)]


def estimate_effort_budget(situation: Situation) -> EffortBudget:
    """
    Estimate the effort budget for a situation.

    Steps:
    1. Base tier from time of day (missing or unknown bucket -> afternoon)
    2. High cognitive load downgrades one tier, low load upgrades one tier
    3. Post-meeting transitions downgrade one more tier

    Args:
        situation: Classified situation

    Returns:
        EffortBudget with the final tier and confidence (situation confidence * 0.8)
    """
    time_of_day = situation.context.time_of_day or DEFAULT_TIME_OF_DAY
    if time_of_day not in TIME_EFFORT_MAP:
        logger.debug(f"Unknown time bucket '{time_of_day}', using {DEFAULT_TIME_OF_DAY}")
        time_of_day = DEFAULT_TIME_OF_DAY
    cognitive_load = situation.context.recent_cognitive_load or 'medium'

    level = TIME_EFFORT_MAP[time_of_day]

    if cognitive_load == 'high':
        level = downgrade_effort(level)
    elif cognitive_load == 'low':
        level = upgrade_effort(level)

    if situation.type in DRAINING_SITUATIONS:
        level = downgrade_effort(level)

    logger.debug(
        f"Effort budget: {level} (time={time_of_day}, load={cognitive_load}, type={situation.type})"
    )

    return EffortBudget(
        level=level,
        confidence=situation.confidence * CONFIDENCE_FACTOR
    )
