"""
Decision Engine

This module implements the trigger gate that decides whether an
intervention should be shown for a situation at all.
"""

from datetime import datetime
from typing import Optional, Tuple, List
import logging

from intervention.config_loader import load_config
from intervention.models import Situation, User, TimeRange
from intervention.situations import local_now

logger = logging.getLogger(__name__)

# Load configuration
_config = load_config()
_trigger_config = _config.get("trigger", {})

CONFIDENCE_THRESHOLD = _trigger_config.get("confidence_threshold", 0.5)


def _to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(':')
    return int(hours) * 60 + int(minutes)


def is_time_in_range(time_str: str, start: str, end: str) -> bool:
    """
    Check whether an HH:mm time falls inside [start, end].

    Ranges where start > end wrap past midnight (e.g. 22:00 - 07:00).
    """
    t = _to_minutes(time_str)
    start_m = _to_minutes(start)
    end_m = _to_minutes(end)

    if start_m > end_m:
        return t >= start_m or t <= end_m
    return start_m <= t <= end_m


def in_quiet_hours(quiet_hours: List[TimeRange], now: datetime) -> bool:
    current = now.strftime("%H:%M")
    return any(is_time_in_range(current, r.start, r.end) for r in quiet_hours)


def decide_trigger_intervention(
    situation: Situation,
    user: User,
    in_cooldown: bool,
    now: Optional[datetime] = None
) -> Tuple[bool, Optional[str]]:
    """
    Decide whether to show an intervention for this situation.

    Args:
        situation: Classified situation
        user: User profile (quiet hours)
        in_cooldown: Whether the history store reports an active cooldown
        now: Local time to check quiet hours against (defaults to now in the user's timezone)

    Returns:
        Tuple of (trigger_intervention: bool, reasoning: Optional[str])
    """
    now = now or local_now(user.timezone)
    reasoning_parts = []

    if not situation.eligible_for_intervention:
        reasoning_parts.append(f"Situation '{situation.type}' not eligible for intervention")
    elif in_cooldown:
        reasoning_parts.append("In cooldown after previous intervention")
    elif in_quiet_hours(user.preferences.quiet_hours, now):
        reasoning_parts.append(f"Quiet hours active at {now.strftime('%H:%M')}")
    elif situation.confidence < CONFIDENCE_THRESHOLD:
        reasoning_parts.append(f"Confidence {situation.confidence:.2f} < {CONFIDENCE_THRESHOLD}")

    should_trigger = not reasoning_parts
    if should_trigger:
        reasoning_parts.append(f"Situation '{situation.type}' detected")
        reasoning_parts.append(f"Confidence {situation.confidence:.2f} >= {CONFIDENCE_THRESHOLD}")

    reasoning = "; ".join(reasoning_parts)

    logger.info(f"Decision: trigger={should_trigger}, reason={reasoning}")

    return should_trigger, reasoning
