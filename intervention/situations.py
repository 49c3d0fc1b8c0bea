"""
Situation helpers: time-of-day bucketing, id generation and a situation
simulator used by the demo endpoint.
"""

import logging
import random
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from intervention.models import Situation, SituationContext

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits

# Situation types the simulator draws from
SIMULATED_TYPES = ['REPEATED_APP_OPEN', 'LONG_SINGLE_APP_SESSION', 'WORK_BREAK', 'WAITING_CONTEXT']
SIMULATED_TIME_BUCKETS = ['morning', 'afternoon', 'evening']


def generate_id() -> str:
    """Short random identifier (9 lowercase alphanumerics)."""
    return ''.join(secrets.choice(_ID_ALPHABET) for _ in range(9))


def now_ms() -> int:
    return int(time.time() * 1000)


def local_now(tz_name: Optional[str]) -> datetime:
    """Current wall-clock time in the named IANA timezone, UTC when the name is unknown."""
    if tz_name:
        try:
            return datetime.now(ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone '{tz_name}', using UTC")
    return datetime.now(timezone.utc)


def get_time_bucket(when: Optional[datetime] = None) -> str:
    """
    Map a local time to a time-of-day bucket.

    5-8 early_morning, 8-12 morning, 12-17 afternoon, 17-21 evening,
    21-24 night, 0-5 late_night.
    """
    hour = (when or datetime.now()).hour

    if 5 <= hour < 8:
        return 'early_morning'
    if 8 <= hour < 12:
        return 'morning'
    if 12 <= hour < 17:
        return 'afternoon'
    if 17 <= hour < 21:
        return 'evening'
    if hour >= 21:
        return 'night'
    return 'late_night'


def simulate_situation(rng=None) -> Situation:
    """Produce a plausible situation for demos, with confidence in [0.7, 1.0)."""
    rng = rng or random
    return Situation(
        id=generate_id(),
        type=rng.choice(SIMULATED_TYPES),
        confidence=0.7 + rng.random() * 0.3,
        started_at=now_ms(),
        context=SituationContext(
            time_of_day=rng.choice(SIMULATED_TIME_BUCKETS),
            location_category='home',
            recent_cognitive_load='medium'
        ),
        eligible_for_intervention=True
    )
