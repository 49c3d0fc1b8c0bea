"""
Itch Inference

Maps a classified situation to the psychological "itches" (boredom,
avoidance, depletion, ...) most likely behind the urge to reach for the phone.
"""

import logging
import time

from intervention.config_loader import load_config
from intervention.models import Situation, ItchInference, ItchWeight

logger = logging.getLogger(__name__)

# Load configuration
_config = load_config()
_itch_config = _config.get("itch_inference", {})

# Base probability of each itch per situation type
SITUATION_ITCH_MAP = _itch_config.get("situation_itch_map", {
    'REPEATED_APP_OPEN': {'BOREDOM': 0.6, 'RESTLESSNESS': 0.4, 'REWARD_SEEKING': 0.5},
    'LONG_SINGLE_APP_SESSION': {'AVOIDANCE': 0.5, 'BOREDOM': 0.3, 'DEPLETION': 0.4},
    'POST_MEETING_TRANSITION': {'DEPLETION': 0.6, 'AVOIDANCE': 0.3, 'RESTLESSNESS': 0.4},
    'ARRIVED_HOME_AFTER_WORK': {'DEPLETION': 0.7, 'RESTLESSNESS': 0.3},
    'LATE_NIGHT_IDLE': {'ANXIETY': 0.4, 'LONELINESS': 0.5, 'RESTLESSNESS': 0.3},
    'WAITING_CONTEXT': {'BOREDOM': 0.8, 'RESTLESSNESS': 0.5},
    'MORNING_ROUTINE': {'AVOIDANCE': 0.4, 'ANXIETY': 0.3},
    'WORK_BREAK': {'DEPLETION': 0.5, 'BOREDOM': 0.4}
})


def infer_itches(situation: Situation) -> ItchInference:
    """
    Infer weighted itches for a situation.

    Each base probability from SITUATION_ITCH_MAP is scaled by the situation's
    confidence. Unknown situation types yield an empty list.

    Args:
        situation: Classified situation

    Returns:
        ItchInference with itches sorted by weight (descending)
    """
    itch_map = SITUATION_ITCH_MAP.get(situation.type, {})

    itches = [
        ItchWeight(itch=itch, weight=base * situation.confidence)
        for itch, base in itch_map.items()
    ]
    itches.sort(key=lambda x: x.weight, reverse=True)

    if itches:
        logger.debug(
            f"Inferred itches for {situation.type}: "
            + ", ".join(f"{i.itch}={i.weight:.2f}" for i in itches)
        )
    else:
        logger.debug(f"No itch mapping for situation type '{situation.type}'")

    return ItchInference(
        situation_id=situation.id,
        itches=itches,
        timestamp=int(time.time() * 1000)
    )
