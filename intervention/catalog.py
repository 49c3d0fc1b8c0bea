"""
Intervention Catalog

Static catalog of alternative activities and the modality of the default
behaviour (mindless social media scrolling) they are meant to replace.
"""

import json
import logging
from typing import List, Dict, Any, Optional

from intervention.models import InterventionCandidate, ModalityVector

logger = logging.getLogger(__name__)

# The compulsive default behaviour candidates are compared against
SOCIAL_MEDIA_MODALITY = ModalityVector(
    passive_active=-0.8,
    novel_familiar=0.7,
    social_solo=0.4,
    finite_infinite=0.9,
    expressive_consumptive=-0.8
)

_DEFAULT_ENTRIES: List[Dict[str, Any]] = [
    {
        "id": "breathing-60",
        "label": "One minute of slow breathing",
        "description": "Breathe in for four, out for six. Just sixty seconds.",
        "modality": {"passive_active": -0.6, "novel_familiar": -0.5, "social_solo": -1.0,
                     "finite_infinite": -1.0, "expressive_consumptive": -0.2},
        "required_effort": "very_low",
        "surface": "off_phone",
        "identity_tags": ["Mindful", "Restful"],
        "icon": "leaf"
    },
    {
        "id": "look-outside",
        "label": "Look out a window",
        "description": "Find the farthest thing you can see and rest your eyes on it.",
        "modality": {"passive_active": -0.7, "novel_familiar": 0.2, "social_solo": -0.8,
                     "finite_infinite": -0.6, "expressive_consumptive": -0.6},
        "required_effort": "very_low",
        "surface": "off_phone",
        "identity_tags": ["Mindful", "Restful"],
        "icon": "eye"
    },
    {
        "id": "glass-of-water",
        "label": "Get a glass of water",
        "description": "Stand up, walk to the kitchen, drink it slowly.",
        "modality": {"passive_active": 0.2, "novel_familiar": -0.8, "social_solo": -0.8,
                     "finite_infinite": -1.0, "expressive_consumptive": -0.4},
        "required_effort": "very_low",
        "surface": "off_phone",
        "identity_tags": ["Restful", "Active"],
        "icon": "water"
    },
    {
        "id": "message-friend",
        "label": "Send a friend a real message",
        "description": "Not a like. A sentence or two to someone you miss.",
        "modality": {"passive_active": 0.1, "novel_familiar": -0.2, "social_solo": 1.0,
                     "finite_infinite": -0.6, "expressive_consumptive": 0.7},
        "required_effort": "low",
        "surface": "on_phone",
        "launch_target": "sms:",
        "identity_tags": ["Connected"],
        "icon": "chatbubbles"
    },
    {
        "id": "read-a-page",
        "label": "Read one page of a book",
        "description": "Pick up whatever you're reading and finish a single page.",
        "modality": {"passive_active": -0.4, "novel_familiar": 0.5, "social_solo": -1.0,
                     "finite_infinite": -0.4, "expressive_consumptive": -0.7},
        "required_effort": "low",
        "surface": "off_phone",
        "identity_tags": ["Learner", "Restful"],
        "icon": "book"
    },
    {
        "id": "stretch",
        "label": "Two-minute stretch",
        "description": "Neck, shoulders, back. Slow and easy.",
        "modality": {"passive_active": 0.6, "novel_familiar": -0.6, "social_solo": -1.0,
                     "finite_infinite": -1.0, "expressive_consumptive": -0.1},
        "required_effort": "low",
        "surface": "off_phone",
        "identity_tags": ["Active", "Mindful"],
        "icon": "body"
    },
    {
        "id": "jot-a-thought",
        "label": "Jot down what's on your mind",
        "description": "Three lines in a notebook or notes app.",
        "modality": {"passive_active": 0.2, "novel_familiar": 0.3, "social_solo": -1.0,
                     "finite_infinite": -0.8, "expressive_consumptive": 0.9},
        "required_effort": "low",
        "surface": "on_phone",
        "identity_tags": ["Creative", "Mindful"],
        "icon": "create"
    },
    {
        "id": "tidy-one-thing",
        "label": "Tidy one surface",
        "description": "A desk, a shelf, the counter. Just one.",
        "modality": {"passive_active": 0.7, "novel_familiar": -0.7, "social_solo": -1.0,
                     "finite_infinite": -1.0, "expressive_consumptive": 0.3},
        "required_effort": "medium",
        "surface": "off_phone",
        "context_constraints": [{"type": "location", "operator": "not_equals", "value": "transit"}],
        "identity_tags": ["Builder"],
        "icon": "home"
    },
    {
        "id": "learn-a-word",
        "label": "Learn one new word",
        "description": "Open your language app for a single lesson.",
        "modality": {"passive_active": 0.0, "novel_familiar": 0.8, "social_solo": -0.8,
                     "finite_infinite": -0.5, "expressive_consumptive": -0.2},
        "required_effort": "medium",
        "surface": "on_phone",
        "identity_tags": ["Learner"],
        "icon": "language"
    },
    {
        "id": "sketch",
        "label": "Doodle for five minutes",
        "description": "Anything at all. Nobody has to see it.",
        "modality": {"passive_active": 0.4, "novel_familiar": 0.6, "social_solo": -1.0,
                     "finite_infinite": -0.3, "expressive_consumptive": 1.0},
        "required_effort": "medium",
        "surface": "off_phone",
        "identity_tags": ["Creative"],
        "icon": "color-palette"
    },
    {
        "id": "walk-block",
        "label": "Walk around the block",
        "description": "Ten minutes outside, phone in your pocket.",
        "modality": {"passive_active": 0.9, "novel_familiar": 0.3, "social_solo": -0.6,
                     "finite_infinite": -0.7, "expressive_consumptive": -0.2},
        "required_effort": "high",
        "surface": "off_phone",
        "context_constraints": [{"type": "location", "operator": "equals", "value": "home"}],
        "identity_tags": ["Active", "Mindful"],
        "icon": "walk"
    },
    {
        "id": "build-session",
        "label": "Twenty minutes on a side project",
        "description": "Pick up exactly where you left off.",
        "modality": {"passive_active": 0.8, "novel_familiar": 0.4, "social_solo": -0.9,
                     "finite_infinite": 0.2, "expressive_consumptive": 0.9},
        "required_effort": "high",
        "surface": "off_phone",
        "identity_tags": ["Builder", "Creative"],
        "icon": "hammer"
    }
]


def build_catalog(entries: List[Dict[str, Any]]) -> List[InterventionCandidate]:
    """
    Validate raw catalog entries into InterventionCandidate records.

    Args:
        entries: List of candidate dictionaries

    Returns:
        List of InterventionCandidate

    Raises:
        ValueError: If the catalog is empty or an entry is malformed
    """
    if not entries:
        raise ValueError("Intervention catalog must contain at least one candidate")
    return [InterventionCandidate(**entry) for entry in entries]


def load_catalog(catalog_path: Optional[str] = None) -> List[InterventionCandidate]:
    """
    Load the candidate catalog from a JSON file, or the built-in catalog if no path is given.

    Raises:
        ValueError: If the file holds no candidates or cannot be parsed
    """
    if catalog_path is None:
        return build_catalog(_DEFAULT_ENTRIES)

    try:
        with open(catalog_path, 'r', encoding='utf-8') as f:
            entries = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in catalog file {catalog_path}: {e}")

    catalog = build_catalog(entries)
    logger.info(f"Loaded {len(catalog)} intervention candidates from {catalog_path}")
    return catalog


DEFAULT_INTERVENTIONS = load_catalog()
