"""
Configuration Loader for Intervention Engine

This module loads configuration from JSON file and provides fallback defaults.
"""

import json
import os
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Default configuration (used as fallback)
DEFAULT_CONFIG = {
    "itch_inference": {
        "situation_itch_map": {
            "REPEATED_APP_OPEN": {"BOREDOM": 0.6, "RESTLESSNESS": 0.4, "REWARD_SEEKING": 0.5},
            "LONG_SINGLE_APP_SESSION": {"AVOIDANCE": 0.5, "BOREDOM": 0.3, "DEPLETION": 0.4},
            "POST_MEETING_TRANSITION": {"DEPLETION": 0.6, "AVOIDANCE": 0.3, "RESTLESSNESS": 0.4},
            "ARRIVED_HOME_AFTER_WORK": {"DEPLETION": 0.7, "RESTLESSNESS": 0.3},
            "LATE_NIGHT_IDLE": {"ANXIETY": 0.4, "LONELINESS": 0.5, "RESTLESSNESS": 0.3},
            "WAITING_CONTEXT": {"BOREDOM": 0.8, "RESTLESSNESS": 0.5},
            "MORNING_ROUTINE": {"AVOIDANCE": 0.4, "ANXIETY": 0.3},
            "WORK_BREAK": {"DEPLETION": 0.5, "BOREDOM": 0.4}
        }
    },
    "effort_budget": {
        "time_effort_map": {
            "early_morning": "low",
            "morning": "high",
            "afternoon": "medium",
            "evening": "medium",
            "night": "low",
            "late_night": "very_low"
        },
        "default_time_of_day": "afternoon",
        "confidence_factor": 0.8
    },
    "ranking": {
        "modality_weight": 0.40,
        "identity_weight": 0.30,
        "effort_weight": 0.15,
        "variety_max": 0.15,
        "neutral_identity_score": 0.5
    },
    "decision": {
        "max_alternatives": 3,
        "default_explanations": ["A moment to pause."]
    },
    "trigger": {
        "confidence_threshold": 0.5,
        "cooldown_minutes": 15
    }
}

# Cache for loaded config
_config_cache: Dict[str, Any] = None


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to config file. If None, uses INTERVENTION_CONFIG_PATH
                     or config.json in the same directory as this module.

    Returns:
        Configuration dictionary. Returns default config if file not found or invalid.
    """
    global _config_cache

    # Return cached config if available
    if _config_cache is not None:
        return _config_cache

    # Determine config file path
    if config_path is None:
        config_path = os.getenv("INTERVENTION_CONFIG_PATH")
    if config_path is None:
        module_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(module_dir, "config.json")

    # Try to load config file
    try:
        if os.path.exists(config_path):
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
            _config_cache = config
            return config
        else:
            logger.warning(f"Config file not found at {config_path}, using default configuration")
            _config_cache = DEFAULT_CONFIG
            return DEFAULT_CONFIG
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {config_path}: {e}. Using default configuration.")
        _config_cache = DEFAULT_CONFIG
        return DEFAULT_CONFIG
    except OSError as e:
        logger.error(f"Error reading config file {config_path}: {e}. Using default configuration.")
        _config_cache = DEFAULT_CONFIG
        return DEFAULT_CONFIG


def reset_config_cache() -> None:
    """Drop the cached configuration so the next load_config() re-reads the file."""
    global _config_cache
    _config_cache = None
