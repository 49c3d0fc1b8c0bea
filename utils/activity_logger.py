"""
Activity Logger Utility

Provides activity logging for the intervention service.
Logs are written to JSONL files for easy parsing.
"""

import json
import os
import logging
import threading
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

# Base directory for activity logs
BASE_LOG_DIR = os.getenv("ACTIVITY_LOG_DIR", "data/activity_logs")

INTERVENTION_LOG_DIR = os.path.join(BASE_LOG_DIR, "intervention")

# Lock for thread-safe file writing
_intervention_lock = threading.Lock()


def _ensure_log_dir(log_dir: str):
    """Ensure log directory exists."""
    os.makedirs(log_dir, exist_ok=True)


def _get_log_file(log_dir: str, prefix: str) -> str:
    """
    Get log file path for today's date.

    Args:
        log_dir: Log directory path
        prefix: File prefix (e.g., "intervention")

    Returns:
        Path to log file
    """
    _ensure_log_dir(log_dir)
    today = datetime.now().strftime("%Y%m%d")
    return os.path.join(log_dir, f"{prefix}_activity_{today}.jsonl")


def log_intervention_activity(
    user_id: str,
    timestamp: datetime,
    status: str,  # "success", "skipped", "error"
    situation_id: Optional[str] = None,
    situation_type: Optional[str] = None,
    situation_confidence: Optional[float] = None,
    trigger_intervention: Optional[bool] = None,
    trigger_reasoning: Optional[str] = None,
    effort_level: Optional[str] = None,
    itches: Optional[list] = None,
    decision_id: Optional[str] = None,
    primary_id: Optional[str] = None,
    alternative_ids: Optional[list] = None,
    error: Optional[str] = None,
    duration_seconds: Optional[float] = None,
    log_dir: Optional[str] = None
):
    """
    Log intervention service activity.

    Args:
        user_id: User id
        timestamp: Request timestamp
        status: Activity status ("success", "skipped", "error")
        situation_id: Situation id
        situation_type: Situation type
        situation_confidence: Situation confidence
        trigger_intervention: Whether the trigger gate allowed the intervention
        trigger_reasoning: Trigger gate reasoning text
        effort_level: Estimated effort budget tier
        itches: Inferred itches as dicts
        decision_id: Decision id (if generated)
        primary_id: Primary candidate id
        alternative_ids: Alternative candidate ids
        error: Error message (if failed)
        duration_seconds: Processing duration in seconds
        log_dir: Override for the log directory
    """
    log_entry = {
        "timestamp": timestamp.isoformat(),
        "logged_at": datetime.now().isoformat(),
        "user_id": user_id,
        "status": status,
        "situation": {
            "id": situation_id,
            "type": situation_type,
            "confidence": situation_confidence
        },
        "trigger": {
            "trigger_intervention": trigger_intervention,
            "reasoning": trigger_reasoning
        },
        "effort_level": effort_level,
        "itches": itches or [],
        "decision": {
            "id": decision_id,
            "primary": primary_id,
            "alternatives": alternative_ids or []
        },
        "error": error,
        "duration_seconds": duration_seconds
    }

    try:
        log_file = _get_log_file(log_dir or INTERVENTION_LOG_DIR, "intervention")
        with _intervention_lock:
            with open(log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')
        logger.debug(f"Logged intervention activity to {log_file}")
    except OSError as e:
        logger.warning(f"Failed to log intervention activity: {e}", exc_info=True)
