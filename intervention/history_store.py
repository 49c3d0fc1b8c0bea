"""
Intervention History Store

Keeps the active intervention, recent decisions and outcomes in memory,
and derives cooldown state and acceptance statistics from them.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from intervention.config_loader import load_config
from intervention.models import (
    InterventionDecision,
    InterventionStats,
    Outcome,
    Situation
)

logger = logging.getLogger(__name__)

_config = load_config()
_trigger_config = _config.get("trigger", {})

DEFAULT_COOLDOWN_MINUTES = _trigger_config.get("cooldown_minutes", 15)
MAX_HISTORY = 100
MAX_RECENT_OUTCOMES = 50


class InterventionHistory:
    """Thread-safe record of shown interventions and their outcomes."""

    def __init__(
        self,
        cooldown_minutes: float = DEFAULT_COOLDOWN_MINUTES,
        clock: Callable[[], float] = time.time
    ):
        self._lock = threading.RLock()
        self._clock = clock
        self.cooldown_minutes = cooldown_minutes
        self.reset()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def reset(self) -> None:
        with self._lock:
            self.active_intervention: Optional[InterventionDecision] = None
            self.active_situation: Optional[Situation] = None
            self.intervention_history: List[InterventionDecision] = []
            self.recent_outcomes: List[Outcome] = []
            self.last_intervention_time: Optional[int] = None
            self.total_interventions = 0
            self.accepted_count = 0
            self.dismissed_count = 0
            self.continued_count = 0

    @contextmanager
    def exclusive(self) -> Iterator["InterventionHistory"]:
        """
        Hold the store's lock across several calls.

        Used to make the cooldown check and show_intervention() one atomic step.
        The lock is re-entrant, so the store's own methods can be called inside.
        """
        with self._lock:
            yield self

    def show_intervention(self, decision: InterventionDecision, situation: Situation) -> None:
        """Mark a decision as the active intervention and add it to history (newest first)."""
        with self._lock:
            self.active_intervention = decision
            self.active_situation = situation
            self.intervention_history = [decision] + self.intervention_history[:MAX_HISTORY - 1]
            self.total_interventions += 1
        logger.info(f"Showing intervention {decision.id} ({decision.primary.id}) for situation {situation.id}")

    def record_outcome(self, action: str, follow_through: Optional[bool] = None) -> Optional[Outcome]:
        """
        Record what the user did with the active intervention and start the cooldown.

        Returns:
            The recorded Outcome, or None if no intervention was active
        """
        with self._lock:
            if self.active_intervention is None:
                logger.warning(f"Outcome '{action}' recorded with no active intervention, ignoring")
                return None

            outcome = Outcome(
                intervention_id=self.active_intervention.id,
                action_taken=action,
                follow_through=follow_through,
                timestamp=self._now_ms()
            )
            self.recent_outcomes = [outcome] + self.recent_outcomes[:MAX_RECENT_OUTCOMES - 1]
            self.last_intervention_time = outcome.timestamp
            self.active_intervention = None
            self.active_situation = None

            if action == 'accepted':
                self.accepted_count += 1
            elif action == 'dismissed':
                self.dismissed_count += 1
            elif action == 'continued_default':
                self.continued_count += 1

        logger.info(f"Recorded outcome '{action}' for intervention {outcome.intervention_id}")
        return outcome

    def dismiss_intervention(self) -> Optional[Outcome]:
        return self.record_outcome('dismissed')

    def clear_active_intervention(self) -> None:
        with self._lock:
            self.active_intervention = None
            self.active_situation = None

    def is_in_cooldown(self) -> bool:
        with self._lock:
            if self.last_intervention_time is None:
                return False
            cooldown_ms = self.cooldown_minutes * 60 * 1000
            return self._now_ms() - self.last_intervention_time < cooldown_ms

    def set_cooldown_minutes(self, minutes: float) -> None:
        with self._lock:
            self.cooldown_minutes = minutes

    def get_acceptance_rate(self) -> float:
        with self._lock:
            if self.total_interventions == 0:
                return 0.0
            return self.accepted_count / self.total_interventions

    def stats(self) -> InterventionStats:
        in_cooldown = self.is_in_cooldown()
        acceptance_rate = self.get_acceptance_rate()
        with self._lock:
            return InterventionStats(
                total_interventions=self.total_interventions,
                accepted_count=self.accepted_count,
                dismissed_count=self.dismissed_count,
                continued_count=self.continued_count,
                acceptance_rate=acceptance_rate,
                in_cooldown=in_cooldown,
                cooldown_minutes=self.cooldown_minutes,
                active_intervention_id=self.active_intervention.id if self.active_intervention else None
            )
