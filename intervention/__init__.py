"""
Intervention package for habit interventions.

This package provides:
- Itch inference and effort budget estimation for a situation
- Suggestion engine: filters and ranks alternative activities
- Decision engine: trigger gate (cooldown, quiet hours, confidence)
- Intervention orchestrator: assembles decisions and coordinates the flow
- History store: active intervention, outcomes and cooldown
- API endpoints under /intervention
"""

from . import models
from . import itch_inference
from . import effort_budget
from . import modality
from . import catalog
from . import suggestion_engine
from . import decision_engine
from . import history_store
from . import intervention
from . import api

__all__ = [
    'models',
    'itch_inference',
    'effort_budget',
    'modality',
    'catalog',
    'suggestion_engine',
    'decision_engine',
    'history_store',
    'intervention',
    'api'
]
