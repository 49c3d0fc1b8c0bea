"""
Pydantic Models for Intervention Engine

This module defines the situation, user and candidate records consumed by
the engine, the decision it produces, and request/response models for the
intervention API.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal


# Situation categories produced by the trigger classifier
SITUATION_TYPES = [
    'REPEATED_APP_OPEN',
    'LONG_SINGLE_APP_SESSION',
    'POST_MEETING_TRANSITION',
    'ARRIVED_HOME_AFTER_WORK',
    'LATE_NIGHT_IDLE',
    'WAITING_CONTEXT',
    'MORNING_ROUTINE',
    'WORK_BREAK',
]

ITCH_TYPES = [
    'BOREDOM',
    'AVOIDANCE',
    'DEPLETION',
    'LONELINESS',
    'RESTLESSNESS',
    'ANXIETY',
    'CURIOSITY',
    'REWARD_SEEKING',
]

TIME_BUCKETS = ['early_morning', 'morning', 'afternoon', 'evening', 'night', 'late_night']

# Ordered from lowest to highest effort
EFFORT_LEVELS = ['very_low', 'low', 'medium', 'high']

EffortLevel = Literal['very_low', 'low', 'medium', 'high']
OutcomeAction = Literal['accepted', 'dismissed', 'continued_default']


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# =============================================================================
# Situation
# =============================================================================

class SituationContext(BaseModel):
    """Contextual signals attached to a classified situation."""
    app_category: Optional[str] = None  # 'social_media' | 'entertainment' | 'productivity' | ...
    time_of_day: Optional[str] = None  # one of TIME_BUCKETS
    location_category: Optional[str] = None  # 'home' | 'work' | 'transit' | 'public' | 'unknown'
    recent_cognitive_load: Optional[str] = None  # 'low' | 'medium' | 'high'


class Situation(BaseModel):
    """A classified contextual trigger, e.g. a repeated app open."""
    id: str
    type: str  # one of SITUATION_TYPES; unknown values fall back to defaults
    confidence: float = Field(description="Classifier confidence between 0.0 and 1.0")
    started_at: int = Field(default=0, description="Epoch milliseconds")
    context: SituationContext = Field(default_factory=SituationContext)
    eligible_for_intervention: bool = True

    @field_validator('confidence')
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return _clamp(v, 0.0, 1.0)


# =============================================================================
# User
# =============================================================================

class IdentityAnchor(BaseModel):
    """A self-identity label the user wants to reinforce ('Builder', 'Mindful', ...)."""
    id: str
    label: str
    description: Optional[str] = None
    priority: int = 0
    icon: Optional[str] = None


class TimeRange(BaseModel):
    start: str  # HH:mm
    end: str  # HH:mm


class UserPreferences(BaseModel):
    intervention_frequency: Literal['low', 'medium', 'high'] = 'medium'
    quiet_hours: List[TimeRange] = Field(default_factory=lambda: [TimeRange(start="22:00", end="07:00")])
    excluded_apps: List[str] = Field(default_factory=list)
    tone: Literal['gentle', 'direct', 'minimal'] = 'gentle'
    weekly_recalibration_enabled: bool = True
    analytics_enabled: bool = False


class User(BaseModel):
    id: str
    timezone: str = "UTC"
    chronotype: Optional[Literal['morning', 'evening', 'neutral']] = None
    identity_anchors: List[IdentityAnchor] = Field(default_factory=list)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: int = 0
    onboarding_completed: bool = False


# =============================================================================
# Inferred state
# =============================================================================

class ItchWeight(BaseModel):
    itch: str  # one of ITCH_TYPES
    weight: float


class ItchInference(BaseModel):
    situation_id: str
    itches: List[ItchWeight] = Field(default_factory=list)
    timestamp: int


class ModalityVector(BaseModel):
    """Five-axis behavioural fingerprint of an activity. Axis values are clamped into [-1, 1]."""
    passive_active: float = 0.0  # -1 passive, +1 active
    novel_familiar: float = 0.0  # -1 familiar, +1 novel
    social_solo: float = 0.0  # -1 solo, +1 social
    finite_infinite: float = 0.0  # -1 finite, +1 infinite
    expressive_consumptive: float = 0.0  # -1 consumptive, +1 expressive

    @field_validator('*')
    @classmethod
    def clamp_axis(cls, v: float) -> float:
        return _clamp(v, -1.0, 1.0)


class EffortBudget(BaseModel):
    level: EffortLevel
    confidence: float


# =============================================================================
# Candidates and decisions
# =============================================================================

class ContextConstraint(BaseModel):
    type: Literal['location', 'time', 'app', 'custom']
    value: str
    operator: Literal['equals', 'not_equals', 'contains'] = 'equals'


class InterventionCandidate(BaseModel):
    """A catalog entry describing one alternative activity."""
    id: str
    label: str
    description: Optional[str] = None
    modality: ModalityVector
    required_effort: EffortLevel
    context_constraints: List[ContextConstraint] = Field(default_factory=list)
    surface: Literal['on_phone', 'off_phone'] = 'off_phone'
    launch_target: Optional[str] = None  # deep link
    identity_tags: List[str] = Field(default_factory=list)
    icon: Optional[str] = None


class InterventionDecision(BaseModel):
    id: str
    situation_id: str
    primary: InterventionCandidate
    alternatives: List[InterventionCandidate] = Field(default_factory=list)
    explanation: str
    timestamp: int


class Outcome(BaseModel):
    intervention_id: str
    action_taken: OutcomeAction
    follow_through: Optional[bool] = None
    timestamp: int


# =============================================================================
# API request/response models
# =============================================================================

class GenerateInterventionRequest(BaseModel):
    """Request model for the generate endpoint."""
    situation: Situation
    user: User
    candidates: Optional[List[InterventionCandidate]] = Field(
        default=None, description="Optional catalog override. Uses the default catalog if omitted."
    )


class GenerateInterventionResponse(BaseModel):
    """Response model for the generate endpoint."""
    triggered: bool
    reasoning: Optional[str] = None
    decision: Optional[InterventionDecision] = None
    itches: List[ItchWeight] = Field(default_factory=list)
    effort_budget: Optional[EffortBudget] = None


class SimulateInterventionRequest(BaseModel):
    user: User


class RecordOutcomeRequest(BaseModel):
    action: OutcomeAction
    follow_through: Optional[bool] = None


class InterventionStats(BaseModel):
    total_interventions: int
    accepted_count: int
    dismissed_count: int
    continued_count: int
    acceptance_rate: float
    in_cooldown: bool
    cooldown_minutes: float
    active_intervention_id: Optional[str] = None


class CooldownRequest(BaseModel):
    minutes: float = Field(ge=0, description="Cooldown after an outcome, in minutes")


class TimeBucketResponse(BaseModel):
    timezone: str
    local_time: str
    time_bucket: str
