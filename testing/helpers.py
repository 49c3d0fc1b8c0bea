"""
Shared builders for intervention tests.
"""

from intervention.models import (
    IdentityAnchor,
    InterventionCandidate,
    ModalityVector,
    Situation,
    SituationContext,
    User,
    UserPreferences
)


class FixedRandom:
    """Random source stub: random() returns a fixed value, choice() the first item."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def random(self) -> float:
        return self.value

    def choice(self, seq):
        return seq[0]


def make_situation(
    situation_type: str = "WAITING_CONTEXT",
    confidence: float = 0.9,
    time_of_day=None,
    location=None,
    load=None,
    app_category=None,
    eligible: bool = True
) -> Situation:
    """Helper to create a Situation with minimal boilerplate."""
    return Situation(
        id="sit-1",
        type=situation_type,
        confidence=confidence,
        started_at=1_700_000_000_000,
        context=SituationContext(
            time_of_day=time_of_day,
            location_category=location,
            recent_cognitive_load=load,
            app_category=app_category
        ),
        eligible_for_intervention=eligible
    )


def make_user(*anchors: str, quiet_hours=None, excluded_apps=None, timezone="UTC") -> User:
    """Helper to create a User with the given identity anchor labels."""
    return User(
        id="user-1",
        timezone=timezone,
        identity_anchors=[
            IdentityAnchor(id=f"anchor-{i}", label=label, priority=i)
            for i, label in enumerate(anchors)
        ],
        preferences=UserPreferences(
            quiet_hours=quiet_hours or [],
            excluded_apps=excluded_apps or []
        )
    )


def make_candidate(
    candidate_id: str,
    effort: str = "low",
    tags=None,
    constraints=None,
    modality=None,
    launch_target=None
) -> InterventionCandidate:
    """Helper to create an InterventionCandidate."""
    return InterventionCandidate(
        id=candidate_id,
        label=candidate_id.replace("-", " ").title(),
        modality=modality or ModalityVector(),
        required_effort=effort,
        context_constraints=constraints or [],
        identity_tags=tags or [],
        launch_target=launch_target
    )
