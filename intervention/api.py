"""
API Layer for Intervention Service

This module provides FastAPI endpoints for generating interventions and
recording their outcomes.
"""

import logging
import threading
from fastapi import APIRouter, Depends, HTTPException, Request

from intervention.history_store import InterventionHistory
from intervention.intervention import process_generate_request, process_simulate_request
from intervention.models import (
    CooldownRequest,
    GenerateInterventionRequest,
    GenerateInterventionResponse,
    InterventionStats,
    Outcome,
    RecordOutcomeRequest,
    SimulateInterventionRequest,
    TimeBucketResponse
)
from intervention.situations import get_time_bucket, local_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intervention", tags=["intervention"])

_history_lock = threading.Lock()


def get_history(request: Request) -> InterventionHistory:
    """History store attached to the running app (created on first use)."""
    with _history_lock:
        history = getattr(request.app.state, "intervention_history", None)
        if history is None:
            history = InterventionHistory()
            request.app.state.intervention_history = history
        return history


@router.post("/generate", response_model=GenerateInterventionResponse)
async def generate(request: GenerateInterventionRequest, history: InterventionHistory = Depends(get_history)):
    """
    Generate an intervention for a classified situation.

    This endpoint:
    1. Checks eligibility, cooldown, quiet hours and confidence
    2. Infers itches and the effort budget
    3. Filters and ranks candidates, picking a primary and up to 3 alternatives
    4. Marks the decision as the active intervention

    Args:
        request: GenerateInterventionRequest with situation, user and optional catalog

    Returns:
        GenerateInterventionResponse (decision is null when the trigger gate declined)
    """
    logger.info(f"POST /intervention/generate - Endpoint called for user {request.user.id}")

    try:
        result = process_generate_request(request, history)
        logger.info(f"POST /intervention/generate - triggered={result.triggered} for user {request.user.id}")
        return result
    except ValueError as e:
        logger.error(f"POST /intervention/generate - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"POST /intervention/generate - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.post("/simulate", response_model=GenerateInterventionResponse)
async def simulate(request: SimulateInterventionRequest, history: InterventionHistory = Depends(get_history)):
    """Generate an intervention for a simulated situation (demo)."""
    logger.info(f"POST /intervention/simulate - Endpoint called for user {request.user.id}")

    try:
        return process_simulate_request(request.user, history)
    except ValueError as e:
        logger.error(f"POST /intervention/simulate - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"POST /intervention/simulate - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.post("/outcome", response_model=Outcome)
async def record_outcome(request: RecordOutcomeRequest, history: InterventionHistory = Depends(get_history)):
    """
    Record what the user did with the active intervention.

    Starts the cooldown window. Returns 404 if no intervention is active.
    """
    logger.info(f"POST /intervention/outcome - action={request.action}")

    outcome = history.record_outcome(request.action, request.follow_through)
    if outcome is None:
        raise HTTPException(status_code=404, detail="No active intervention")
    return outcome


@router.post("/dismiss", response_model=Outcome)
async def dismiss(history: InterventionHistory = Depends(get_history)):
    """Dismiss the active intervention. Same as an outcome of 'dismissed'."""
    logger.info("POST /intervention/dismiss - Dismiss called")

    outcome = history.dismiss_intervention()
    if outcome is None:
        raise HTTPException(status_code=404, detail="No active intervention")
    return outcome


@router.post("/clear", response_model=InterventionStats)
async def clear(history: InterventionHistory = Depends(get_history)):
    """Drop the active intervention without recording an outcome or starting a cooldown."""
    logger.info("POST /intervention/clear - Clear called")
    history.clear_active_intervention()
    return history.stats()


@router.put("/cooldown", response_model=InterventionStats)
async def set_cooldown(request: CooldownRequest, history: InterventionHistory = Depends(get_history)):
    """Change the cooldown window applied after each outcome."""
    logger.info(f"PUT /intervention/cooldown - minutes={request.minutes}")
    history.set_cooldown_minutes(request.minutes)
    return history.stats()


@router.get("/time-bucket", response_model=TimeBucketResponse)
async def time_bucket(timezone: str = "UTC"):
    """Current time-of-day bucket in an IANA timezone (UTC when unknown)."""
    logger.info(f"GET /intervention/time-bucket - timezone={timezone}")
    now = local_now(timezone)
    return TimeBucketResponse(
        timezone=str(now.tzinfo),
        local_time=now.strftime("%H:%M"),
        time_bucket=get_time_bucket(now)
    )


@router.get("/stats", response_model=InterventionStats)
async def stats(history: InterventionHistory = Depends(get_history)):
    """Totals, outcome counts, acceptance rate and cooldown state."""
    logger.info("GET /intervention/stats - Stats called")
    return history.stats()


@router.get("/health")
async def health():
    """Health check endpoint for intervention service."""
    logger.info("GET /intervention/health - Health check called")
    return {
        "status": "healthy",
        "service": "intervention"
    }
