"""Session API routes (create, state, move, submit, delete)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger

from priors_survey.api.deps import get_runner
from priors_survey.api.models import (
    CreateSessionRequest,
    MoveRequest,
    SessionState,
    SubmitRequest,
    SubmitResponse,
)
from priors_survey.api.services.registry import SessionRegistry, get_registry
from priors_survey.api.settings import settings
from priors_survey.core.slot_allocator import SlotClaimError
from priors_survey.core.trial_runner import TrialRunner

router = APIRouter()


def _state(runner: TrialRunner) -> SessionState:
    summary = runner.to_summary()
    summary["session_id"] = summary.pop("name")
    return SessionState(**summary)


@router.post(
    "/sessions/create",
    response_model=SessionState,
    summary="Claim a participant slot and start a survey session",
)
def create_session(
    payload: CreateSessionRequest, registry: SessionRegistry = Depends(get_registry)
) -> SessionState:
    """Create a TrialRunner and register it."""
    try:
        runner = TrialRunner.create(
            survey=payload.survey or settings.survey,
            source=payload.source,
            participant_id=payload.participant_id,
            allocate=False if payload.pilot else None,
        )
    except SlotClaimError as e:
        logger.exception("Slot claim failed")
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception("Failed to create session")
        raise HTTPException(status_code=400, detail=str(e))
    registry.add(runner)
    return _state(runner)


@router.get(
    "/sessions/{session_id}/state",
    response_model=SessionState,
    summary="Get current session state",
)
def get_state(session_id: str, runner: TrialRunner = Depends(get_runner)) -> SessionState:
    """Retrieve the current state snapshot."""
    return _state(runner)


@router.post(
    "/sessions/{session_id}/move",
    response_model=SessionState,
    summary="Report that the slider moved",
)
def move(
    session_id: str, body: MoveRequest, runner: TrialRunner = Depends(get_runner)
) -> SessionState:
    """Mark the slider as moved, enabling submit."""
    try:
        runner.move(body.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state(runner)


@router.post(
    "/sessions/{session_id}/submit",
    response_model=SubmitResponse,
    summary="Submit the current rating; a no-op unless the slider moved",
)
def submit(
    session_id: str, body: SubmitRequest, runner: TrialRunner = Depends(get_runner)
) -> SubmitResponse:
    """Record the rating and advance (or finish and save)."""
    try:
        accepted = runner.submit(body.rating)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Submit failed")
        raise HTTPException(status_code=400, detail=str(e))
    return SubmitResponse(accepted=accepted, state=_state(runner))


@router.delete(
    "/sessions/{session_id}",
    status_code=204,
    response_class=Response,
)
def delete_session(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
) -> Response:
    """Delete a session from the registry."""
    registry.remove(session_id)
    return Response(status_code=204)
