"""Pydantic models (request/response schemas) for the API.

These models also drive the generated OpenAPI spec.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class ResultItem(BaseModel):
    """One trial result as stored."""

    stim1: str
    rating: Optional[Union[int, float]] = None
    rt: Optional[int] = None


class SessionState(BaseModel):
    """Snapshot of a running survey session.

    Attributes:
        session_id (str): Registry ID of the session.
        participant_id (Optional[str]): Claimed slot, or None for pilot runs.
        phase (str): 'awaiting_input' or 'complete'.
        prompt (Optional[str]): Question for the current trial.
        progress_percent (int): Progress bar width.
        progress_label (str): Progress bar text, e.g. '2/3'.
        redirect_to (Optional[str]): Terminal page once complete.
    """

    session_id: str
    survey: str
    participant_id: Optional[str] = None
    phase: str
    trial_number: int
    total_trials: int
    prompt: Optional[str] = None
    progress_percent: int
    progress_label: str
    slider_value: float
    moved: bool
    saved: bool
    redirect_to: Optional[str] = None
    results: List[ResultItem] = []


class CreateSessionRequest(BaseModel):
    """Request body to start a survey session."""

    survey: Optional[str] = Field(
        None, description="Survey name or YAML path; defaults to server setting"
    )
    source: str = Field("api", description="Origin tag recorded in the logs")
    participant_id: Optional[str] = Field(
        None, description="Claim this participant instead of the next free one"
    )
    pilot: bool = Field(
        False, description="Skip allocation and use the survey's fallback trials"
    )


class MoveRequest(BaseModel):
    """The participant moved the slider."""

    value: float = Field(..., description="Current slider value")


class SubmitRequest(BaseModel):
    """The participant pressed submit."""

    rating: Optional[float] = Field(
        None, description="Slider value at submit; defaults to the last moved value"
    )


class SubmitResponse(BaseModel):
    """Result of a submit.

    Attributes:
        accepted (bool): False when the slider had not been moved (no-op).
        state (SessionState): Session state after the submit.
    """

    accepted: bool
    state: SessionState
