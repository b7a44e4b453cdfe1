"""Trial and result records exchanged with the shared store."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from priors_survey.core.constants import TRIAL_ID_PREFIX

_TRIAL_ID = re.compile(rf"^{TRIAL_ID_PREFIX}(\d+)$")

Rating = Union[int, float]


class TrialRecord(BaseModel):
    """One stimulus to rate."""

    model_config = ConfigDict(extra="allow", frozen=True)

    stim1: str


class ResultRecord(BaseModel):
    """The outcome of one trial: copied stimulus, rating and reaction time."""

    stim1: str
    rating: Optional[Rating] = None
    rt: Optional[int] = None


TrialSet = Dict[str, TrialRecord]


def trial_id_for(n: int) -> str:
    """Return the trial identifier for 1-based position `n` (trial01, trial10)."""
    if n < 1:
        raise ValueError(f"Trial numbers start at 1, got {n}")
    return f"{TRIAL_ID_PREFIX}{n:02d}"


def trial_number(trial_id: str) -> int:
    """Return the numeric part of a trial identifier."""
    m = _TRIAL_ID.match(trial_id)
    if not m:
        raise ValueError(f"Malformed trial identifier: {trial_id!r}")
    return int(m.group(1))


def parse_trial_set(raw: Mapping[str, Any]) -> TrialSet:
    """Validate a raw trial-set snapshot from the store."""
    if not isinstance(raw, Mapping):
        raise ValueError(f"Trial set must be a mapping, got {type(raw).__name__}")
    return {str(tid): TrialRecord.model_validate(rec) for tid, rec in raw.items()}


def ordered_trials(trials: Mapping[str, TrialRecord]) -> List[Tuple[str, TrialRecord]]:
    """Return trials in ascending numeric order of their identifiers."""
    return sorted(trials.items(), key=lambda item: trial_number(item[0]))


def empty_results(trials: Mapping[str, TrialRecord]) -> List[ResultRecord]:
    """Preallocate one unset ResultRecord per trial, in presentation order."""
    return [ResultRecord(stim1=rec.stim1) for _, rec in ordered_trials(trials)]
