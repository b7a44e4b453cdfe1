"""Dependency utilities for route handlers."""

from fastapi import Depends, HTTPException

from priors_survey.api.services.registry import SessionRegistry, get_registry
from priors_survey.core.trial_runner import TrialRunner


def get_runner(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
) -> TrialRunner:
    """Resolve a TrialRunner from the registry.

    Raises:
        HTTPException: If the session ID is not found in the registry.
    """
    runner = registry.get(session_id)
    if runner is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return runner
