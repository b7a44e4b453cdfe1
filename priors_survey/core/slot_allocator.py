"""Participant slot allocation against the shared completion registry."""

from __future__ import annotations

import re
from itertools import count
from typing import Any, Mapping, Optional, Tuple

from loguru import logger

from priors_survey.core.constants import (
    DEFAULT_MAX_CLAIM_ATTEMPTS,
    PARTICIPANT_ID_PREFIX,
    PARTICIPANT_KEY_PREFIX,
    PARTICIPANTS_PATH,
    REGISTRY_PATH,
)
from priors_survey.core.records import TrialSet, parse_trial_set
from priors_survey.core.survey_config import AllocationSettings
from priors_survey.helpers import database_helpers as dbh

_PARTICIPANT_ID = re.compile(rf"^{PARTICIPANT_ID_PREFIX}(\d+)$")


class SlotClaimError(RuntimeError):
    """No participant slot could be claimed for this session."""


def participant_id_for(n: int) -> str:
    """Return the identifier for participant number `n` (p01, p09, p10, p123)."""
    if n < 1:
        raise ValueError(f"Participant numbers start at 1, got {n}")
    return f"{PARTICIPANT_ID_PREFIX}{n:02d}"


def participant_number(participant_id: str) -> int:
    """Return the numeric part of a participant identifier."""
    m = _PARTICIPANT_ID.match(participant_id or "")
    if not m:
        raise ValueError(f"Malformed participant identifier: {participant_id!r}")
    return int(m.group(1))


def participant_path(
    participant_id: str, participants_path: str = PARTICIPANTS_PATH
) -> str:
    """Store path holding a participant's trial set (and later their results)."""
    suffix = participant_id[len(PARTICIPANT_ID_PREFIX) :]
    participant_number(participant_id)  # validate
    return f"{participants_path.rstrip('/')}/{PARTICIPANT_KEY_PREFIX}{suffix}"


def select_participant_id(registry: Optional[Mapping[str, Any]]) -> str:
    """Pick the first identifier whose registry entry is not exactly True."""
    registry = registry or {}
    for n in count(1):
        pid = participant_id_for(n)
        if registry.get(pid) is not True:
            return pid
    raise AssertionError("unreachable")


class SlotAllocator:
    """Claims a free participant slot and fetches that participant's trials.

    Claims go through `database_helpers.claim`, a conditional update on the
    registry entry, so two sessions can never both win the same identifier.
    A lost race re-reads the registry and tries the next free slot, up to
    `max_claim_attempts` times.
    """

    def __init__(
        self,
        registry_path: str = REGISTRY_PATH,
        participants_path: str = PARTICIPANTS_PATH,
        max_claim_attempts: int = DEFAULT_MAX_CLAIM_ATTEMPTS,
        max_participants: Optional[int] = None,
    ) -> None:
        if max_claim_attempts < 1:
            raise ValueError("max_claim_attempts must be at least 1")
        self.registry_path = registry_path
        self.participants_path = participants_path
        self.max_claim_attempts = max_claim_attempts
        self.max_participants = max_participants

    @classmethod
    def from_settings(cls, settings: AllocationSettings) -> "SlotAllocator":
        """Build an allocator from a survey's allocation settings."""
        return cls(
            registry_path=settings.registry_path,
            participants_path=settings.participants_path,
            max_claim_attempts=settings.max_claim_attempts,
            max_participants=settings.max_participants,
        )

    def claim_slot(self) -> str:
        """Claim and return the lowest free participant identifier.

        Raises:
            SlotClaimError: If the study is full or every attempt lost a race.
        """
        for attempt in range(1, self.max_claim_attempts + 1):
            registry = dbh.read(self.registry_path)
            logger.debug(f"Registry snapshot (attempt {attempt}): {registry}")
            pid = select_participant_id(registry)

            if (
                self.max_participants is not None
                and participant_number(pid) > self.max_participants
            ):
                logger.warning(
                    f"All {self.max_participants} participant slots are taken."
                )
                raise SlotClaimError(
                    f"All {self.max_participants} participant slots are taken."
                )

            if dbh.claim(self.registry_path, pid):
                logger.info(f"Claimed participant slot {pid} (attempt {attempt})")
                return pid

            logger.warning(
                f"Slot {pid} was claimed by another session first "
                f"(attempt {attempt}/{self.max_claim_attempts}); retrying."
            )

        raise SlotClaimError(
            f"Could not claim a participant slot after "
            f"{self.max_claim_attempts} attempts."
        )

    def claim_participant(self, participant_id: str) -> str:
        """Claim a specific participant identifier.

        Raises:
            SlotClaimError: If that identifier is already taken.
        """
        participant_number(participant_id)  # validate
        if not dbh.claim(self.registry_path, participant_id):
            logger.warning(f"Participant {participant_id} is already taken.")
            raise SlotClaimError(f"Participant {participant_id} is already taken.")
        logger.info(f"Claimed requested participant slot {participant_id}")
        return participant_id

    def fetch_trials(self, participant_id: str) -> TrialSet:
        """Read the trial set stored for a participant.

        Raises:
            ValueError: If nothing is stored for the participant.
        """
        path = participant_path(participant_id, self.participants_path)
        raw = dbh.read(path)
        if raw is None:
            logger.error(f"No trial set found for {participant_id} at '{path}'")
            raise ValueError(
                f"No trial set stored for participant {participant_id} at {path!r}"
            )
        trials = parse_trial_set(raw)
        logger.debug(f"Fetched {len(trials)} trials for {participant_id}")
        return trials

    def allocate(self) -> Tuple[str, TrialSet]:
        """Claim a slot and return it with that participant's trial set."""
        pid = self.claim_slot()
        return pid, self.fetch_trials(pid)
