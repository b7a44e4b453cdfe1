"""Trial runner: walks a participant through their trials and saves ratings."""

from __future__ import annotations

import math
import time
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from priors_survey.core.records import (
    Rating,
    ResultRecord,
    TrialRecord,
    TrialSet,
    empty_results,
    ordered_trials,
)
from priors_survey.core.slot_allocator import SlotAllocator, participant_path
from priors_survey.core.survey_config import SurveyConfig
from priors_survey.helpers import database_helpers as dbh
from priors_survey.helpers.survey_helpers import get_survey_config


class Phase(str, Enum):
    """Where the runner is in its trial sequence."""

    AWAITING_INPUT = "awaiting_input"
    COMPLETE = "complete"


def round_half_up(x: float) -> int:
    """Round .5 away from zero for positive values (12.5 -> 13)."""
    return int(math.floor(x + 0.5))


def _coerce_rating(value: Union[int, float]) -> Rating:
    value = float(value)
    return int(value) if value.is_integer() else value


class TrialRunner(BaseModel):
    """One participant's pass through a survey.

    Holds everything a session needs (participant, trials, results), so the
    surfaces only pass this object around.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(default_factory=lambda: uuid4().hex)
    survey: SurveyConfig
    source: str = Field(default="unknown")
    participant_id: Optional[str] = None

    trials: Dict[str, TrialRecord]
    results: List[ResultRecord] = Field(default_factory=list)

    current_index: int = 0
    moved: bool = False
    slider_value: float = 0
    trial_start: float = 0.0
    phase: Phase = Phase.AWAITING_INPUT
    saved: bool = False

    start_ts: datetime = Field(default_factory=datetime.now)
    end_ts: Optional[datetime] = None

    clock: Callable[[], float] = Field(default=time.monotonic, exclude=True)

    @model_validator(mode="after")
    def _start(self) -> "TrialRunner":
        if not self.trials:
            raise ValueError("Cannot run a survey with no trials.")
        if not self.results:
            self.results = empty_results(self.trials)
        if len(self.results) != len(self.trials):
            raise ValueError(
                f"Got {len(self.results)} result records for {len(self.trials)} trials."
            )
        self.slider_value = self.survey.slider.default
        self.trial_start = self.clock()
        return self

    @classmethod
    def create(
        cls,
        survey: Union[str, Path, SurveyConfig],
        source: str = "unknown",
        participant_id: Optional[str] = None,
        allocate: Optional[bool] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> "TrialRunner":
        """Create a runner, claiming a participant slot when allocation is on.

        Args:
            survey: Survey name, YAML path or an already loaded SurveyConfig.
            source: Which surface started the session (widget, api, cli...).
            participant_id: Claim this participant instead of the next free one.
            allocate: Override the survey's `allocation.enabled` flag. False
                runs the fallback trials without a participant (pilot mode).
            clock: Monotonic seconds clock; defaults to time.monotonic.
        """
        if isinstance(survey, SurveyConfig):
            survey_config = survey
        elif isinstance(survey, Path):
            survey_config = SurveyConfig.load_yaml(survey.resolve())
        elif isinstance(survey, str):
            survey_config = SurveyConfig.load_yaml(get_survey_config(survey))
        else:
            raise TypeError("Invalid survey parameter type.")

        logger.debug(
            f"Creating runner for survey={survey_config.name} source={source} "
            f"participant_id={participant_id} allocate={allocate}"
        )

        allocator = SlotAllocator.from_settings(survey_config.allocation)
        use_allocation = (
            survey_config.allocation.enabled if allocate is None else allocate
        )
        trials: TrialSet
        try:
            if participant_id is not None:
                allocator.claim_participant(participant_id)
                trials = allocator.fetch_trials(participant_id)
            elif use_allocation:
                participant_id, trials = allocator.allocate()
            else:
                logger.info("Allocation disabled; using fallback trials (pilot run).")
                trials = survey_config.fallback_trial_set()
        except Exception as e:
            logger.error(f"Failed to set up participant trials: {e}")
            raise

        kwargs: Dict[str, Any] = {}
        if clock is not None:
            kwargs["clock"] = clock
        runner = cls(
            survey=survey_config,
            source=source,
            participant_id=participant_id,
            trials=trials,
            **kwargs,
        )
        logger.info(
            f"Runner {runner.name} started for participant {participant_id} "
            f"with {runner.total_trials} trials."
        )
        return runner

    # ------------------------------------------------------------------ views

    @computed_field(return_type=int)
    def total_trials(self) -> int:
        """Number of trials in this session."""
        return len(self.results)

    @computed_field(return_type=int)
    def trial_number(self) -> int:
        """1-based number of the trial currently shown."""
        return self.current_index + 1

    @property
    def completed(self) -> bool:
        """True once the last trial has been submitted."""
        return self.phase is Phase.COMPLETE

    @property
    def current_trial(self) -> TrialRecord:
        """The trial currently awaiting a rating."""
        return ordered_trials(self.trials)[self.current_index][1]

    @property
    def prompt(self) -> str:
        """Question text for the current trial."""
        return self.survey.render_prompt(self.current_trial)

    @property
    def progress_percent(self) -> int:
        """Share of the survey reached, as a whole percentage."""
        return round_half_up(100 * self.trial_number / self.total_trials)

    @property
    def progress_label(self) -> str:
        """Fraction text shown on the progress bar, e.g. '2/3'."""
        return f"{self.trial_number}/{self.total_trials}"

    @property
    def redirect_to(self) -> Optional[str]:
        """Terminal page to navigate to once complete."""
        return self.survey.terminal_page if self.completed else None

    @property
    def results_path(self) -> Optional[str]:
        """Where this participant's results are written."""
        if self.participant_id is None:
            return None
        return participant_path(
            self.participant_id, self.survey.allocation.participants_path
        )

    # ---------------------------------------------------------------- actions

    def move(self, value: Optional[float] = None) -> None:
        """Record that the rating control was moved (optionally to `value`)."""
        if self.completed:
            logger.debug("move() ignored; survey already complete.")
            return
        if value is not None:
            slider = self.survey.slider
            if not slider.minimum <= float(value) <= slider.maximum:
                raise ValueError(
                    f"Rating {value} is outside [{slider.minimum}, {slider.maximum}]."
                )
            self.slider_value = float(value)
        self.moved = True

    def submit(self, rating: Optional[float] = None) -> bool:
        """Submit the current rating.

        Returns False without changing anything unless the control was moved
        since the last submission.
        """
        if self.completed:
            logger.warning(f"Runner {self.name}: submit after completion ignored.")
            return False
        if not self.moved:
            logger.debug(f"Runner {self.name}: submit ignored; slider not moved.")
            return False
        if rating is not None:
            self.move(rating)

        # rt >= 1 ms
        rt = max(1, int(round((self.clock() - self.trial_start) * 1000)))
        record = self.results[self.current_index]
        record.rating = _coerce_rating(self.slider_value)
        record.rt = rt
        logger.debug(
            f"Runner {self.name}: trial {self.trial_number}/{self.total_trials} "
            f"stim={record.stim1!r} rating={record.rating} rt={rt}ms"
        )

        self.slider_value = self.survey.slider.default
        self.moved = False

        if self.current_index == self.total_trials - 1:
            self._complete()
        else:
            self.current_index += 1
            self.trial_start = self.clock()
        return True

    def _complete(self) -> None:
        self.phase = Phase.COMPLETE
        self.end_ts = datetime.now()
        logger.info(f"Runner {self.name}: all {self.total_trials} trials done.")
        self.save()

    def save(self) -> bool:
        """Write the result list to the participant's store path.

        Returns True if anything was written.
        """
        if not self.survey.save_results:
            logger.info(f"Runner {self.name}: save_results is off; not saving.")
            return False
        path = self.results_path
        if path is None:
            logger.warning(
                f"Runner {self.name} has no participant id (pilot run); "
                "results are not persisted."
            )
            return False
        dbh.write(path, [r.model_dump() for r in self.results])
        self.saved = True
        logger.info(f"Runner {self.name}: saved {len(self.results)} results to {path}")
        return True

    def to_summary(self) -> Dict[str, Any]:
        """JSON-friendly snapshot of the session."""
        return {
            "name": self.name,
            "survey": self.survey.name,
            "participant_id": self.participant_id,
            "phase": self.phase.value,
            "trial_number": self.trial_number,
            "total_trials": self.total_trials,
            "prompt": None if self.completed else self.prompt,
            "progress_percent": self.progress_percent,
            "progress_label": self.progress_label,
            "slider_value": self.slider_value,
            "moved": self.moved,
            "saved": self.saved,
            "redirect_to": self.redirect_to,
            "results": [r.model_dump() for r in self.results],
        }
