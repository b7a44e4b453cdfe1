"""Survey config module."""

from __future__ import annotations

from typing import Annotated, Dict, List, Optional

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from priors_survey.core.constants import (
    DEFAULT_MAX_CLAIM_ATTEMPTS,
    PARTICIPANTS_PATH,
    REGISTRY_PATH,
    SLIDER_DEFAULT,
    SLIDER_MAX,
    SLIDER_MIN,
    TERMINAL_PAGE,
)
from priors_survey.core.records import TrialRecord, TrialSet, ordered_trials
from priors_survey.utils.serde import SerdeMixin

VersionStr = Annotated[
    str,
    StringConstraints(
        pattern=(
            r"^(0|[1-9]\d*)\."
            r"(0|[1-9]\d*)\."
            r"(0|[1-9]\d*)"
            r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
            r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
        )
    ),
]


class SliderSettings(BaseModel):
    """Range and resting position of the rating slider."""

    model_config = ConfigDict(extra="forbid")
    minimum: float = SLIDER_MIN
    maximum: float = SLIDER_MAX
    default: float = SLIDER_DEFAULT
    step: float = 1

    @model_validator(mode="after")
    def _default_in_range(self) -> "SliderSettings":
        if self.minimum >= self.maximum:
            raise ValueError("slider minimum must be below maximum.")
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError(
                f"slider default {self.default} is outside "
                f"[{self.minimum}, {self.maximum}]."
            )
        if self.step <= 0:
            raise ValueError("slider step must be positive.")
        return self


class AllocationSettings(BaseModel):
    """Where participant slots and trial sets live in the shared store."""

    model_config = ConfigDict(extra="forbid")
    enabled: bool = True
    registry_path: str = REGISTRY_PATH
    participants_path: str = PARTICIPANTS_PATH
    max_claim_attempts: int = Field(default=DEFAULT_MAX_CLAIM_ATTEMPTS, ge=1)
    max_participants: Optional[int] = Field(default=None, ge=1)


class SurveyConfig(SerdeMixin, BaseModel):
    """Top-level configuration for a rating survey."""

    model_config = ConfigDict(extra="forbid")

    # Metadata
    name: str
    description: str = ""
    version: VersionStr
    authors: List[str] = Field(default_factory=list)

    prompt_template: str = "{stim1}"
    slider: SliderSettings = Field(default_factory=SliderSettings)
    allocation: AllocationSettings = Field(default_factory=AllocationSettings)

    # Used when allocation is disabled (pilot runs)
    fallback_trials: Dict[str, TrialRecord] = Field(default_factory=dict)

    # absolute URL to leave for on completion, or a page name the surface renders
    terminal_page: str = TERMINAL_PAGE
    save_results: bool = True

    @field_validator("fallback_trials")
    @classmethod
    def _trial_ids_are_numbered(
        cls, v: Dict[str, TrialRecord]
    ) -> Dict[str, TrialRecord]:
        # ordering raises on malformed ids
        ordered_trials(v)
        return v

    @model_validator(mode="after")
    def _pilot_needs_trials(self) -> "SurveyConfig":
        if not self.allocation.enabled and not self.fallback_trials:
            raise ValueError(
                "allocation is disabled but no fallback_trials are configured."
            )
        return self

    def render_prompt(self, trial: TrialRecord) -> str:
        """Render the question shown for a trial."""
        try:
            return self.prompt_template.format(**trial.model_dump())
        except KeyError as e:
            logger.error(f"Prompt template references unknown trial field {e}")
            raise ValueError(
                f"prompt_template references {e} which trial records do not have."
            ) from e

    def fallback_trial_set(self) -> TrialSet:
        """Return a copy of the configured fallback trials."""
        return dict(self.fallback_trials)
