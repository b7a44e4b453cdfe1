"""Conftest fixtures for core tests."""

from pathlib import Path
from typing import Callable

import pytest

from priors_survey.core.survey_config import SurveyConfig
from priors_survey.core.trial_runner import TrialRunner
from priors_survey.helpers.survey_helpers import get_survey_config
from tests.fakes import FakeClock


@pytest.fixture
def survey_config() -> SurveyConfig:
    """The shipped btom-priors survey."""
    return SurveyConfig.load_yaml(get_survey_config("btom-priors"))


@pytest.fixture
def pilot_survey_path(write_yaml: Callable[[str, str], Path]) -> Path:
    """A survey with allocation switched off and two fallback trials."""
    return write_yaml(
        "pilot.yml",
        """
        name: pilot
        version: 0.1.0
        allocation:
          enabled: false
        fallback_trials:
          trial02: {stim1: calm}
          trial01: {stim1: joy}
        """,
    )


@pytest.fixture
def runner(survey_config: SurveyConfig, clock: FakeClock) -> TrialRunner:
    """Fresh runner for the next free participant (p01)."""
    return TrialRunner.create(survey_config, source="pytest", clock=clock)
