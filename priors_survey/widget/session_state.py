"""App state definition for the Gradio UI."""

from typing import TypedDict

from priors_survey.core.survey_config import SurveyConfig
from priors_survey.core.trial_runner import TrialRunner


class SessionState(TypedDict, total=False):
    """Custom state for one browser session."""

    runner: TrialRunner
    survey_config: SurveyConfig
    source: str
    pilot: bool
