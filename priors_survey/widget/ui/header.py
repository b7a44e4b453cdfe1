"""Header UI for the survey widget."""

import gradio as gr

from priors_survey.core.survey_config import SurveyConfig


def build_header(survey_config: SurveyConfig, banner: str | None = None) -> None:
    """Render the optional banner, the survey title and its description."""
    if banner:
        gr.HTML(f'<div style="text-align:center" id="banner">{banner}</div>')
    title = survey_config.name.replace("-", " ").title()
    gr.HTML(
        "<div style='text-align:center'>"
        f"<h1 style='margin-bottom:0'>{title}</h1>"
        f"<p style='margin-top:6px;color:#666'>{survey_config.description.strip()}</p>"
        "</div>"
    )
