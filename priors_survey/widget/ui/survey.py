"""Survey page UI components: prompt, progress bar, slider and submit."""

from typing import NamedTuple

import gradio as gr

from priors_survey.core.survey_config import SliderSettings
from priors_survey.widget.helpers import centered, progress_html, readout_md, spacer


class SurveyUI(NamedTuple):
    """Survey page UI components."""

    container: gr.Group
    progress: gr.HTML
    question: gr.Markdown
    slider: gr.Slider
    readout: gr.Markdown
    submit_btn: gr.Button


def build_survey(slider_settings: SliderSettings) -> SurveyUI:
    """Build the (initially hidden) question page."""
    with gr.Group(visible=False) as group:
        progress = gr.HTML(progress_html(0, ""))
        spacer(8)
        question = gr.Markdown("", elem_id="question")
        with centered(scale=3):
            slider = gr.Slider(
                minimum=slider_settings.minimum,
                maximum=slider_settings.maximum,
                value=slider_settings.default,
                step=slider_settings.step,
                show_label=False,
                elem_id="transcale",
            )
            readout = gr.Markdown(
                readout_md(slider_settings.default), elem_id="textInput"
            )
        spacer(8)
        with centered(min_width=220):
            # enabled by the first slider movement on each trial
            submit_btn = gr.Button(
                "Submit", variant="primary", interactive=False, elem_id="submit"
            )
        spacer(8)

    return SurveyUI(
        container=group,
        progress=progress,
        question=question,
        slider=slider,
        readout=readout,
        submit_btn=submit_btn,
    )
