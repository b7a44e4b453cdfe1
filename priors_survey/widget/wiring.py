"""Wiring of event handlers to widget components."""

import gradio as gr

from priors_survey.widget.constants import REDIRECT_JS
from priors_survey.widget.handlers import on_begin, on_slider_input, on_submit
from priors_survey.widget.ui.debrief import DebriefUI
from priors_survey.widget.ui.landing import LandingUI
from priors_survey.widget.ui.survey import SurveyUI


def wire_handlers(
    state: gr.State,
    landing: LandingUI,
    survey: SurveyUI,
    debrief: DebriefUI,
) -> None:
    """Wire event handlers to widget components."""
    landing.begin_btn.click(
        fn=on_begin,
        inputs=[state],
        outputs=[
            state,
            landing.container,
            survey.container,
            survey.progress,
            survey.question,
            survey.slider,
            survey.readout,
            survey.submit_btn,
        ],
    ).failure(
        fn=lambda: gr.update(elem_classes="frozen"),
        inputs=[],
        outputs=[landing.container],
    )

    # `input` only fires on user interaction, not on programmatic resets
    survey.slider.input(
        fn=on_slider_input,
        inputs=[state, survey.slider],
        outputs=[state, survey.readout, survey.submit_btn],
    )

    survey.submit_btn.click(
        fn=on_submit,
        inputs=[state, survey.slider],
        outputs=[
            state,
            survey.container,
            debrief.container,
            survey.progress,
            survey.question,
            survey.slider,
            survey.readout,
            survey.submit_btn,
            debrief.redirect_box,
        ],
    ).then(
        fn=None,
        inputs=[debrief.redirect_box],
        outputs=[],
        js=REDIRECT_JS,
    )
