"""Landing page UI components."""

from typing import NamedTuple

import gradio as gr

from priors_survey.widget.constants import LANDING_MD
from priors_survey.widget.helpers import centered, spacer


class LandingUI(NamedTuple):
    """Landing page UI components."""

    container: gr.Group
    begin_btn: gr.Button


def build_landing() -> LandingUI:
    """Build the landing page with the instructions and a Begin button."""
    with gr.Group(visible=True) as group:
        gr.Markdown(LANDING_MD)
        spacer(8)
        with centered(min_width=220):
            begin_btn = gr.Button("Begin", variant="primary")
        spacer(8)
    return LandingUI(container=group, begin_btn=begin_btn)
