"""Debrief page UI components."""

from typing import NamedTuple

import gradio as gr

from priors_survey.widget.constants import DEBRIEF_MD


class DebriefUI(NamedTuple):
    """Debrief page UI components."""

    container: gr.Group
    redirect_box: gr.Textbox


def build_debrief() -> DebriefUI:
    """Build the (initially hidden) debrief page.

    `redirect_box` is a hidden textbox; the submit handler fills it with the
    terminal page once the survey is complete and REDIRECT_JS follows it.
    """
    with gr.Group(visible=False) as group:
        gr.Markdown(DEBRIEF_MD)
    redirect_box = gr.Textbox(value="", visible=False)
    return DebriefUI(container=group, redirect_box=redirect_box)
