"""Event handlers for the survey widget.

Begin -> create runner (claims a slot) -> slider input enables submit ->
submit records rating + rt and shows the next trial -> debrief, then a
browser redirect when the terminal page is an absolute URL.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

import gradio as gr
from loguru import logger

from priors_survey.core.trial_runner import TrialRunner
from priors_survey.widget.constants import USER_FRIENDLY_EXC
from priors_survey.widget.helpers import (
    create_runner,
    progress_html,
    readout_md,
    redirect_url,
)
from priors_survey.widget.session_state import SessionState


def _runner(state: SessionState) -> TrialRunner:
    if "runner" not in state:
        logger.error("Handler called but no runner found in state.")
        raise gr.Error(USER_FRIENDLY_EXC)
    return state["runner"]


def _trial_view(
    runner: TrialRunner,
) -> Tuple[str, str, Dict[str, Any], str, Dict[str, Any]]:
    """Progress bar, question, reset slider, readout and locked submit button."""
    default = runner.survey.slider.default
    return (
        progress_html(runner.progress_percent, runner.progress_label),
        runner.prompt,
        gr.update(value=default),
        readout_md(default),
        gr.update(interactive=False),
    )


def on_begin(state: SessionState) -> Tuple[
    SessionState,
    Dict[str, Any],  # landing container
    Dict[str, Any],  # survey container
    str,  # progress html
    str,  # question markdown
    Dict[str, Any],  # slider
    str,  # readout
    Dict[str, Any],  # submit button
]:
    """Handle clicking Begin: start the runner and show the first trial."""
    logger.debug("on_begin called")
    runner = create_runner(state)
    state["runner"] = runner
    return (
        state,
        gr.update(visible=False),
        gr.update(visible=True),
        *_trial_view(runner),
    )


def on_slider_input(state: SessionState, value: float) -> Tuple[
    SessionState,
    str,  # readout
    Dict[str, Any],  # submit button
]:
    """Handle a participant moving the slider: unlock submit."""
    runner = _runner(state)
    try:
        runner.move(value)
    except ValueError as e:
        logger.warning(f"Slider value rejected: {e}")
        return state, gr.update(), gr.update()
    return state, readout_md(value), gr.update(interactive=not runner.completed)


def on_submit(state: SessionState, value: float) -> Tuple[
    SessionState,
    Dict[str, Any],  # survey container
    Dict[str, Any],  # debrief container
    Any,  # progress html
    Any,  # question markdown
    Dict[str, Any],  # slider
    Any,  # readout
    Dict[str, Any],  # submit button
    Any,  # redirect box
]:
    """Handle Submit: record the rating, then show the next trial or debrief."""
    runner = _runner(state)
    try:
        accepted = runner.submit(value)
    except Exception as e:
        logger.error(f"Error while handling on_submit: {e}", exc_info=True)
        raise gr.Error(USER_FRIENDLY_EXC)

    if not accepted:
        logger.debug("Submit ignored; nothing changes on screen.")
        return (
            state,
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
        )

    if runner.completed:
        logger.info(f"Session {runner.name} complete; showing debrief.")
        return (
            state,
            gr.update(visible=False),
            gr.update(visible=True),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(),
            gr.update(interactive=False),
            redirect_url(runner.redirect_to),
        )

    return (
        state,
        gr.update(),
        gr.update(),
        *_trial_view(runner),
        gr.update(),
    )
