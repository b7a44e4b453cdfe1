"""Helper functions for widget."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping
from urllib.parse import urlsplit

import gradio as gr
from loguru import logger

from priors_survey.core.slot_allocator import SlotClaimError
from priors_survey.core.trial_runner import TrialRunner
from priors_survey.widget.constants import STUDY_FULL_MSG, USER_FRIENDLY_EXC
from priors_survey.widget.session_state import SessionState


def cleanup(session_state: Mapping[str, Any]) -> None:
    """Log what happens to a session when its state is deleted."""
    runner = (session_state or {}).get("runner")
    if runner is None:
        logger.debug("No runner in session state to clean up")
        return
    if runner.completed:
        logger.debug(f"Session {runner.name} ended after completing the survey.")
    else:
        # the slot stays claimed; the registry is never reset
        logger.warning(
            f"Session {runner.name} (participant {runner.participant_id}) "
            f"abandoned at trial {runner.trial_number}/{runner.total_trials}."
        )


def spacer(h: int = 24) -> None:
    """Create a vertical spacer of given height."""
    gr.HTML(f"<div style='height:{h}px'></div>")


@contextmanager
def centered(scale: int = 0, min_width: int = 220) -> Iterator[None]:
    """Place the enclosed components in a centered column."""
    with gr.Row():
        with gr.Column(scale=1):
            pass
        with gr.Column(scale=scale, min_width=min_width):
            yield
        with gr.Column(scale=1):
            pass


def progress_html(percent: int, label: str) -> str:
    """Render the progress bar (width percentage + fraction label)."""
    return (
        "<div class='progress'>"
        f"<div id='progress-bar' class='progress-bar' style='width:{percent}%'>"
        f"{label}</div></div>"
    )


def readout_md(value: float) -> str:
    """Numeric readout mirroring the slider."""
    value = float(value)
    shown = int(value) if value.is_integer() else value
    return f"<div style='text-align:center'><b>{shown}</b></div>"


def create_runner(state: SessionState) -> TrialRunner:
    """Create a TrialRunner for this browser session."""
    if "survey_config" not in state:
        logger.error("App state missing survey_config in create_runner.")
        raise gr.Error(USER_FRIENDLY_EXC)
    try:
        return TrialRunner.create(
            survey=state["survey_config"],
            source=state.get("source", "widget"),
            allocate=False if state.get("pilot") else None,
        )
    except SlotClaimError as e:
        logger.error(f"No participant slot for widget session: {e}")
        raise gr.Error(STUDY_FULL_MSG)
    except Exception as e:
        logger.error(f"Error creating TrialRunner in create_runner: {e}", exc_info=True)
        raise gr.Error(USER_FRIENDLY_EXC)


def redirect_url(terminal_page: str | None) -> str:
    """URL the browser should leave for once the survey is done, or "".

    Only absolute http(s) URLs are followed. A bare page name such as
    `debrief.html` is the debrief this widget renders itself.
    """
    if not terminal_page:
        return ""
    parts = urlsplit(terminal_page)
    if parts.scheme in ("http", "https") and parts.netloc:
        return terminal_page
    return ""
