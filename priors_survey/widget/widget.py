"""Gradio widget construction."""

from __future__ import annotations

import gradio as gr
from loguru import logger

from priors_survey.core.survey_config import SurveyConfig
from priors_survey.helpers.survey_helpers import get_survey_config
from priors_survey.widget.helpers import cleanup
from priors_survey.widget.session_state import SessionState
from priors_survey.widget.ui.debrief import build_debrief
from priors_survey.widget.ui.header import build_header
from priors_survey.widget.ui.landing import build_landing
from priors_survey.widget.ui.survey import build_survey
from priors_survey.widget.wiring import wire_handlers

MAX_TTL_SECONDS = 24 * 3600  # 24 hours

PROGRESS_CSS = """
<style>
.progress { width: 100%; background: #eee; border-radius: 6px; }
.progress-bar {
    background: #7c3aed; color: white; text-align: center;
    border-radius: 6px; white-space: nowrap; min-height: 1.5em;
}
/* Overlay for errors */
.frozen::after {
    content: "";
    position: absolute;
    inset: 0;
    background: rgba(255, 255, 255, 0.3);
    backdrop-filter: blur(2px);
    pointer-events: all;
}
.frozen > * { pointer-events: none; }
</style>
"""


def build_widget(
    survey: str = "btom-priors",
    banner: str | None = None,
    source: str = "widget",
    pilot: bool = False,
) -> gr.Blocks:
    """Build the Gradio UI for taking a survey."""
    logger.info(f"Building Gradio widget for survey '{survey}' (pilot={pilot})")

    try:
        survey_config = SurveyConfig.load_yaml(get_survey_config(survey))
    except Exception as e:
        logger.error(f"Failed to load survey config: {e}")
        raise

    widget = gr.Blocks(
        title=survey_config.name,
        theme=gr.themes.Default(primary_hue="violet"),
    )
    with widget:
        state = gr.State(
            value=SessionState(
                survey_config=survey_config,
                source=source,
                pilot=pilot,
            ),
            time_to_live=MAX_TTL_SECONDS,
            delete_callback=cleanup,
        )
        gr.HTML(PROGRESS_CSS)

        build_header(survey_config, banner)
        landing = build_landing()
        survey_ui = build_survey(survey_config.slider)
        debrief = build_debrief()

        wire_handlers(state, landing, survey_ui, debrief)

        def on_unload(req: gr.Request) -> None:
            logger.debug(f"Client disconnected with session hash: {req.session_hash}")

        widget.unload(on_unload)

    return widget
