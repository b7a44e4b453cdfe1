"""Tests for widget module."""

from __future__ import annotations

import gradio as gr
import pytest

import priors_survey.helpers.database_helpers as dbh
from priors_survey.core.survey_config import SurveyConfig
from priors_survey.helpers.survey_helpers import get_survey_config
from priors_survey.widget.constants import STUDY_FULL_MSG
from priors_survey.widget.handlers import on_begin, on_slider_input, on_submit
from priors_survey.widget.helpers import (
    cleanup,
    progress_html,
    readout_md,
    redirect_url,
)
from priors_survey.widget.session_state import SessionState


@pytest.fixture
def state() -> SessionState:
    """Fresh per-browser state for the shipped survey."""
    return SessionState(
        survey_config=SurveyConfig.load_yaml(get_survey_config("btom-priors")),
        source="pytest",
        pilot=False,
    )


@pytest.mark.unit
def test_progress_and_readout_html() -> None:
    """Progress bar width and readout text."""
    html = progress_html(67, "2/3")
    assert "width:67%" in html and "2/3" in html
    assert "<b>50</b>" in readout_md(50.0)
    assert "<b>42.5</b>" in readout_md(42.5)


@pytest.mark.unit
def test_begin_shows_first_trial(state: SessionState) -> None:
    """Begin claims a slot, hides the landing page and locks submit."""
    out = on_begin(state)
    assert len(out) == 8
    new_state, landing, survey, progress, question, slider, readout, submit = out
    assert new_state["runner"].participant_id == "p01"
    assert landing["visible"] is False
    assert survey["visible"] is True
    assert "1/3" in progress and "width:33%" in progress
    assert "excitement" in question
    assert slider["value"] == 50
    assert submit["interactive"] is False


@pytest.mark.unit
def test_submit_before_slider_input_changes_nothing(state: SessionState) -> None:
    """Without a slider input event, submit leaves every output alone."""
    on_begin(state)
    out = on_submit(state, 50)
    assert len(out) == 9
    assert all(o == gr.update() for o in out[1:])
    assert state["runner"].trial_number == 1


@pytest.mark.unit
def test_full_widget_flow(state: SessionState) -> None:
    """Three rated trials end on the debrief page with a redirect."""
    on_begin(state)
    for value in (70, 30):
        _, readout, submit = on_slider_input(state, value)
        assert submit["interactive"] is True
        assert f"<b>{value}</b>" in readout
        out = on_submit(state, value)
        assert out[5]["value"] == 50
        assert "<b>50</b>" in out[6]
        assert out[7]["interactive"] is False
        assert out[8] == gr.update()

    on_slider_input(state, 90)
    out = on_submit(state, 90)
    assert out[1]["visible"] is False
    assert out[2]["visible"] is True
    # bare page name: the in-app debrief is the terminal page, no navigation
    assert out[8] == ""

    stored = dbh.read("priors/participants/participant01")
    assert [r["rating"] for r in stored] == [70, 30, 90]


@pytest.mark.unit
def test_pilot_widget_claims_nothing(state: SessionState) -> None:
    """Pilot sessions run the fallback trials."""
    state["pilot"] = True
    new_state, *_ = on_begin(state)
    assert new_state["runner"].participant_id is None
    assert dbh.read("priors/completedParticipants") == {}


@pytest.mark.unit
def test_study_full_message(
    state: SessionState, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A failed claim surfaces the study-full message."""
    monkeypatch.setattr(dbh, "claim", lambda path, key: False)
    with pytest.raises(gr.Error) as exc:
        on_begin(state)
    assert STUDY_FULL_MSG in str(exc.value)


@pytest.mark.unit
def test_cleanup_handles_any_state(state: SessionState) -> None:
    """cleanup tolerates empty, abandoned and finished sessions."""
    cleanup({})
    on_begin(state)
    cleanup(state)
    assert dbh.read("priors/completedParticipants")["p01"] is True


@pytest.mark.slow
def test_can_build_widget() -> None:
    """The Blocks app builds from the shipped survey."""
    from priors_survey.widget.widget import build_widget

    app = build_widget(survey="btom-priors", source="pytest")
    assert isinstance(app, gr.Blocks)


@pytest.mark.unit
@pytest.mark.parametrize(
    "page, expected",
    [
        ("debrief.html", ""),
        ("/debrief.html", ""),
        (None, ""),
        ("https://lab.example.org/debrief.html", "https://lab.example.org/debrief.html"),
        ("http://localhost:9000/done", "http://localhost:9000/done"),
        ("javascript:alert(1)", ""),
    ],
)
def test_redirect_url(page: str | None, expected: str) -> None:
    """Only absolute http(s) terminal pages are navigated to."""
    assert redirect_url(page) == expected


@pytest.mark.unit
def test_external_terminal_page_is_followed(state: SessionState) -> None:
    """A survey ending on an external URL hands that URL to the browser."""
    cfg = state["survey_config"]
    state["survey_config"] = cfg.model_copy(
        update={"terminal_page": "https://lab.example.org/debrief.html"}
    )
    on_begin(state)
    for value in (70, 30, 90):
        on_slider_input(state, value)
        out = on_submit(state, value)
    assert out[2]["visible"] is True
    assert out[8] == "https://lab.example.org/debrief.html"
