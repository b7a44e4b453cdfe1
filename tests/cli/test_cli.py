"""Tests for the CLI module."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterable

import pytest
from rich.console import Console

import priors_survey.helpers.database_helpers as dbh
from priors_survey.cli.configuration import DEFAULT_THEME, load_theme
from priors_survey.cli.runner import _plain, run_cli


def _console(answers: Iterable[str], monkeypatch: pytest.MonkeyPatch) -> Console:
    console = Console(file=io.StringIO(), width=100)
    feed = iter(answers)
    monkeypatch.setattr(console, "input", lambda *a, **k: next(feed))
    return console


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


@pytest.mark.unit
def test_plain_strips_html() -> None:
    """Browser markup is reduced to plain text."""
    text = _plain("<p>How likely:<br> <b>alarm</b>?</p>\n")
    assert text == "How likely:\nalarm ?"


@pytest.mark.unit
def test_cli_full_run(monkeypatch: pytest.MonkeyPatch) -> None:
    """Typed numbers rate each trial; results are saved for p01."""
    console = _console(["70", "30", "90"], monkeypatch)
    runner = run_cli("btom-priors", source="pytest", console=console)
    assert runner.completed
    assert runner.participant_id == "p01"
    stored = dbh.read("priors/participants/participant01")
    assert [r["rating"] for r in stored] == [70, 30, 90]
    out = _output(console)
    assert "[1/3] 33%" in out
    assert "Survey complete (results saved)" in out


@pytest.mark.unit
def test_cli_empty_and_invalid_input(monkeypatch: pytest.MonkeyPatch) -> None:
    """Empty lines and junk don't advance; q abandons."""
    console = _console(["", "abc", "500", "q"], monkeypatch)
    runner = run_cli("btom-priors", source="pytest", pilot=True, console=console)
    assert runner.trial_number == 1
    assert not runner.completed
    out = _output(console)
    assert "Move the slider first." in out
    assert out.count("Not a valid rating") == 2
    assert "Survey abandoned" in out


@pytest.mark.unit
def test_cli_setup_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unknown surveys raise after printing the error."""
    console = _console([], monkeypatch)
    with pytest.raises(FileNotFoundError):
        run_cli("no-such-survey", source="pytest", console=console)
    assert "Failed to set up survey" in _output(console)


@pytest.mark.unit
def test_load_theme(tmp_path: Path) -> None:
    """Custom themes override only the keys they name."""
    assert load_theme(None) == DEFAULT_THEME
    path = tmp_path / "theme.yml"
    path.write_text("theme:\n  question: bold red\n", encoding="utf-8")
    theme = load_theme(str(path))
    assert theme["question"] == "bold red"
    assert theme["error"] == DEFAULT_THEME["error"]
