"""CLI runner for piloting a survey in the terminal."""

import re
from typing import Optional

from loguru import logger
from rich.console import Console

from priors_survey.cli.configuration import load_theme
from priors_survey.core.trial_runner import TrialRunner

QUIT_WORDS = {"q", "quit", "exit"}
_HTML_TAG = re.compile(r"<[^>]+>")


def _plain(prompt: str) -> str:
    """Strip the HTML used by the browser prompt."""
    text = _HTML_TAG.sub(" ", prompt.replace("<br>", "\n"))
    return "\n".join(" ".join(line.split()) for line in text.splitlines()).strip()


def _render_trial(runner: TrialRunner, console: Console, theme: dict[str, str]) -> None:
    console.print()
    console.print(
        f"[{runner.progress_label}] {runner.progress_percent}%", style=theme["progress"]
    )
    console.print(_plain(runner.prompt), style=theme["question"])


def run_cli(
    survey: str,
    source: str,
    participant_id: Optional[str] = None,
    pilot: bool = False,
    custom_theme_path: Optional[str] = None,
    console: Optional[Console] = None,
) -> TrialRunner:
    """Run the terminal survey loop.

    A typed number moves the slider there and submits it. An empty line
    submits without moving (ignored). `q` quits early.

    Returns the runner, finished or abandoned.
    """
    console = console or Console()
    theme = load_theme(custom_theme_path)

    try:
        with console.status("Setting up survey...", spinner="dots"):
            runner = TrialRunner.create(
                survey=survey,
                source=source,
                participant_id=participant_id,
                allocate=False if pilot else None,
            )
    except Exception as e:
        console.print(f"Failed to set up survey with error: {e}", style=theme["error"])
        logger.exception(f"Failed to set up survey with error: {e}")
        raise

    slider = runner.survey.slider
    console.rule(
        f"Survey started (participant: {runner.participant_id or 'pilot'})",
        style=theme["intro"],
    )
    console.print(
        f"Enter a rating between {slider.minimum:g} and {slider.maximum:g}.",
        style=theme["info"],
    )

    _render_trial(runner, console, theme)
    while not runner.completed:
        console.print("rating>", style=theme["user-prompt"], end=" ")
        raw = console.input().strip()

        if raw.lower() in QUIT_WORDS:
            logger.info(f"Participant quit at trial {runner.trial_number}.")
            console.rule("Survey abandoned", style=theme["outtro"])
            return runner

        if raw:
            try:
                runner.move(float(raw))
            except ValueError as e:
                console.print(f"Not a valid rating: {e}", style=theme["error"])
                continue
        if not runner.submit():
            console.print("Move the slider first.", style=theme["info"])
            continue
        if not runner.completed:
            _render_trial(runner, console, theme)

    saved = "saved" if runner.saved else "not saved"
    console.rule(f"Survey complete (results {saved})", style=theme["outtro"])
    return runner
