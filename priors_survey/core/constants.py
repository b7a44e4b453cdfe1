"""Constants for core module."""

from pathlib import Path

# --- Store layout --- #
REGISTRY_PATH: str = "priors/completedParticipants"
PARTICIPANTS_PATH: str = "priors/participants"
PARTICIPANT_KEY_PREFIX: str = "participant"

# --- Identifiers --- #
PARTICIPANT_ID_PREFIX: str = "p"
TRIAL_ID_PREFIX: str = "trial"

# --- Allocation --- #
DEFAULT_MAX_CLAIM_ATTEMPTS: int = 5

# --- Slider --- #
SLIDER_MIN: float = 0
SLIDER_MAX: float = 100
SLIDER_DEFAULT: float = 50

# --- Navigation --- #
TERMINAL_PAGE: str = "debrief.html"

# --- I/O --- #
SURVEYS_FPATH: Path = Path(__file__).parent.parent.parent / "surveys"
