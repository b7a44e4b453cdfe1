"""CLI configuration management."""

from pathlib import Path
from typing import Dict, Optional

import yaml
from loguru import logger

DEFAULT_THEME: Dict[str, str] = {
    "intro": "bold blue",
    "outtro": "bold blue",
    "progress": "bright_black",
    "question": "bold green",
    "user-prompt": "bold cyan",
    "info": "bold bright_black",
    "error": "bold red",
}


def load_theme(config_path: Optional[str] = None) -> Dict[str, str]:
    """Load the CLI theme from a YAML file with a top-level `theme` mapping.

    Missing keys fall back to DEFAULT_THEME; an unreadable file logs a
    warning and returns the defaults.
    """
    if config_path is None:
        return DEFAULT_THEME.copy()
    p = Path(config_path)
    if not p.exists():
        logger.warning(f"Theme file not found at {p}; using defaults.")
        return DEFAULT_THEME.copy()
    try:
        with p.open("r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load theme from {config_path}: {e}")
        return DEFAULT_THEME.copy()
    theme = config.get("theme") or {}
    return {**DEFAULT_THEME, **{str(k): str(v) for k, v in theme.items()}}
