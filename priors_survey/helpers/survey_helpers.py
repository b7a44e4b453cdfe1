"""Helpers for locating survey configs."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from loguru import logger
from packaging.version import InvalidVersion, Version

from priors_survey.core.constants import SURVEYS_FPATH


def list_surveys(surveys_dir: Path = SURVEYS_FPATH) -> List[str]:
    """Return the names of built-in surveys."""
    names = set()
    for path, doc in _load_docs(surveys_dir):
        names.add(str(doc["name"]))
    return sorted(names)


def _load_docs(surveys_dir: Path) -> List[Tuple[Path, Dict[str, Any]]]:
    docs = []
    for path in sorted(surveys_dir.glob("*.y*ml")):
        try:
            with path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f) or {}
        except yaml.YAMLError:
            logger.warning(f"Failed to parse survey config {path}. Skipping.")
            continue
        if not doc.get("name"):
            logger.warning(f"Survey config {path} has no top-level 'name'. Skipping.")
            continue
        docs.append((path, doc))
    return docs


def get_survey_config(
    survey: str, version: str = "latest", surveys_dir: Optional[Path] = None
) -> str:
    """Return the path to a YAML survey config.

    Accepts either a filesystem path to a YAML file or the `name` of a
    built-in survey under surveys/. With `version="latest"` the highest stable
    PEP 440 version wins; any other value must match a `version` exactly.
    """
    possible_path = Path(survey).expanduser()
    if possible_path.is_file() and possible_path.suffix.lower() in {".yml", ".yaml"}:
        return str(possible_path)

    surveys_dir = surveys_dir or SURVEYS_FPATH
    docs = _load_docs(surveys_dir)
    matches = [
        (path, doc)
        for path, doc in docs
        if str(doc["name"]).strip().lower() == survey.strip().lower()
    ]
    if not matches:
        raise FileNotFoundError(
            f"No survey config matching {survey!r} found. "
            f"Found built-ins: {sorted(str(d['name']) for _, d in docs)}"
        )

    if version != "latest":
        for path, doc in matches:
            if str(doc.get("version", "")).strip() == version:
                logger.debug(f"Selected survey config {path} version={version}")
                return str(path)
        available = sorted({str(doc.get("version", "<none>")) for _, doc in matches})
        raise FileNotFoundError(
            f"No survey config for {survey!r} with version {version!r}. "
            f"Available versions: {available}"
        )

    stable: List[Tuple[Version, Path]] = []
    others: List[Tuple[Version, Path]] = []
    for path, doc in matches:
        try:
            v = Version(str(doc.get("version", "")).strip())
        except InvalidVersion:
            logger.warning(f"Survey config {path} has an invalid version. Skipping.")
            continue
        if v.is_prerelease or v.is_devrelease:
            others.append((v, path))
        else:
            stable.append((v, path))

    candidates = stable or others
    if not candidates:
        raise FileNotFoundError(f"No versioned config found for survey {survey!r}.")
    v, chosen = max(candidates, key=lambda item: item[0])
    logger.debug(f"Selected survey config {chosen} for {survey!r} (version {v})")
    return str(chosen)
