"""YAML serialization / deserialization (serde) mixin for Pydantic models.

Example Usage:
survey = SurveyConfig.from_yaml("surveys/btom-priors.yml")

text = survey.to_yaml()
survey.save_yaml("copy.yml")
again = SurveyConfig.load_yaml("copy.yml")

"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar, Union

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound="BaseModel")


class SerdeMixin(BaseModel):
    """Mixin adding YAML load/save with readable error messages."""

    def to_yaml(self, **dump_kwargs: Any) -> str:
        """Convert model to block-style YAML, keeping key order."""
        return str(
            yaml.safe_dump(
                self.model_dump(),
                allow_unicode=True,
                sort_keys=False,
                default_flow_style=False,
                width=88,
                **dump_kwargs,
            )
        )

    @classmethod
    def from_yaml(cls: type[T], source: Union[str, Path], **validate_kwargs: Any) -> T:
        """Instantiate model from a YAML string or a file path."""
        if isinstance(source, Path) or (
            isinstance(source, str) and "\n" not in source and Path(source).is_file()
        ):
            logger.debug(f"Reading YAML from file {source}")
            text = Path(source).read_text(encoding="utf-8")
        else:
            text = str(source)

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(SerdeMixin._format_yaml_syntax_error(e, text)) from e

        try:
            return cls.model_validate(data, **validate_kwargs)
        except ValidationError as e:
            raise ValueError(SerdeMixin._format_validation_error(e)) from e

    def save_yaml(self, path: Union[str, Path], **dump_kwargs: Any) -> Path:
        """Save model to a YAML file. Returns the Path."""
        p = Path(path)
        p.write_text(self.to_yaml(**dump_kwargs), encoding="utf-8")
        return p

    @classmethod
    def load_yaml(cls: type[T], path: Union[str, Path], **validate_kwargs: Any) -> T:
        """Load model from a YAML file."""
        return cls.from_yaml(Path(path), **validate_kwargs)  # type: ignore

    @staticmethod
    def _yaml_context_snippet(text: str, line: int, col: int, context: int = 1) -> str:
        """Show the offending line (1-based) with a caret under the column."""
        lines = text.splitlines()
        start = max(line - 1 - context, 0)
        stop = min(line + context, len(lines))
        out = []
        for idx in range(start, stop):
            marker = ">" if idx == line - 1 else " "
            out.append(f"{marker} {idx + 1:>4}: {lines[idx]}")
            if idx == line - 1:
                out.append(" " * (col + 8) + "^")
        return "\n".join(out)

    @classmethod
    def _format_yaml_syntax_error(cls, e: yaml.YAMLError, text: str) -> str:
        mark = getattr(e, "problem_mark", None)
        header = "Your YAML isn't valid."
        if mark is None:
            return f"{header} {e}"
        line, col = mark.line + 1, mark.column
        snippet = cls._yaml_context_snippet(text, line, col)
        return f"{header}\nLine {line}, column {col + 1}.\n\n{snippet}"

    @classmethod
    def _format_validation_error(cls, e: ValidationError) -> str:
        """Turn Pydantic errors into one plain-English bullet per problem."""
        lines = ["Your YAML loaded, but it doesn't match the expected structure:"]
        for err in e.errors():
            loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
            typ = err.get("type", "")
            msg = err.get("msg", "") or "Invalid value."
            if typ == "missing":
                lines.append(f"- Missing required field: `{loc}`.")
            elif typ == "extra_forbidden":
                lines.append(f"- Unknown field at `{loc}`. Remove or rename it.")
            else:
                lines.append(f"- {msg[0].upper()}{msg[1:]} (at `{loc}`).")
        lines.append("\nTip: keys are case-sensitive.")
        return "\n".join(lines)
