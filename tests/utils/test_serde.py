"""Tests for serde utilities with enhanced error messages."""

from pathlib import Path
from typing import Optional

import pytest
from pydantic import ConfigDict

from priors_survey.utils.serde import SerdeMixin


class ATestClass(SerdeMixin):
    """Test class for serde with validation."""

    model_config = ConfigDict(extra="forbid")
    name: str
    count: int
    enabled: bool
    metadata: Optional[dict] = None


@pytest.mark.unit
def test_yaml_validation_errors_are_user_friendly() -> None:
    """Should raise ValueError with one line per problem."""
    bad_yaml = """
count: "not_a_number"
enabled: true
extra: value
"""

    with pytest.raises(ValueError) as exc:
        ATestClass.from_yaml(bad_yaml)

    msg = str(exc.value)
    assert "doesn't match the expected structure" in msg
    assert "Missing required field: `name`" in msg
    assert "at `count`" in msg
    assert "Unknown field at `extra`" in msg
    assert "Tip:" in msg


@pytest.mark.unit
def test_yaml_syntax_errors_point_at_line() -> None:
    """Broken YAML reports the line and shows it."""
    bad_yaml = "name: ok\n  count: 1\nenabled: true\n"
    with pytest.raises(ValueError) as exc:
        ATestClass.from_yaml(bad_yaml)
    msg = str(exc.value)
    assert msg.startswith("Your YAML isn't valid.")
    assert "Line 2" in msg
    assert ">" in msg


@pytest.mark.unit
def test_yaml_roundtrip_from_path(tmp_path: Path) -> None:
    """save_yaml output loads back from a Path or a string path."""
    obj = ATestClass(name="bravo", count=7, enabled=False, metadata={"k": "v"})
    p = obj.save_yaml(tmp_path / "obj.yml")

    assert ATestClass.load_yaml(p) == obj
    assert ATestClass.from_yaml(str(p)) == obj


@pytest.mark.unit
def test_to_yaml_keeps_field_order() -> None:
    """Keys come out in declaration order."""
    text = ATestClass(name="a", count=1, enabled=True).to_yaml()
    assert text.splitlines()[:3] == ["name: a", "count: 1", "enabled: true"]
