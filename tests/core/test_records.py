"""Tests for trial and result records."""

import pytest

from priors_survey.core.records import (
    empty_results,
    ordered_trials,
    parse_trial_set,
    trial_id_for,
    trial_number,
)


@pytest.mark.unit
def test_trial_ids() -> None:
    """Trial ids are zero-padded and parse back to their number."""
    assert trial_id_for(1) == "trial01"
    assert trial_id_for(12) == "trial12"
    assert trial_number("trial100") == 100
    with pytest.raises(ValueError):
        trial_number("trialX")
    with pytest.raises(ValueError):
        trial_id_for(0)


@pytest.mark.unit
def test_trials_are_ordered_numerically() -> None:
    """trial10 comes after trial09 whatever the storage order."""
    raw = {trial_id_for(n): {"stim1": f"s{n}"} for n in (10, 2, 9, 1)}
    trials = parse_trial_set(raw)
    assert [tid for tid, _ in ordered_trials(trials)] == [
        "trial01",
        "trial02",
        "trial09",
        "trial10",
    ]
    results = empty_results(trials)
    assert [r.stim1 for r in results] == ["s1", "s2", "s9", "s10"]
    assert all(r.rating is None and r.rt is None for r in results)


@pytest.mark.unit
def test_parse_trial_set_rejects_non_mappings() -> None:
    """Only mappings of records are accepted."""
    with pytest.raises(ValueError):
        parse_trial_set([{"stim1": "x"}])  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        parse_trial_set({"trial01": {"other": "x"}})
