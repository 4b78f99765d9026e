# tests/validator/test_profiles_objectives.py
from __future__ import annotations

from vrpcheck.schemas.models import Objectives, Profile
from vrpcheck.validator.objectives import validate_objectives
from vrpcheck.validator.profiles import validate_profiles


def codes(violations) -> list[str]:
    return [v.code.value for v in violations]


def mk_objectives(primary: list[str], secondary: list[str] | None = None) -> Objectives:
    data = {"primary": [{"type": tag} for tag in primary]}
    if secondary is not None:
        data["secondary"] = [{"type": tag} for tag in secondary]
    return Objectives.model_validate(data)


# -----------------------------
# Profiles
# -----------------------------
def test_valid_profiles() -> None:
    profiles = [Profile(name="car", type="car"), Profile(name="truck", type="truck")]

    assert validate_profiles(profiles) == []


def test_duplicate_profile_name_reported_once() -> None:
    profiles = [Profile(name="car", type="car")] * 3

    violations = validate_profiles(profiles)

    assert codes(violations) == ["E1500"]
    assert violations[0].context["profile"] == "car"


def test_empty_profiles() -> None:
    assert codes(validate_profiles([])) == ["E1501"]


# -----------------------------
# Objectives
# -----------------------------
def test_absent_objectives_are_valid() -> None:
    assert validate_objectives(None) == []


def test_valid_objectives() -> None:
    objectives = mk_objectives(
        ["minimize-unassigned", "minimize-cost"], ["minimize-tours", "balance-max-load"]
    )

    assert validate_objectives(objectives) == []


def test_duplicate_objective_without_cost() -> None:
    """
    @brief
    Two 'minimize-unassigned' primaries yield one E1610 and one E1611.
    """
    violations = validate_objectives(mk_objectives(["minimize-unassigned", "minimize-unassigned"]))

    assert codes(violations) == ["E1610", "E1611"]
    assert violations[0].context == {"objective": "minimize-unassigned", "count": 2}


def test_duplicate_across_primary_and_secondary() -> None:
    violations = validate_objectives(mk_objectives(["minimize-cost"], ["minimize-cost"]))

    assert codes(violations) == ["E1610"]


def test_cost_objective_only_counts_in_primary() -> None:
    violations = validate_objectives(mk_objectives(["minimize-unassigned"], ["minimize-cost"]))

    assert codes(violations) == ["E1611"]


def test_empty_primary_reports_every_rule() -> None:
    assert codes(validate_objectives(mk_objectives([]))) == ["E1600", "E1611"]


def test_duplicate_objectives_reported_in_first_seen_order() -> None:
    objectives = mk_objectives(
        ["minimize-tours", "minimize-cost", "minimize-tours"],
        ["minimize-unassigned", "minimize-cost", "minimize-unassigned", "minimize-unassigned"],
    )

    violations = validate_objectives(objectives)

    assert [v.context for v in violations] == [
        {"objective": "minimize-tours", "count": 2},
        {"objective": "minimize-cost", "count": 2},
        {"objective": "minimize-unassigned", "count": 3},
    ]
