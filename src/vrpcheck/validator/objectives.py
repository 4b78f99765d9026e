# src/vrpcheck/validator/objectives.py
from __future__ import annotations

from collections import Counter

from vrpcheck.schemas.models import Objectives
from vrpcheck.validator.violations import ErrorCode, Violation

COST_OBJECTIVE = "minimize-cost"


def validate_objectives(objectives: Objectives | None) -> list[Violation]:
    """
    @brief
    Validate the objective set (E1600, E1610, E1611).

    @details
    An absent objectives section is valid: the solver falls back to its
    default objectives. Otherwise all three rules are evaluated, so an empty
    primary group reports both E1600 and E1611.
    """
    if objectives is None:
        return []

    violations: list[Violation] = []
    primary = list(objectives.primary)
    combined = primary + list(objectives.secondary or [])

    # (1) E1600: primary group must not be empty
    if not primary:
        violations.append(
            Violation(code=ErrorCode.EMPTY_OBJECTIVES, message="primary objectives are empty")
        )

    # (2) E1610: every tag at most once across both groups
    counts = Counter(objective.type for objective in combined)
    for tag, count in counts.items():
        if count > 1:
            violations.append(
                Violation(
                    code=ErrorCode.DUPLICATE_OBJECTIVE,
                    message=f"objective '{tag}' is specified {count} times",
                    context={"objective": tag, "count": count},
                )
            )

    # (3) E1611: cost objective is mandatory in the primary group
    if not any(objective.type == COST_OBJECTIVE for objective in primary):
        violations.append(
            Violation(
                code=ErrorCode.MISSING_COST_OBJECTIVE,
                message=f"primary objectives do not contain '{COST_OBJECTIVE}'",
            )
        )

    return violations


__all__ = ["COST_OBJECTIVE", "validate_objectives"]
