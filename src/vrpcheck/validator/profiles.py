# src/vrpcheck/validator/profiles.py
from __future__ import annotations

from collections.abc import Sequence

from vrpcheck.schemas.models import Profile
from vrpcheck.validator.violations import ErrorCode, Violation


def validate_profiles(profiles: Sequence[Profile]) -> list[Violation]:
    """Validate routing profiles (E1500, E1501)."""
    violations: list[Violation] = []
    seen: set[str] = set()
    reported: set[str] = set()

    for index, profile in enumerate(profiles):
        if profile.name in seen and profile.name not in reported:
            reported.add(profile.name)
            violations.append(
                Violation(
                    code=ErrorCode.DUPLICATE_PROFILE_NAME,
                    message=f"duplicated profile name '{profile.name}'",
                    context={"profile": profile.name, "profile_index": index},
                )
            )
        seen.add(profile.name)

    if not profiles:
        violations.append(
            Violation(code=ErrorCode.EMPTY_PROFILES, message="fleet has no routing profiles")
        )

    return violations


__all__ = ["validate_profiles"]
