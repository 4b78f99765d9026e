# src/vrpcheck/validator/violations.py
"""
@brief
Closed taxonomy of semantic validation failures.

@details
Every violation carries an ErrorCode member; the member value is the stable
string code documented for users (E11xx jobs, E12xx relations, E13xx
vehicles, E15xx profiles, E16xx objectives). Codes are API contracts:
never renumber or reuse them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    # Jobs
    DUPLICATE_JOB_ID = "E1100"
    INVALID_TASK_DEMAND = "E1101"
    UNBALANCED_PICKUP_DELIVERY = "E1102"
    INVALID_JOB_TIME_WINDOWS = "E1103"
    RESERVED_JOB_ID = "E1104"
    EMPTY_JOB = "E1105"
    NEGATIVE_DURATION = "E1106"
    NEGATIVE_DEMAND = "E1107"

    # Relations
    UNKNOWN_RELATION_JOB = "E1200"
    UNKNOWN_RELATION_VEHICLE = "E1201"
    EMPTY_RELATION = "E1202"
    AMBIGUOUS_RELATION_JOB = "E1203"
    JOB_IN_MULTIPLE_VEHICLE_RELATIONS = "E1204"

    # Vehicles
    DUPLICATE_VEHICLE_TYPE_ID = "E1300"
    DUPLICATE_VEHICLE_ID = "E1301"
    INVALID_SHIFT_TIME = "E1302"
    INVALID_BREAK_TIME_WINDOWS = "E1303"
    INVALID_RELOAD_TIME_WINDOWS = "E1304"
    INVALID_ALLOWED_AREA = "E1305"

    # Profiles
    DUPLICATE_PROFILE_NAME = "E1500"
    EMPTY_PROFILES = "E1501"

    # Objectives
    EMPTY_OBJECTIVES = "E1600"
    DUPLICATE_OBJECTIVE = "E1610"
    MISSING_COST_OBJECTIVE = "E1611"

    @property
    def suggested_action(self) -> str:
        return _ACTIONS[self]


_ACTIONS: dict[ErrorCode, str] = {
    ErrorCode.DUPLICATE_JOB_ID: "remove duplicated jobs or give them unique ids",
    ErrorCode.INVALID_TASK_DEMAND: (
        "specify demand for pickup, delivery and replacement tasks; remove it from services"
    ),
    ErrorCode.UNBALANCED_PICKUP_DELIVERY: (
        "make the sum of pickup demands equal to the sum of delivery demands"
    ),
    ErrorCode.INVALID_JOB_TIME_WINDOWS: (
        "use [start, end] pairs with start before end and make windows of a place disjoint"
    ),
    ErrorCode.RESERVED_JOB_ID: "rename the job: departure, arrival, break and reload are reserved",
    ErrorCode.EMPTY_JOB: "add at least one pickup, delivery, replacement or service task",
    ErrorCode.NEGATIVE_DURATION: "use a non-negative place duration",
    ErrorCode.NEGATIVE_DEMAND: "use non-negative demand values",
    ErrorCode.UNKNOWN_RELATION_JOB: "remove unknown job ids from the relation or add the jobs",
    ErrorCode.UNKNOWN_RELATION_VEHICLE: "use a vehicle id defined in the fleet",
    ErrorCode.EMPTY_RELATION: "add job ids to the relation or remove it",
    ErrorCode.AMBIGUOUS_RELATION_JOB: (
        "use jobs with a single place and at most one time window in strict/sequence relations"
    ),
    ErrorCode.JOB_IN_MULTIPLE_VEHICLE_RELATIONS: "bind every job to at most one vehicle",
    ErrorCode.DUPLICATE_VEHICLE_TYPE_ID: "give every vehicle type a unique type id",
    ErrorCode.DUPLICATE_VEHICLE_ID: "give every vehicle a unique id across all vehicle types",
    ErrorCode.INVALID_SHIFT_TIME: "use parsable shift times with start earlier than end",
    ErrorCode.INVALID_BREAK_TIME_WINDOWS: (
        "use valid, disjoint break windows lying inside the vehicle shift"
    ),
    ErrorCode.INVALID_RELOAD_TIME_WINDOWS: "use valid reload windows lying inside the vehicle shift",
    ErrorCode.INVALID_ALLOWED_AREA: "define every allowed area as a polygon of at least 3 points",
    ErrorCode.DUPLICATE_PROFILE_NAME: "give every profile a unique name",
    ErrorCode.EMPTY_PROFILES: "define at least one routing profile",
    ErrorCode.EMPTY_OBJECTIVES: "add objectives to the primary group or omit 'objectives'",
    ErrorCode.DUPLICATE_OBJECTIVE: "remove repeated objectives",
    ErrorCode.MISSING_COST_OBJECTIVE: "add 'minimize-cost' to the primary objectives",
}


@dataclass(frozen=True)
class Violation:
    """
    @brief
    One detected rule violation.

    @details
    `context` carries code-specific fields (job_id, type_id, shift_index, ...)
    for tooling; `message` is the human-readable cause.
    """

    code: ErrorCode
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def suggested_action(self) -> str:
        return self.code.suggested_action

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "suggested_action": self.suggested_action,
            "context": dict(self.context),
        }

    def __str__(self) -> str:
        return f"{self.code.value}, cause: '{self.message}', action: '{self.suggested_action}'."


__all__ = ["ErrorCode", "Violation"]
