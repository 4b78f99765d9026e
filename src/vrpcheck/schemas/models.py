# src/vrpcheck/schemas/models.py
"""
@brief
Pydantic data models for the vrpcheck project.

@details
Defines the canonical model families:
    - Problem: the immutable snapshot of a pragmatic VRP problem document
      (plan, fleet, objectives) consumed by the semantic validator
    - Matrix: one routing matrix document (flat travel times and distances)
    - Config: runtime configuration (from config.yaml), including nested SolverConfig

Field names follow the pragmatic JSON format; camelCase keys are accepted
through aliases and snake_case through field names. Timestamps stay raw
strings: interpreting them belongs to the validator, which reports malformed
values as violations instead of rejecting the whole document.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class _StrictBaseModel(BaseModel):
    """
    @brief
    Base model enforcing strict defaults for configuration and data contracts.

    @details
    Forbids unknown fields and preserves exact naming rules.
    Designed as a foundation for all other vrpcheck models.
    """

    model_config = {
        "extra": "forbid",  # Reject unknown fields
        "populate_by_name": True,  # Allow population by field name
        "use_enum_values": True,  # Export raw enum values if enums appear later
    }


class _SnapshotModel(_StrictBaseModel):
    """Strict model that cannot be mutated once deserialized."""

    model_config = {**_StrictBaseModel.model_config, "frozen": True}


# ------------------------------------------------------------
# Plan
# ------------------------------------------------------------
class Location(_SnapshotModel):
    lat: float = Field(..., description="Latitude")
    lng: float = Field(..., description="Longitude")


class JobPlace(_SnapshotModel):
    """
    @brief
    One place where a job task can be served.

    @details
    `times` holds raw `[start, end]` RFC 3339 pairs; the validator parses them.
    """

    location: Location
    duration: float = Field(..., description="Service duration in seconds")
    times: list[list[str]] | None = Field(None, description="Time windows as [start, end] pairs")


class JobTask(_SnapshotModel):
    places: list[JobPlace] = Field(default_factory=list, description="Alternative places")
    demand: list[int] | None = Field(None, description="Multi-dimensional demand")
    tag: str | None = None


class Job(_SnapshotModel):
    """
    @brief
    Represents one job of the plan.

    @details
    A job groups tasks by category. Pickup, delivery and replacement tasks
    carry a demand; service tasks do not.
    """

    id: str = Field(..., description="Unique job identifier")
    pickups: list[JobTask] | None = None
    deliveries: list[JobTask] | None = None
    replacements: list[JobTask] | None = None
    services: list[JobTask] | None = None
    priority: int | None = Field(None, ge=1)
    skills: list[str] | None = None


class Relation(_SnapshotModel):
    type: Literal["strict", "sequence", "any"] = Field(..., description="Relation kind")
    jobs: list[str] = Field(..., description="Ordered job ids (reserved activity ids allowed)")
    vehicle_id: str | None = Field(None, alias="vehicleId")
    shift_index: int | None = Field(None, alias="shiftIndex", ge=0)


class Plan(_SnapshotModel):
    jobs: list[Job] = Field(default_factory=list)
    relations: list[Relation] | None = None


# ------------------------------------------------------------
# Fleet
# ------------------------------------------------------------
class VehicleCosts(_SnapshotModel):
    fixed: float | None = None
    distance: float = Field(..., description="Cost per distance unit")
    time: float = Field(..., description="Cost per time unit")


class ShiftStart(_SnapshotModel):
    earliest: str = Field(..., description="Earliest departure time (RFC 3339)")
    latest: str | None = None
    location: Location


class ShiftEnd(_SnapshotModel):
    earliest: str | None = None
    latest: str = Field(..., description="Latest arrival time (RFC 3339)")
    location: Location


class VehicleBreak(_SnapshotModel):
    times: list[list[str]] = Field(..., description="Break time windows as [start, end] pairs")
    duration: float = Field(..., description="Break duration in seconds")
    locations: list[Location] | None = None


class VehicleReload(_SnapshotModel):
    location: Location
    duration: float = Field(..., description="Reload duration in seconds")
    times: list[list[str]] | None = None
    tag: str | None = None


class VehicleShift(_SnapshotModel):
    start: ShiftStart
    end: ShiftEnd | None = None
    breaks: list[VehicleBreak] | None = None
    reloads: list[VehicleReload] | None = None


class VehicleLimits(_SnapshotModel):
    max_distance: float | None = Field(None, alias="maxDistance")
    shift_time: float | None = Field(None, alias="shiftTime")
    allowed_areas: list[list[Location]] | None = Field(None, alias="allowedAreas")


class VehicleType(_SnapshotModel):
    """
    @brief
    Represents one vehicle type of the fleet.

    @details
    A type describes a group of concrete vehicles sharing profile, costs,
    shifts and capacity. Every entry of `vehicle_ids` is a separate vehicle.
    """

    type_id: str = Field(..., alias="typeId")
    vehicle_ids: list[str] = Field(..., alias="vehicleIds")
    profile: str = Field(..., description="Routing profile name")
    costs: VehicleCosts
    shifts: list[VehicleShift] = Field(default_factory=list)
    capacity: list[int] = Field(default_factory=list)
    skills: list[str] | None = None
    limits: VehicleLimits | None = None


class Profile(_SnapshotModel):
    name: str = Field(..., description="Profile name referenced by vehicles and matrices")
    type: str = Field(..., description="Routing type, e.g. 'car'")


class Fleet(_SnapshotModel):
    vehicles: list[VehicleType] = Field(default_factory=list)
    profiles: list[Profile] = Field(default_factory=list)


# ------------------------------------------------------------
# Objectives
# ------------------------------------------------------------
class Objective(_SnapshotModel):
    type: str = Field(..., description="Objective tag, e.g. 'minimize-cost'")
    options: dict[str, Any] | None = None


class Objectives(_SnapshotModel):
    primary: list[Objective] = Field(default_factory=list)
    secondary: list[Objective] | None = None


class Problem(_SnapshotModel):
    """
    @brief
    Root of the pragmatic problem snapshot.

    @details
    Constructed once by the problem loader and shared read-only by every
    validator for the duration of a validation run.
    """

    plan: Plan
    fleet: Fleet
    objectives: Objectives | None = None


# ------------------------------------------------------------
# Routing matrix
# ------------------------------------------------------------
class Matrix(_SnapshotModel):
    """
    @brief
    Routing matrix for one profile.

    @details
    Travel times and distances are flattened row-major squares indexed by
    unique problem locations.
    """

    profile: str | None = None
    timestamp: str | None = None
    travel_times: list[int] = Field(..., alias="travelTimes")
    distances: list[int] = Field(...)
    error_codes: list[int] | None = Field(None, alias="errorCodes")


# ------------------------------------------------------------
# Runtime configuration
# ------------------------------------------------------------
class PopulationConfig(_StrictBaseModel):
    initial_size: int = Field(1, ge=1, description="Individuals built by initial methods")
    max_size: int = Field(4, ge=1, description="Maximum population size")
    elite_size: int = Field(2, ge=1, description="Best individuals kept between generations")


class TerminationConfig(_StrictBaseModel):
    max_time: int | None = Field(300, ge=1, description="Time limit in seconds")
    max_generations: int | None = Field(3000, ge=1, description="Generation limit")
    variation_cv: float | None = Field(
        None, gt=0.0, description="Stop when cost coefficient of variation falls below"
    )


class WeightedMethod(_StrictBaseModel):
    type: str = Field(..., description="Operator name, e.g. 'cheapest' or 'random-route'")
    weight: int = Field(1, ge=0, description="Selection weight")


class SolverConfig(_StrictBaseModel):
    """
    @brief
    Algorithm tuning document handed to the solver untouched.

    @details
    Validated here only structurally so that a broken document surfaces as
    E0004 before any work is done.
    """

    initial_methods: list[WeightedMethod] = Field(
        default_factory=lambda: [WeightedMethod(type="cheapest")],
        description="Construction heuristics for the initial population",
    )
    ruins: list[WeightedMethod] = Field(
        default_factory=lambda: [WeightedMethod(type="adjusted-string")],
        description="Ruin operators",
    )
    recreates: list[WeightedMethod] = Field(
        default_factory=lambda: [WeightedMethod(type="cheapest")],
        description="Recreate operators",
    )
    population: PopulationConfig = Field(default_factory=PopulationConfig.model_construct)
    termination: TerminationConfig = Field(default_factory=TerminationConfig.model_construct)
    random_seed: int | None = Field(None, ge=0)


class ValidationConfig(BaseModel):
    """
    @brief
    Controls behavior of validation subsystem.

    @details
    Determines whether to write a report and whether validators run
    across a thread pool.
    """

    write_report: bool = True
    parallel: bool = False
    max_workers: int | None = Field(None, ge=1)


class Config(_StrictBaseModel):
    """
    @brief
    Represents the full runtime configuration loaded from config.yaml.
    """

    output_dir: str | None = "data/output"
    validation: ValidationConfig = Field(default_factory=ValidationConfig.model_construct)
    solver: SolverConfig = Field(default_factory=SolverConfig)


__all__ = [
    "Config",
    "Fleet",
    "Job",
    "JobPlace",
    "JobTask",
    "Location",
    "Matrix",
    "Objective",
    "Objectives",
    "Plan",
    "Problem",
    "Profile",
    "Relation",
    "SolverConfig",
    "VehicleShift",
    "VehicleType",
]
