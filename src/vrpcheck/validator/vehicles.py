# src/vrpcheck/validator/vehicles.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from vrpcheck.schemas.models import VehicleShift, VehicleType
from vrpcheck.validator.intervals import (
    MalformedInterval,
    TimeWindow,
    contains,
    overlaps,
    parse_time,
    parse_window,
)
from vrpcheck.validator.violations import ErrorCode, Violation

logger = logging.getLogger(__name__)

MIN_AREA_VERTICES = 3

# Upper bound of a shift without an end.
_OPEN_END = datetime.max.replace(tzinfo=timezone.utc)


# ----------------------------
# AUXILIARY FUNCTIONS
# ----------------------------
def _shift_problems(shift: VehicleShift) -> list[str]:
    """
    @brief
    Check the start and end times of one shift (E1302).

    @details
    Every timestamp must parse as RFC 3339. The latest end must be later
    than the earliest start, and each optional `latest`/`earliest` bound
    must not invert its pair. A shift without an end is open-ended and only
    its start is checked.

    @params
        shift : VehicleShift
            Shift as found in the vehicle type.

    @returns
        Problem descriptions; an empty list means the shift interval is valid.
    """
    problems: list[str] = []

    start = parse_time(shift.start.earliest)
    if start is None:
        problems.append(f"cannot parse start time '{shift.start.earliest}'")

    if shift.start.latest is not None:
        latest = parse_time(shift.start.latest)
        if latest is None:
            problems.append(f"cannot parse latest start time '{shift.start.latest}'")
        elif start is not None and latest < start:
            problems.append("latest start is earlier than earliest start")

    if shift.end is not None:
        end = parse_time(shift.end.latest)
        if end is None:
            problems.append(f"cannot parse end time '{shift.end.latest}'")
        elif start is not None and end <= start:
            problems.append("end is not later than start")

        if shift.end.earliest is not None:
            end_earliest = parse_time(shift.end.earliest)
            if end_earliest is None:
                problems.append(f"cannot parse earliest end time '{shift.end.earliest}'")
            elif end is not None and end_earliest > end:
                problems.append("earliest end is later than latest end")

    return problems


def _shift_window(shift: VehicleShift) -> TimeWindow | None:
    """
    @brief
    Interval from earliest start to latest end.

    @details
    Open-ended shifts get an unbounded end, so containment only checks the
    start. Returns None when the interval cannot be formed; callers then
    skip containment checks.
    """
    start = parse_time(shift.start.earliest)
    end = parse_time(shift.end.latest) if shift.end is not None else _OPEN_END
    if start is None or end is None or start >= end:
        return None
    return TimeWindow(start=start, end=end)


def _window_problems(
    label: str,
    raw_windows: Sequence[Any],
    shift_window: TimeWindow | None,
) -> tuple[list[str], list[TimeWindow]]:
    """
    @brief
    Parse the time windows of one break or reload.

    @details
    Malformed windows are reported and dropped. Parsed windows are checked
    against the shift interval when one is available and are returned so
    that the caller can run its own overlap policy over them.

    @params
        label : str
            Prefix for messages, e.g. `breaks[0]`.
        raw_windows : Sequence[Any]
            Raw `[start, end]` pairs from the document.
        shift_window : TimeWindow | None
            Shift interval, or None when the shift times are invalid.

    @returns
        Tuple of (problem descriptions, successfully parsed windows).
    """
    problems: list[str] = []
    windows: list[TimeWindow] = []
    for time_index, raw in enumerate(raw_windows):
        parsed = parse_window(raw)
        if isinstance(parsed, MalformedInterval):
            problems.append(f"{label}.times[{time_index}]: {parsed.reason}")
            continue
        windows.append(parsed)
        if shift_window is not None and not contains(shift_window, parsed):
            problems.append(f"{label}.times[{time_index}]: outside of shift time")
    return problems, windows


def _break_problems(shift: VehicleShift, shift_window: TimeWindow | None) -> list[str]:
    """Break windows must be valid, inside the shift and pairwise disjoint (E1303)."""
    problems: list[str] = []
    windows: list[TimeWindow] = []
    for break_index, vehicle_break in enumerate(shift.breaks or []):
        found, parsed = _window_problems(f"breaks[{break_index}]", vehicle_break.times, shift_window)
        problems.extend(found)
        windows.extend(parsed)
    if overlaps(windows):
        problems.append("break time windows overlap")
    return problems


def _reload_problems(shift: VehicleShift, shift_window: TimeWindow | None) -> list[str]:
    # Reloads of one vehicle may overlap each other.
    problems: list[str] = []
    for reload_index, reload in enumerate(shift.reloads or []):
        found, _ = _window_problems(f"reloads[{reload_index}]", reload.times or [], shift_window)
        problems.extend(found)
    return problems


def _allowed_area_problems(vehicle: VehicleType) -> list[str]:
    if vehicle.limits is None or vehicle.limits.allowed_areas is None:
        return []
    areas = vehicle.limits.allowed_areas
    if not areas:
        return ["allowed areas list is empty"]
    return [
        f"allowedAreas[{area_index}] has {len(area)} point(s)"
        for area_index, area in enumerate(areas)
        if len(area) < MIN_AREA_VERTICES
    ]


# ----------------------------
# VALIDATOR
# ----------------------------
def validate_vehicles(vehicles: Sequence[VehicleType]) -> list[Violation]:
    """
    @brief
    Validate the fleet vehicle types (E1300-E1305).

    @details
    Output is ordered by vehicle type appearance; within a type, identity
    violations come first, then shift violations by shift index and code,
    then allowed area violations. Duplicated type ids and vehicle ids are
    reported once, at the type where the duplicate is first encountered.
    Break and reload windows are checked against the shift interval only
    when the shift times themselves are valid.

    @params
        vehicles : Sequence[VehicleType]
            Vehicle types of the fleet in document order.

    @returns
        Ordered list of violations.
    """
    violations: list[Violation] = []
    seen_type_ids: set[str] = set()
    reported_type_ids: set[str] = set()
    seen_vehicle_ids: set[str] = set()
    reported_vehicle_ids: set[str] = set()

    for type_index, vehicle in enumerate(vehicles):
        context = {"type_id": vehicle.type_id, "type_index": type_index}

        # (1) E1300: type identity
        if vehicle.type_id in seen_type_ids and vehicle.type_id not in reported_type_ids:
            reported_type_ids.add(vehicle.type_id)
            violations.append(
                Violation(
                    code=ErrorCode.DUPLICATE_VEHICLE_TYPE_ID,
                    message=f"duplicated vehicle type id '{vehicle.type_id}'",
                    context=dict(context),
                )
            )
        seen_type_ids.add(vehicle.type_id)

        # (2) E1301: vehicle identity across the whole fleet
        for vehicle_id in vehicle.vehicle_ids:
            if vehicle_id in seen_vehicle_ids and vehicle_id not in reported_vehicle_ids:
                reported_vehicle_ids.add(vehicle_id)
                violations.append(
                    Violation(
                        code=ErrorCode.DUPLICATE_VEHICLE_ID,
                        message=f"duplicated vehicle id '{vehicle_id}'",
                        context={**context, "vehicle_id": vehicle_id},
                    )
                )
            seen_vehicle_ids.add(vehicle_id)

        # (3) E1302-E1304: shift, break and reload times
        for shift_index, shift in enumerate(vehicle.shifts):
            shift_context = {**context, "shift_index": shift_index}
            prefix = f"vehicle type '{vehicle.type_id}' shift {shift_index}"

            shift_problems = _shift_problems(shift)
            shift_window = _shift_window(shift) if not shift_problems else None
            if shift_problems:
                violations.append(
                    Violation(
                        code=ErrorCode.INVALID_SHIFT_TIME,
                        message=f"{prefix} has invalid time: {'; '.join(shift_problems)}",
                        context=dict(shift_context),
                    )
                )

            break_problems = _break_problems(shift, shift_window)
            if break_problems:
                violations.append(
                    Violation(
                        code=ErrorCode.INVALID_BREAK_TIME_WINDOWS,
                        message=f"{prefix} has invalid breaks: {'; '.join(break_problems)}",
                        context=dict(shift_context),
                    )
                )

            reload_problems = _reload_problems(shift, shift_window)
            if reload_problems:
                violations.append(
                    Violation(
                        code=ErrorCode.INVALID_RELOAD_TIME_WINDOWS,
                        message=f"{prefix} has invalid reloads: {'; '.join(reload_problems)}",
                        context=dict(shift_context),
                    )
                )

        # (4) E1305: allowed area geometry
        area_problems = _allowed_area_problems(vehicle)
        if area_problems:
            violations.append(
                Violation(
                    code=ErrorCode.INVALID_ALLOWED_AREA,
                    message=(
                        f"vehicle type '{vehicle.type_id}' has invalid allowed areas: "
                        f"{'; '.join(area_problems)}"
                    ),
                    context=dict(context),
                )
            )

    logger.debug(
        "Vehicle validation: %d type(s), %d violation(s).", len(vehicles), len(violations)
    )
    return violations


__all__ = ["MIN_AREA_VERTICES", "validate_vehicles"]
