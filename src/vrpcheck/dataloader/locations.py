# src/vrpcheck/dataloader/locations.py
from __future__ import annotations

from collections.abc import Iterator

from vrpcheck.schemas.models import Location, Problem
from vrpcheck.validator.jobs import iter_tasks


def _iter_locations(problem: Problem) -> Iterator[Location]:
    # Jobs first, then vehicles: this is the index order routing matrices use.
    for job in problem.plan.jobs:
        for _, _, task in iter_tasks(job):
            for place in task.places:
                yield place.location

    for vehicle in problem.fleet.vehicles:
        for shift in vehicle.shifts:
            yield shift.start.location
            if shift.end is not None:
                yield shift.end.location
            for vehicle_break in shift.breaks or []:
                yield from vehicle_break.locations or []
            for reload in shift.reloads or []:
                yield reload.location


def get_unique_locations(problem: Problem) -> list[Location]:
    """
    @brief
    List distinct coordinates of the problem in first-seen order.

    @details
    The list is what a caller needs to request a routing matrix for the
    problem; its length is the matrix dimension.
    """
    seen: dict[tuple[float, float], Location] = {}
    for location in _iter_locations(problem):
        seen.setdefault((location.lat, location.lng), location)
    return list(seen.values())


__all__ = ["get_unique_locations"]
