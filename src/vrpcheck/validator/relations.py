# src/vrpcheck/validator/relations.py
from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence

from vrpcheck.schemas.models import Job, Relation
from vrpcheck.validator.jobs import RESERVED_JOB_IDS, iter_tasks
from vrpcheck.validator.violations import ErrorCode, Violation

logger = logging.getLogger(__name__)

_ORDERED_RELATION_TYPES = frozenset({"strict", "sequence"})


def _is_ambiguous(job: Job) -> bool:
    """A job is ambiguous in an ordered relation if it can occupy several positions."""
    for _, _, task in iter_tasks(job):
        if len(task.places) > 1:
            return True
        if any(len(place.times or []) > 1 for place in task.places):
            return True
    return False


def validate_relations(
    relations: Sequence[Relation],
    jobs: Mapping[str, Job],
    vehicle_ids: Collection[str],
) -> list[Violation]:
    """
    @brief
    Validate plan relations against the plan and the fleet (E1200-E1204).

    @details
    Per-relation violations come first, ordered by relation appearance and
    then by code. Vehicle binding conflicts (E1204) follow, ordered by the
    first relation that binds the job. Reserved activity ids (departure,
    arrival, break, reload) are legal relation entries and are skipped by
    job lookups.

    @params
        relations : Sequence[Relation]
            Relations of the plan in document order.
        jobs : Mapping[str, Job]
            Plan jobs by id (first occurrence wins for duplicated ids).
        vehicle_ids : Collection[str]
            All concrete vehicle ids of the fleet.

    @returns
        Ordered list of violations.
    """
    violations: list[Violation] = []
    # Insertion order of this mapping is the reporting order of E1204.
    bound_vehicles: dict[str, list[str]] = {}

    for relation_index, relation in enumerate(relations):
        context = {"relation_index": relation_index, "vehicle_id": relation.vehicle_id}
        plan_job_ids = [job_id for job_id in relation.jobs if job_id not in RESERVED_JOB_IDS]

        # (1) E1200: referenced jobs must exist
        unknown = [job_id for job_id in plan_job_ids if job_id not in jobs]
        if unknown:
            violations.append(
                Violation(
                    code=ErrorCode.UNKNOWN_RELATION_JOB,
                    message=f"relation {relation_index} has unknown job id(s): {', '.join(unknown)}",
                    context={**context, "job_ids": unknown},
                )
            )

        # (2) E1201: referenced vehicle must exist
        if relation.vehicle_id is not None and relation.vehicle_id not in vehicle_ids:
            violations.append(
                Violation(
                    code=ErrorCode.UNKNOWN_RELATION_VEHICLE,
                    message=(
                        f"relation {relation_index} has unknown vehicle id '{relation.vehicle_id}'"
                    ),
                    context=dict(context),
                )
            )

        # (3) E1202: at least one entry
        if not relation.jobs:
            violations.append(
                Violation(
                    code=ErrorCode.EMPTY_RELATION,
                    message=f"relation {relation_index} has no job ids",
                    context=dict(context),
                )
            )

        # (4) E1203: ordered relations need unambiguous jobs
        if relation.type in _ORDERED_RELATION_TYPES:
            ambiguous = [
                job_id
                for job_id in dict.fromkeys(plan_job_ids)
                if job_id in jobs and _is_ambiguous(jobs[job_id])
            ]
            if ambiguous:
                violations.append(
                    Violation(
                        code=ErrorCode.AMBIGUOUS_RELATION_JOB,
                        message=(
                            f"{relation.type} relation {relation_index} has job(s) with multiple "
                            f"places or time windows: {', '.join(ambiguous)}"
                        ),
                        context={**context, "job_ids": ambiguous},
                    )
                )

        # (5) Collect vehicle bindings for the cross-relation check
        if relation.vehicle_id is not None:
            for job_id in plan_job_ids:
                vehicles = bound_vehicles.setdefault(job_id, [])
                if relation.vehicle_id not in vehicles:
                    vehicles.append(relation.vehicle_id)

    # (6) E1204: one job, one vehicle
    for job_id, vehicles in bound_vehicles.items():
        if len(vehicles) > 1:
            violations.append(
                Violation(
                    code=ErrorCode.JOB_IN_MULTIPLE_VEHICLE_RELATIONS,
                    message=f"job '{job_id}' is bound to different vehicles: {', '.join(vehicles)}",
                    context={"job_id": job_id, "vehicle_ids": list(vehicles)},
                )
            )

    logger.debug(
        "Relation validation: %d relation(s), %d violation(s).", len(relations), len(violations)
    )
    return violations


__all__ = ["validate_relations"]
