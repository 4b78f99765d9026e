# src/vrpcheck/validator/jobs.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence

from vrpcheck.schemas.models import Job, JobTask
from vrpcheck.validator.demand import balanced, is_non_negative, sum_demands
from vrpcheck.validator.intervals import MalformedInterval, TimeWindow, overlaps, parse_window
from vrpcheck.validator.violations import ErrorCode, Violation

logger = logging.getLogger(__name__)

RESERVED_JOB_IDS = frozenset({"departure", "arrival", "break", "reload"})

# Task categories in document order; services are the only ones without demand.
TASK_CATEGORIES = ("pickups", "deliveries", "replacements", "services")
_DEMAND_CATEGORIES = frozenset({"pickups", "deliveries", "replacements"})


def iter_tasks(job: Job) -> Iterator[tuple[str, int, JobTask]]:
    """Yield (category, index, task) for every task of the job."""
    for category in TASK_CATEGORIES:
        for index, task in enumerate(getattr(job, category) or []):
            yield category, index, task


# ----------------------------
# PER-JOB RULES
# ----------------------------
# Each rule returns a cause message, or None when the job satisfies it.
def _invalid_task_demand(job: Job) -> str | None:
    problems: list[str] = []
    for category, index, task in iter_tasks(job):
        if category in _DEMAND_CATEGORIES and task.demand is None:
            problems.append(f"{category}[{index}] without demand")
        elif category not in _DEMAND_CATEGORIES and task.demand is not None:
            problems.append(f"{category}[{index}] with demand")
    if problems:
        return f"job '{job.id}' has invalid task demand: {', '.join(problems)}"
    return None


def _unbalanced_pickup_delivery(job: Job) -> str | None:
    """
    @brief
    Pickup and delivery demands of a job must sum to the same vector (E1102).

    @details
    Only jobs with both pickups and deliveries are checked. A task without
    demand counts as an empty vector; vectors are zero-padded before summing.
    """
    if not job.pickups or not job.deliveries:
        return None

    pickups = [task.demand or [] for task in job.pickups]
    deliveries = [task.demand or [] for task in job.deliveries]
    if balanced(pickups, deliveries):
        return None
    return (
        f"job '{job.id}' has unbalanced demand: pickups sum to {sum_demands(pickups)}, "
        f"deliveries sum to {sum_demands(deliveries)}"
    )


def _invalid_time_windows(job: Job) -> str | None:
    """
    @brief
    Check the time windows of every place of the job (E1103).

    @details
    Each raw window goes through `parse_window`; malformed ones are listed
    with their position. Windows of one place must not overlap, while
    windows of different places are alternatives and may.

    @params
        job : Job
            Job to check.

    @returns
        One combined cause message, or None when all windows are valid.
    """
    problems: list[str] = []
    for category, index, task in iter_tasks(job):
        for place_index, place in enumerate(task.places):
            where = f"{category}[{index}].places[{place_index}]"
            windows: list[TimeWindow] = []
            for time_index, raw in enumerate(place.times or []):
                parsed = parse_window(raw)
                if isinstance(parsed, MalformedInterval):
                    problems.append(f"{where}.times[{time_index}]: {parsed.reason}")
                else:
                    windows.append(parsed)
            if overlaps(windows):
                problems.append(f"{where}: overlapping time windows")
    if problems:
        return f"job '{job.id}' has invalid time windows: {'; '.join(problems)}"
    return None


def _reserved_job_id(job: Job) -> str | None:
    if job.id in RESERVED_JOB_IDS:
        return f"job id '{job.id}' is reserved"
    return None


def _empty_job(job: Job) -> str | None:
    if next(iter_tasks(job), None) is None:
        return f"job '{job.id}' has no tasks"
    return None


def _negative_duration(job: Job) -> str | None:
    locations = [
        f"{category}[{index}].places[{place_index}]"
        for category, index, task in iter_tasks(job)
        for place_index, place in enumerate(task.places)
        if place.duration < 0
    ]
    if locations:
        return f"job '{job.id}' has negative duration at {', '.join(locations)}"
    return None


def _negative_demand(job: Job) -> str | None:
    locations = [
        f"{category}[{index}]"
        for category, index, task in iter_tasks(job)
        if task.demand is not None and not is_non_negative(task.demand)
    ]
    if locations:
        return f"job '{job.id}' has negative demand at {', '.join(locations)}"
    return None


# Ascending code order; this fixes the order of codes emitted for one job.
_JOB_RULES: tuple[tuple[ErrorCode, Callable[[Job], str | None]], ...] = (
    (ErrorCode.INVALID_TASK_DEMAND, _invalid_task_demand),
    (ErrorCode.UNBALANCED_PICKUP_DELIVERY, _unbalanced_pickup_delivery),
    (ErrorCode.INVALID_JOB_TIME_WINDOWS, _invalid_time_windows),
    (ErrorCode.RESERVED_JOB_ID, _reserved_job_id),
    (ErrorCode.EMPTY_JOB, _empty_job),
    (ErrorCode.NEGATIVE_DURATION, _negative_duration),
    (ErrorCode.NEGATIVE_DEMAND, _negative_demand),
)


def validate_jobs(jobs: Sequence[Job]) -> list[Violation]:
    """
    @brief
    Validate the job list of the plan (E1100-E1107).

    @details
    Iterates the jobs once. For every job all rules are evaluated, so one
    job may produce several violations; they are ordered by job appearance
    and then by ascending code. A duplicated id is reported once, at the
    job where the duplicate is first encountered.

    @params
        jobs : Sequence[Job]
            Jobs of the plan in document order.

    @returns
        Ordered list of violations, empty when the plan is valid.
    """
    violations: list[Violation] = []
    seen_ids: set[str] = set()
    reported_duplicates: set[str] = set()

    for job_index, job in enumerate(jobs):
        context = {"job_id": job.id, "job_index": job_index}

        # (1) Identity across the whole plan
        if job.id in seen_ids and job.id not in reported_duplicates:
            reported_duplicates.add(job.id)
            violations.append(
                Violation(
                    code=ErrorCode.DUPLICATE_JOB_ID,
                    message=f"duplicated job id '{job.id}'",
                    context=dict(context),
                )
            )
        seen_ids.add(job.id)

        # (2) Shape, demand and time rules of the job itself
        for code, rule in _JOB_RULES:
            message = rule(job)
            if message is not None:
                violations.append(Violation(code=code, message=message, context=dict(context)))

    logger.debug("Job validation: %d job(s), %d violation(s).", len(jobs), len(violations))
    return violations


__all__ = ["RESERVED_JOB_IDS", "TASK_CATEGORIES", "iter_tasks", "validate_jobs"]
