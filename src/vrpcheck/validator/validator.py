# src/vrpcheck/validator/validator.py
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from vrpcheck.export.report_export import write_report
from vrpcheck.schemas.models import Job, Problem
from vrpcheck.validator.jobs import validate_jobs
from vrpcheck.validator.objectives import validate_objectives
from vrpcheck.validator.profiles import validate_profiles
from vrpcheck.validator.relations import validate_relations
from vrpcheck.validator.vehicles import validate_vehicles
from vrpcheck.validator.violations import Violation

logger = logging.getLogger(__name__)

ValidatorFn = Callable[[Problem], list[Violation]]


# ----------------------------
# REGISTRY
# ----------------------------
def _check_jobs(problem: Problem) -> list[Violation]:
    return validate_jobs(problem.plan.jobs)


def _check_relations(problem: Problem) -> list[Violation]:
    jobs: dict[str, Job] = {}
    for job in problem.plan.jobs:
        jobs.setdefault(job.id, job)
    vehicle_ids = {
        vehicle_id for vehicle in problem.fleet.vehicles for vehicle_id in vehicle.vehicle_ids
    }
    return validate_relations(problem.plan.relations or [], jobs, vehicle_ids)


def _check_vehicles(problem: Problem) -> list[Violation]:
    return validate_vehicles(problem.fleet.vehicles)


def _check_profiles(problem: Problem) -> list[Violation]:
    return validate_profiles(problem.fleet.profiles)


def _check_objectives(problem: Problem) -> list[Violation]:
    return validate_objectives(problem.objectives)


# Registry of all validators. The order is the reporting order of the merged
# violation list; adding a rule set means adding an entry here.
VALIDATORS: list[tuple[str, ValidatorFn]] = [
    ("Jobs", _check_jobs),
    ("Relations", _check_relations),
    ("Vehicles", _check_vehicles),
    ("Profiles", _check_profiles),
    ("Objectives", _check_objectives),
]


def _run_validators(
    problem: Problem, parallel: bool, max_workers: int | None
) -> list[tuple[str, list[Violation]]]:
    """Run every registered validator and return results in registry order."""
    registry = list(VALIDATORS)

    if not parallel:
        return [(name, list(fn(problem))) for name, fn in registry]

    # Validators share the frozen snapshot only; map() keeps submission order.
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vrpcheck") as pool:
        results = list(pool.map(lambda entry: list(entry[1](problem)), registry))
    return [(name, found) for (name, _), found in zip(registry, results)]


def validate_problem(
    problem: Problem, *, parallel: bool = False, max_workers: int | None = None
) -> list[Violation]:
    """
    @brief
    Run all validators against one problem snapshot.

    @details
    Violations of each validator are concatenated in registry order
    (jobs, relations, vehicles, profiles, objectives), never interleaved.
    The result is identical whether validators run sequentially or in
    parallel.

    @returns
        Empty list for a valid problem, otherwise every violation found.
    """
    return [
        violation
        for _, found in _run_validators(problem, parallel, max_workers)
        for violation in found
    ]


# ----------------------------
# VALIDATOR CLASS (instance core)
# ----------------------------
class ProblemValidator:
    """
    @brief
    Pre-solve problem validator.

    @details
    Runs the registered semantic rule sets against a problem snapshot and
    collects violations into a structured report. Rule violations never
    raise; ValidationError is raised only when persisting the report fails.
    """

    def __init__(
        self, problem: Problem, *, parallel: bool = False, max_workers: int | None = None
    ) -> None:
        self.problem = problem
        self.parallel = parallel
        self.max_workers = max_workers

        self.violations: list[Violation] = []
        self.checks: dict[str, bool] = {}

    # ---------- Public lifecycle API ----------
    def run_all_checks(self) -> list[Violation]:
        """
        @brief
        Execute the full validation sequence.

        @details
        Resets previous results, runs every registered validator and records
        per-validator pass flags alongside the merged violation list.
        """
        self.violations = []
        self.checks = {}

        for name, found in _run_validators(self.problem, self.parallel, self.max_workers):
            self.checks[name] = not found
            self.violations.extend(found)

        if self.violations:
            logger.warning("Problem validation found %d violation(s).", len(self.violations))
        else:
            logger.info("Problem validation passed.")
        return self.violations

    def build_report(self) -> dict[str, Any]:
        """
        @brief
        Assemble validation results into a serializable dictionary.

        @returns
            Report with timestamp, validity flag, ordered errors, per-validator
            check flags and per-code counts.
        """
        counts = Counter(v.code.value for v in self.violations)
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "valid": not self.violations,
            "errors": [v.to_dict() for v in self.violations],
            "checks": dict(self.checks),
            "counts": dict(sorted(counts.items())),
        }

    def save_report(
        self,
        report: dict[str, Any],
        out_dir: Path | None = None,
        filename: str = "validation_report.json",
    ) -> Path:
        """Write the report atomically; defaults to data/output/validation_report.json."""
        target = (out_dir or Path("data/output")) / filename
        write_report(report, target)
        logger.info("Validation report saved: %s", target)
        return target


# ----------------------------
# THIN FACADE (static script call)
# ----------------------------
def validate_problem_report(
    problem: Problem,
    *,
    write: bool = True,
    out_dir: Path | None = None,
    filename: str = "validation_report.json",
    parallel: bool = False,
    max_workers: int | None = None,
) -> dict[str, Any]:
    """
    @brief
    High-level convenience wrapper for problem validation.

    @details
    Creates a ProblemValidator, runs all checks, builds the report and
    optionally writes it to disk. Always returns the in-memory report.
    """
    # (1) Run every validator
    validator = ProblemValidator(problem, parallel=parallel, max_workers=max_workers)
    validator.run_all_checks()

    # (2) Build final structured report
    report = validator.build_report()

    # (3) Optionally persist the report to disk
    if write:
        validator.save_report(report, out_dir=out_dir, filename=filename)

    return report


__all__ = [
    "VALIDATORS",
    "ProblemValidator",
    "validate_problem",
    "validate_problem_report",
]
