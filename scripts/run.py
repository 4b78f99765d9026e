# scripts/run.py
from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import traceback
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from vrpcheck.dataloader.config_loader import ConfigLoader
from vrpcheck.dataloader.locations import get_unique_locations
from vrpcheck.dataloader.matrix_loader import MatrixLoader, check_transport_costs
from vrpcheck.dataloader.problem_loader import ProblemLoader
from vrpcheck.errors import VrpCheckError
from vrpcheck.schemas.models import Config
from vrpcheck.validator.validator import validate_problem_report


def _setup_logging() -> None:
    """
    @brief
    Initializes global logging configuration.

    @details
    Sets the default logging level to INFO and defines a simple console format.
    """
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """
    @brief
    Parses command-line arguments for the vrpcheck pipeline.

    @details
    Accepts the problem file, optional routing matrices, an optional config
    document and the output directory. `--locations` prints the unique
    problem locations instead of validating.
    """
    parser = argparse.ArgumentParser(
        prog="vrpcheck-run",
        description="Check a pragmatic VRP problem before solving: load → validate → report",
    )

    # (1) Problem definition
    parser.add_argument("--problem", type=str, required=True, help="Path to problem JSON")

    # (2) Routing matrices, one per profile
    parser.add_argument(
        "--matrix",
        type=str,
        action="append",
        default=[],
        help="Path to routing matrix JSON (repeat for several profiles)",
    )

    # (3) Config document
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config YAML/JSON (default: built-in defaults)",
    )

    # (4) Output directory
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for the validation report (default: config output_dir)",
    )

    # (5) Alternative mode
    parser.add_argument(
        "--locations",
        action="store_true",
        help="Print unique problem locations as JSON and exit",
    )

    return parser.parse_args(argv)


def run_pipeline(
    problem_path: Path,
    matrix_paths: Sequence[Path] = (),
    config_path: Path | None = None,
    output_dir: Path | None = None,
) -> dict[str, Any]:
    """
    @brief
    Executes the pre-solve checking pipeline.

    @details
    Performs sequential steps:
    (1) Load configuration (E0004) and problem (E0000).
    (2) Load routing matrices (E0001) and fit them to the problem (E0002).
    (3) Run semantic validation and write the report.
    Raises VrpCheckError on controlled pipeline failures; semantic
    violations are returned in the result, never raised.

    @returns
        Dictionary with validity flag, violation list and report path.
    """
    t0 = time.perf_counter()

    # (1) Configuration and problem
    cfg = ConfigLoader().load(config_path) if config_path is not None else Config()
    out_dir = output_dir or Path(cfg.output_dir or "data/output")

    logging.info("Loading problem: %s", problem_path)
    problem = ProblemLoader().load(problem_path)

    # (2) Routing matrices
    if matrix_paths:
        matrices = MatrixLoader().load(list(matrix_paths))
        check_transport_costs(problem, matrices)

    # (3) Semantic validation
    logging.info("Validating problem…")
    write = cfg.validation.write_report
    report = validate_problem_report(
        problem,
        write=write,
        out_dir=out_dir,
        parallel=cfg.validation.parallel,
        max_workers=cfg.validation.max_workers,
    )
    for error in report["errors"]:
        logging.error(
            "%s, cause: '%s', action: '%s'.",
            error["code"],
            error["message"],
            error["suggested_action"],
        )

    logging.info("Check finished in %.2f s", time.perf_counter() - t0)
    return {
        "valid": report["valid"],
        "errors": report["errors"],
        "report": out_dir / "validation_report.json" if write else None,
    }


def main(argv: Sequence[str] | None = None) -> int:
    """
    @brief
    CLI entry point.

    @details
    Returns numeric exit codes suitable for shell integration:
      0 – problem is valid (or locations printed)
      1 – controlled failure (E0xxx) or semantic violations
      2 – unexpected crash
    """
    _setup_logging()
    args = _parse_args(argv)

    try:
        if args.locations:
            problem = ProblemLoader().load(Path(args.problem))
            locations = [loc.model_dump() for loc in get_unique_locations(problem)]
            print(json.dumps(locations, indent=2))
            return 0

        result = run_pipeline(
            Path(args.problem),
            [Path(p) for p in args.matrix],
            Path(args.config) if args.config else None,
            Path(args.output) if args.output else None,
        )
        if result["valid"]:
            logging.info("Problem is valid.")
            return 0
        logging.error("Problem is invalid: %d violation(s).", len(result["errors"]))
        return 1

    except VrpCheckError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
