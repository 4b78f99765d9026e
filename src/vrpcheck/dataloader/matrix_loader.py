# src/vrpcheck/dataloader/matrix_loader.py
from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from vrpcheck.dataloader.locations import get_unique_locations
from vrpcheck.errors import MatrixError, TransportCostError
from vrpcheck.schemas.models import Matrix, Problem

logger = logging.getLogger(__name__)


class MatrixLoader:
    """
    @brief
    Loader for routing matrix documents.

    @details
    Reads one JSON file per profile and deserializes it into `Matrix`.
    Any read or schema failure raises `MatrixError` (E0001). Fitting the
    matrices to a problem is a separate step (`check_transport_costs`).
    """

    def load(self, paths: Sequence[Path]) -> list[Matrix]:
        matrices = [self._load_one(path) for path in paths]
        logger.info("Routing matrices loaded: %d file(s).", len(matrices))
        return matrices

    def _load_one(self, path: Path) -> Matrix:
        if not isinstance(path, Path) or not path.exists():
            raise MatrixError(
                message=f"Matrix file not found: {path}",
                source="MatrixLoader._load_one",
                suggested_action="Verify matrix file paths.",
            )
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Matrix.model_validate(data)
        except (OSError, UnicodeDecodeError) as e:
            raise MatrixError(
                message=f"Unable to read matrix file: {e}",
                source="MatrixLoader._load_one",
                suggested_action="Check file permissions and encoding.",
            ) from e
        except (json.JSONDecodeError, ValidationError) as e:
            raise MatrixError(
                message=f"Cannot deserialize matrix {path}: {e}",
                source="MatrixLoader._load_one",
                suggested_action="Provide travelTimes and distances as flat integer arrays.",
            ) from e


def check_transport_costs(problem: Problem, matrices: Sequence[Matrix]) -> None:
    """
    @brief
    Verify that routing matrices can form transport costs for the problem.

    @details
    Every matrix must be a square over the problem's unique locations with
    equally sized travel time, distance and error code arrays. With several
    matrices each must name a distinct fleet profile, and every profile used
    by a vehicle must be covered.

    @raises
        TransportCostError (E0002) on the first inconsistency found.
    """
    if not matrices:
        return

    dimension = len(get_unique_locations(problem))

    # (1) Shape of every matrix
    for index, matrix in enumerate(matrices):
        size = len(matrix.travel_times)
        if size != len(matrix.distances) or (
            matrix.error_codes is not None and size != len(matrix.error_codes)
        ):
            raise TransportCostError(
                message=f"Matrix {index} has arrays of different sizes",
                source="matrix_loader.check_transport_costs",
                suggested_action="Make travelTimes, distances and errorCodes equally long.",
            )
        side = math.isqrt(size)
        if side * side != size or side != dimension:
            raise TransportCostError(
                message=(
                    f"Matrix {index} has {size} entries, expected {dimension * dimension} "
                    f"for {dimension} unique location(s)"
                ),
                source="matrix_loader.check_transport_costs",
                suggested_action="Request the matrix for the problem's unique locations.",
            )

    # (2) Profile coverage
    fleet_profiles = {profile.name for profile in problem.fleet.profiles}
    if len(matrices) == 1 and matrices[0].profile is None:
        return

    named = [matrix.profile for matrix in matrices]
    if any(name is None for name in named) or len(set(named)) != len(named):
        raise TransportCostError(
            message="Multiple matrices need distinct profile names",
            source="matrix_loader.check_transport_costs",
            suggested_action="Set a unique 'profile' on every matrix.",
        )
    unknown = sorted(str(name) for name in set(named) - fleet_profiles)
    if unknown:
        raise TransportCostError(
            message=f"Matrix profile(s) not defined in fleet: {', '.join(unknown)}",
            source="matrix_loader.check_transport_costs",
            suggested_action="Use profile names declared in fleet.profiles.",
        )
    missing = sorted({vehicle.profile for vehicle in problem.fleet.vehicles} - set(named))
    if missing:
        raise TransportCostError(
            message=f"No matrix for vehicle profile(s): {', '.join(missing)}",
            source="matrix_loader.check_transport_costs",
            suggested_action="Provide one matrix per vehicle profile.",
        )


__all__ = ["MatrixLoader", "check_transport_costs"]
