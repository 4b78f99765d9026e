# tests/dataloader/test_matrix_loader.py
import json
from pathlib import Path

import pytest

from vrpcheck.dataloader.matrix_loader import MatrixLoader, check_transport_costs
from vrpcheck.errors import MatrixError, TransportCostError
from vrpcheck.schemas.models import Matrix, Problem

# The shared problem fixture has 5 unique locations.
SIDE = 5


def mk_matrix(profile: str | None = "car", size: int = SIDE * SIDE, **extra) -> Matrix:
    data = {"travelTimes": list(range(size)), "distances": list(range(size)), **extra}
    if profile is not None:
        data["profile"] = profile
    return Matrix.model_validate(data)


# ------------------------------------------------------------------------------
# MatrixLoader
# ------------------------------------------------------------------------------
def test_load_matrices_in_given_order(tmp_path: Path):
    paths = []
    for name in ("car", "truck"):
        path = tmp_path / f"{name}.json"
        path.write_text(
            json.dumps({"profile": name, "travelTimes": [0, 1, 1, 0], "distances": [0, 5, 5, 0]}),
            encoding="utf-8",
        )
        paths.append(path)

    matrices = MatrixLoader().load(paths)

    assert [m.profile for m in matrices] == ["car", "truck"]
    assert matrices[1].distances == [0, 5, 5, 0]


def test_missing_matrix_raises_matrixerror(tmp_path: Path):
    with pytest.raises(MatrixError) as e:
        MatrixLoader().load([tmp_path / "absent.json"])

    assert e.value.code == "E0001"


@pytest.mark.parametrize(
    "text",
    ["not json", json.dumps({"travelTimes": [0]}), json.dumps({"travelTimes": ["a"], "distances": [0]})],
    ids=["syntax", "missing_distances", "wrong_type"],
)
def test_malformed_matrix_raises_matrixerror(tmp_path: Path, text: str):
    path = tmp_path / "matrix.json"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(MatrixError) as e:
        MatrixLoader().load([path])

    assert "Cannot deserialize matrix" in str(e.value)


# ------------------------------------------------------------------------------
# check_transport_costs
# ------------------------------------------------------------------------------
def test_matching_single_matrix_passes(problem_data):
    problem = Problem.model_validate(problem_data)

    check_transport_costs(problem, [mk_matrix()])
    check_transport_costs(problem, [mk_matrix(profile=None)])
    check_transport_costs(problem, [])


def test_several_profiles_each_covered(problem_data):
    problem_data["fleet"]["profiles"].append({"name": "truck", "type": "truck"})
    problem = Problem.model_validate(problem_data)

    check_transport_costs(problem, [mk_matrix("car"), mk_matrix("truck")])


@pytest.mark.parametrize(
    "matrices, fragment",
    [
        ([mk_matrix(size=16)], "expected 25 for 5 unique location(s)"),
        ([mk_matrix(errorCodes=[0])], "arrays of different sizes"),
        ([mk_matrix("car"), mk_matrix("car")], "distinct profile names"),
        ([mk_matrix("car"), mk_matrix(None)], "distinct profile names"),
        ([mk_matrix("bike")], "not defined in fleet: bike"),
    ],
    ids=["wrong_size", "uneven_arrays", "duplicate_profile", "unnamed_profile", "unknown_profile"],
)
def test_inconsistent_matrices_raise(problem_data, matrices, fragment):
    problem = Problem.model_validate(problem_data)

    with pytest.raises(TransportCostError) as e:
        check_transport_costs(problem, matrices)

    assert fragment in str(e.value)
    assert e.value.code == "E0002"


def test_vehicle_profile_without_matrix_raises(problem_data):
    # --- Arrange ---
    problem_data["fleet"]["profiles"].append({"name": "truck", "type": "truck"})
    truck = dict(problem_data["fleet"]["vehicles"][0], typeId="truck", vehicleIds=["t1"])
    truck["profile"] = "truck"
    problem_data["fleet"]["vehicles"].append(truck)
    problem = Problem.model_validate(problem_data)

    # --- Act / Assert ---
    with pytest.raises(TransportCostError) as e:
        check_transport_costs(problem, [mk_matrix("car")])

    assert "No matrix for vehicle profile(s): truck" in str(e.value)
