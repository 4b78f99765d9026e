import pytest
from pydantic import ValidationError

from vrpcheck.schemas.models import Config, Matrix, Problem, Relation, SolverConfig, VehicleType


def test_problem_model_aliases(problem_data):
    problem = Problem.model_validate(problem_data)

    vehicle = problem.fleet.vehicles[0]
    assert vehicle.type_id == "vehicle"
    assert vehicle.vehicle_ids == ["vehicle_1", "vehicle_2"]
    assert vehicle.costs.fixed == pytest.approx(22.0)

    dumped = problem.model_dump(by_alias=True, exclude_none=True)
    assert dumped["fleet"]["vehicles"][0]["typeId"] == "vehicle"
    assert dumped["plan"]["relations"][0]["vehicleId"] == "vehicle_1"


def test_problem_snapshot_is_frozen(problem_data):
    problem = Problem.model_validate(problem_data)

    with pytest.raises(ValidationError):
        problem.plan.jobs[0].id = "other"


def test_population_by_field_name():
    relation = Relation(type="any", jobs=["job1"], vehicle_id="v1", shift_index=0)

    assert relation.vehicle_id == "v1"
    assert relation.shift_index == 0


def test_unknown_fields_are_rejected(problem_data):
    problem_data["fleet"]["vehicles"][0]["color"] = "red"

    with pytest.raises(ValidationError):
        VehicleType.model_validate(problem_data["fleet"]["vehicles"][0])


def test_matrix_aliases():
    matrix = Matrix.model_validate(
        {"profile": "car", "travelTimes": [0, 1, 1, 0], "distances": [0, 2, 2, 0], "errorCodes": [0, 0, 0, 0]}
    )

    assert matrix.travel_times == [0, 1, 1, 0]
    assert matrix.error_codes == [0, 0, 0, 0]


def test_config_and_solver_defaults():
    cfg = Config()
    assert isinstance(cfg.solver, SolverConfig)
    assert cfg.output_dir == "data/output"
    assert cfg.validation.write_report is True
    assert cfg.validation.parallel is False
    assert cfg.solver.termination.max_generations == 3000

    data = cfg.model_dump()
    assert "solver" in data
    assert "validation" in data


def test_problem_schema_uses_aliases():
    schema = Problem.model_json_schema(by_alias=True)

    assert isinstance(schema, dict)
    assert "typeId" in schema["$defs"]["VehicleType"]["properties"]
