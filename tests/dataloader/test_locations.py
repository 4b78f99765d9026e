# tests/dataloader/test_locations.py
from vrpcheck.dataloader.locations import get_unique_locations
from vrpcheck.schemas.models import Problem


def _coords(locations):
    return [(loc.lat, loc.lng) for loc in locations]


def test_unique_locations_jobs_first_then_fleet(problem_data):
    """
    @brief
    Locations are deduplicated in first-seen order.

    @details
    Job places come first (pickups, deliveries, replacements, services per job),
    followed by vehicle shift start, end, break and reload locations.
    """
    locations = get_unique_locations(Problem.model_validate(problem_data))

    assert _coords(locations) == [
        (52.1, 13.1),
        (52.2, 13.2),
        (52.3, 13.3),
        (52.4, 13.4),
        (52.5, 13.5),
    ]


def test_break_locations_and_repeated_places(problem_data):
    # --- Arrange ---
    shift = problem_data["fleet"]["vehicles"][0]["shifts"][0]
    shift["breaks"][0]["locations"] = [{"lat": 52.6, "lng": 13.6}, {"lat": 52.1, "lng": 13.1}]
    shift["end"]["location"] = {"lat": 52.7, "lng": 13.7}
    problem_data["plan"]["jobs"][2]["services"][0]["places"][0]["location"] = {
        "lat": 52.2,
        "lng": 13.2,
    }

    # --- Act ---
    locations = get_unique_locations(Problem.model_validate(problem_data))

    # --- Assert ---
    assert _coords(locations) == [
        (52.1, 13.1),
        (52.2, 13.2),
        (52.3, 13.3),
        (52.5, 13.5),
        (52.7, 13.7),
        (52.6, 13.6),
    ]


def test_job_places_follow_task_category_order(problem_data):
    """
    @brief
    Within a job, places are listed pickups, deliveries, replacements, services.
    """
    # --- Arrange ---
    job = problem_data["plan"]["jobs"][2]
    job["replacements"] = [
        {"places": [{"location": {"lat": 52.8, "lng": 13.8}, "duration": 60}], "demand": [1]}
    ]

    # --- Act ---
    locations = get_unique_locations(Problem.model_validate(problem_data))

    # --- Assert ---
    assert _coords(locations)[3:5] == [(52.8, 13.8), (52.4, 13.4)]
