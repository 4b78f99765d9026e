import copy
import sys
from pathlib import Path
from typing import Any

import pytest

# (1) Add repository root to sys.path to enable absolute imports
#     The root directory contains scripts/ and src/.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DEPOT = {"lat": 52.5, "lng": 13.5}

# Minimal valid pragmatic problem with 5 unique locations (4 job places + depot).
_VALID_PROBLEM: dict[str, Any] = {
    "plan": {
        "jobs": [
            {
                "id": "job1",
                "deliveries": [
                    {
                        "places": [
                            {
                                "location": {"lat": 52.1, "lng": 13.1},
                                "duration": 300,
                                "times": [["2020-07-04T09:00:00Z", "2020-07-04T12:00:00Z"]],
                            }
                        ],
                        "demand": [1],
                    }
                ],
            },
            {
                "id": "job2",
                "pickups": [
                    {"places": [{"location": {"lat": 52.2, "lng": 13.2}, "duration": 120}], "demand": [2]}
                ],
                "deliveries": [
                    {"places": [{"location": {"lat": 52.3, "lng": 13.3}, "duration": 120}], "demand": [2]}
                ],
            },
            {
                "id": "job3",
                "services": [{"places": [{"location": {"lat": 52.4, "lng": 13.4}, "duration": 600}]}],
            },
        ],
        "relations": [{"type": "strict", "jobs": ["departure", "job1"], "vehicleId": "vehicle_1"}],
    },
    "fleet": {
        "vehicles": [
            {
                "typeId": "vehicle",
                "vehicleIds": ["vehicle_1", "vehicle_2"],
                "profile": "car",
                "costs": {"fixed": 22.0, "distance": 0.0002, "time": 0.004806},
                "shifts": [
                    {
                        "start": {"earliest": "2020-07-04T08:00:00Z", "location": DEPOT},
                        "end": {"latest": "2020-07-04T18:00:00Z", "location": DEPOT},
                        "breaks": [
                            {"times": [["2020-07-04T12:00:00Z", "2020-07-04T14:00:00Z"]], "duration": 1800}
                        ],
                        "reloads": [
                            {
                                "location": DEPOT,
                                "duration": 900,
                                "times": [["2020-07-04T10:00:00Z", "2020-07-04T16:00:00Z"]],
                            }
                        ],
                    }
                ],
                "capacity": [10],
            }
        ],
        "profiles": [{"name": "car", "type": "car"}],
    },
    "objectives": {
        "primary": [{"type": "minimize-unassigned"}, {"type": "minimize-cost"}],
        "secondary": [{"type": "minimize-tours"}],
    },
}


@pytest.fixture()
def problem_data() -> dict[str, Any]:
    """Fresh copy of a valid pragmatic problem document."""
    return copy.deepcopy(_VALID_PROBLEM)
