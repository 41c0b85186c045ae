import json
from typing import Any

import httpx
import pytest

POINT_AREA = json.dumps({"type": "Point", "coordinates": [73.8, 15.5]})
POLYGON_AREA = json.dumps(
    {
        "type": "Polygon",
        "coordinates": [
            [[73.7, 15.2], [74.2, 15.2], [74.2, 15.7], [73.7, 15.7], [73.7, 15.2]]
        ],
    }
)


@pytest.fixture
def sample_alerts() -> list[dict[str, Any]]:
    return [
        {
            "identifier": "1719041234567",
            "severity": "WARNING",
            "disaster_type": "Heavy Rain",
            "area_description": "North Goa",
            "area_json": POLYGON_AREA,
            "effective_start_time": "Sat Jun 22 10:00:00 IST 2024",
        },
        {
            "identifier": "1719041239999",
            "severity": "ALERT",
            "disaster_type": "Thunderstorm",
            "area_description": "Panaji",
            "area_json": POINT_AREA,
            "effective_start_time": "Sat Jun 22 12:00:00 IST 2024",
        },
    ]


@pytest.fixture
def success_payload(sample_alerts: list[dict[str, Any]]) -> dict[str, Any]:
    return {"responseMessage": "Success", "alerts": sample_alerts}


@pytest.fixture
def json_transport():
    """Build a transport that answers every request with ``payload``."""

    def factory(payload: Any, status_code: int = 200) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler)

    return factory
