"""Run reporting helpers."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pyproj import Geod
from shapely.errors import ShapelyError
from shapely.geometry import shape

GEOD = Geod(ellps="WGS84")
LOGGER = logging.getLogger(__name__)


@dataclass
class RunReporter:
    run_id: str | None = None
    started_at: float = field(default=0.0, init=False)
    finished_at: float = field(default=0.0, init=False)
    status: str = field(default="pending", init=False)
    steps: dict[str, Any] = field(default_factory=dict, init=False)

    def start_run(self) -> None:
        self.run_id = self.run_id or uuid.uuid4().hex
        self.started_at = time.time()
        self.status = "running"

    def record_fetch(self, url: str, status_code: int) -> None:
        self.steps["fetch"] = {"url": url, "status_code": status_code}

    def record_collection(self, collection: dict[str, Any]) -> None:
        features = collection.get("features", [])
        areas = [_area_km2(feature.get("geometry")) for feature in features]
        known = [area for area in areas if area is not None]
        self.steps["collection"] = {
            "count": collection.get("metadata", {}).get("count", len(features)),
            "timestamp": collection.get("metadata", {}).get("timestamp"),
            "area_km2": round(sum(known), 2) if known else None,
        }

    def record_write(self, path: Path, bytes_written: int) -> None:
        self.steps["write"] = {"path": str(path), "bytes_written": bytes_written}

    def finish_run(self, status: str = "succeeded") -> None:
        self.finished_at = time.time()
        self.status = status

    def summary(self) -> dict[str, Any]:
        if self.finished_at and self.started_at:
            duration = self.finished_at - self.started_at
        else:
            duration = 0.0
        return {
            "run_id": self.run_id,
            "status": self.status,
            "duration_seconds": round(duration, 2),
            "steps": self.steps,
        }


def _area_km2(geometry: dict[str, Any] | None) -> float | None:
    if not geometry:
        return None
    try:
        geom = shape(geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, AttributeError) as exc:
        LOGGER.warning("Could not measure alert geometry: %s", exc)
        return None
    area, _ = GEOD.geometry_area_perimeter(geom)
    return round(abs(area) / 1_000_000, 2)
