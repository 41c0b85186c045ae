"""Alert envelope validation and GeoJSON normalisation utilities."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

SUCCESS_MESSAGE = "Success"
GEOMETRY_FIELD = "area_json"


class AlertCacheError(RuntimeError):
    """Base class for every failure that aborts a cache run."""


class FetchError(AlertCacheError):
    """The alert API could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EnvelopeError(AlertCacheError):
    """The response body is not a successful alert envelope."""


class ParseError(AlertCacheError):
    """The response body or one of its alert records could not be decoded."""


class AlertEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    response_message: str | None = Field(default=None, alias="responseMessage")
    alerts: list[Any] | None = None


def reject_non_finite(token: str) -> Any:
    """``parse_constant`` hook: ``NaN`` and ``Infinity`` are not JSON."""
    raise ValueError(f"{token} is not a valid JSON value")


def parse_envelope(payload: Any) -> list[Any]:
    """Return the raw alert records of a successful response payload."""
    if not isinstance(payload, Mapping):
        raise EnvelopeError(
            f"Expected a JSON object from the alert API, got {type(payload).__name__}"
        )

    try:
        envelope = AlertEnvelope.model_validate(dict(payload))
    except ValidationError as exc:
        raise EnvelopeError(f"API response has an unexpected shape: {exc}") from exc
    if envelope.response_message != SUCCESS_MESSAGE:
        raise EnvelopeError(
            f"API returned unsuccessful response: {envelope.response_message!r}"
        )
    if not isinstance(envelope.alerts, list):
        raise EnvelopeError("API response does not contain an 'alerts' list")
    return envelope.alerts


def alert_to_feature(record: Any, index: int = 0) -> dict[str, Any]:
    """Reproject one alert record into a GeoJSON Feature.

    ``area_json`` is decoded into the feature geometry; every other field is
    carried over unchanged, in the order the API returned it.
    """
    if not isinstance(record, Mapping):
        raise ParseError(f"Alert #{index} is not a JSON object")

    raw_geometry = record.get(GEOMETRY_FIELD)
    if not isinstance(raw_geometry, str):
        raise ParseError(f"Alert #{index} has no {GEOMETRY_FIELD} string")
    try:
        geometry = json.loads(raw_geometry, parse_constant=reject_non_finite)
    except ValueError as exc:
        raise ParseError(f"Alert #{index} has malformed {GEOMETRY_FIELD}: {exc}") from exc

    properties = {key: value for key, value in record.items() if key != GEOMETRY_FIELD}
    return {"type": "Feature", "properties": properties, "geometry": geometry}


def build_feature_collection(
    alerts: Sequence[Any],
    source: str,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    features = [alert_to_feature(record, index) for index, record in enumerate(alerts)]
    return {
        "type": "FeatureCollection",
        "metadata": {
            "timestamp": _format_timestamp(timestamp or datetime.now(timezone.utc)),
            "source": source,
            "count": len(features),
        },
        "features": features,
    }


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
