"""Fetch, validate, transform and persist the alert cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from .alerts import build_feature_collection, parse_envelope
from .cache import write_feature_collection
from .fetcher import AlertApiClient
from .reporting import RunReporter
from .settings import Settings

LOGGER = logging.getLogger(__name__)


@dataclass
class CacheResult:
    path: Path
    count: int
    bytes_written: int


async def fetch_and_cache(
    settings: Settings,
    reporter: RunReporter | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CacheResult:
    """Run one fetch-and-cache cycle.

    Raises an :class:`~sachetfeed.alerts.AlertCacheError` subclass on any
    failure. The cache file is only touched once every alert has been
    converted, so a failed run leaves the previous cache in place.
    """
    reporter = reporter or RunReporter()

    url = settings.alert_url
    LOGGER.info("Fetching data from %s", url)
    client = AlertApiClient(
        url,
        timeout_seconds=settings.request_timeout_seconds,
        transport=transport,
    )
    fetched = await client.fetch()
    reporter.record_fetch(fetched.url, fetched.status_code)

    alerts = parse_envelope(fetched.payload)
    LOGGER.info("Received %s alerts", len(alerts))

    collection = build_feature_collection(alerts, source=settings.source_name)
    reporter.record_collection(collection)
    LOGGER.info("Converted %s alerts to GeoJSON features", collection["metadata"]["count"])

    path = settings.cache_path
    bytes_written = write_feature_collection(path, collection)
    reporter.record_write(path, bytes_written)
    LOGGER.info("Data successfully cached to %s", path)

    return CacheResult(
        path=path,
        count=collection["metadata"]["count"],
        bytes_written=bytes_written,
    )
