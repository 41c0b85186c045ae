"""HTTP client for the SACHET location-wise alert endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .alerts import FetchError, ParseError, reject_non_finite

LOGGER = logging.getLogger(__name__)


@dataclass
class FetchResult:
    url: str
    status_code: int
    payload: Any


class AlertApiClient:
    """Fetch the alert envelope with a single GET request."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {}
        if self.timeout_seconds is not None:
            kwargs["timeout"] = self.timeout_seconds
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.AsyncClient(**kwargs)

    async def fetch(self) -> FetchResult:
        async with self._client() as client:
            try:
                response = await client.get(self.url)
            except httpx.HTTPError as exc:
                raise FetchError(f"Request to {self.url} failed: {exc}") from exc

        LOGGER.info("Received HTTP %s from alert API", response.status_code)
        if not response.is_success:
            raise FetchError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json(parse_constant=reject_non_finite)
        except ValueError as exc:
            raise ParseError(f"Alert API returned invalid JSON: {exc}") from exc
        return FetchResult(url=self.url, status_code=response.status_code, payload=payload)
