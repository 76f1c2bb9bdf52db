"""Open-Elevation adapter for ElevationRepository.

Queries `GET {base_url}/api/v1/lookup?locations=<lat>,<lon>` and reads
`results[0].elevation` from the JSON body.

Failure translation:
- Transport errors and 5xx responses are retried with exponential backoff,
  then raised as ElevationUnavailableError
- Other HTTP errors and malformed payloads raise ElevationUnavailableError
  immediately
- A well-formed payload without an elevation value returns None
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Any

import httpx

from domain.terrain.errors import ElevationUnavailableError

logger = logging.getLogger(__name__)

LOOKUP_PATH = "/api/v1/lookup"


def _is_retryable(error: httpx.HTTPError) -> bool:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, httpx.TransportError)


def parse_lookup_payload(payload: Any) -> float | None:
    """Extract results[0].elevation from an Open-Elevation response body.

    Returns None when the point has no elevation value.

    Raises:
        ValueError: If the payload does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise ValueError("payload is not a JSON object")
    results = payload.get("results")
    if not isinstance(results, list):
        raise ValueError("payload has no 'results' list")
    if not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        raise ValueError("results[0] is not an object")
    elevation = first.get("elevation")
    if elevation is None:
        return None
    if isinstance(elevation, bool) or not isinstance(elevation, (int, float)):
        raise ValueError(f"elevation is not numeric: {elevation!r}")
    value = float(elevation)
    if not math.isfinite(value):
        return None
    return value


class OpenElevationClient:
    """HTTP client for the Open-Elevation lookup API (sync and async).

    Parameters
    ----------
    base_url: str
        Service root, e.g. https://api.open-elevation.com
    timeout_s: float
        Per-request timeout.
    retries: int
        Extra attempts after a retryable failure.
    backoff_s: float
        Delay before retry n is backoff_s * 2**n.
    client / async_client:
        Optional pre-built httpx clients (connection reuse, tests with
        httpx.MockTransport). When omitted a short-lived client is opened per
        lookup.
    """

    def __init__(
        self,
        base_url: str = "https://api.open-elevation.com",
        timeout_s: float = 10.0,
        retries: int = 2,
        backoff_s: float = 0.5,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout_s)
        self.retries = retries
        self.backoff_s = backoff_s
        self._client = client
        self._async_client = async_client

    def _request_args(
        self, latitude: float, longitude: float
    ) -> tuple[str, dict[str, str]]:
        url = f"{self.base_url}{LOOKUP_PATH}"
        return url, {"locations": f"{latitude},{longitude}"}

    def _parse(
        self, response: httpx.Response, latitude: float, longitude: float
    ) -> float | None:
        try:
            return parse_lookup_payload(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError as well
            raise ElevationUnavailableError(
                latitude, longitude, f"malformed response: {e}"
            ) from e

    def _give_up(self, error: httpx.HTTPError, attempt: int) -> bool:
        if not _is_retryable(error) or attempt >= self.retries:
            return True
        logger.debug(
            "Elevation lookup attempt %d failed (%s); retrying", attempt + 1, error
        )
        return False

    # -----------------------------------------------------------------------
    # ElevationRepository
    # -----------------------------------------------------------------------
    def get_elevation(self, latitude: float, longitude: float) -> float | None:
        url, params = self._request_args(latitude, longitude)
        attempt = 0
        while True:
            try:
                if self._client is not None:
                    response = self._client.get(url, params=params)
                else:
                    with httpx.Client(timeout=self.timeout) as client:
                        response = client.get(url, params=params)
                response.raise_for_status()
                return self._parse(response, latitude, longitude)
            except httpx.HTTPError as e:
                if self._give_up(e, attempt):
                    raise ElevationUnavailableError(latitude, longitude, str(e)) from e
            time.sleep(self.backoff_s * (2**attempt))
            attempt += 1

    # -----------------------------------------------------------------------
    # AsyncElevationRepository
    # -----------------------------------------------------------------------
    async def get_elevation_async(
        self, latitude: float, longitude: float
    ) -> float | None:
        url, params = self._request_args(latitude, longitude)
        attempt = 0
        while True:
            try:
                if self._async_client is not None:
                    response = await self._async_client.get(url, params=params)
                else:
                    async with httpx.AsyncClient(timeout=self.timeout) as client:
                        response = await client.get(url, params=params)
                response.raise_for_status()
                return self._parse(response, latitude, longitude)
            except httpx.HTTPError as e:
                if self._give_up(e, attempt):
                    raise ElevationUnavailableError(latitude, longitude, str(e)) from e
            await asyncio.sleep(self.backoff_s * (2**attempt))
            attempt += 1
