from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

from core.errors import FetchError
from models.summary import (
    ComponentsResponse,
    IncidentsResponse,
    ScheduledMaintenancesResponse,
    Snapshot,
    StatusResponse,
)
from providers.base import SummarySource

GITHUB_STATUS_URL = "https://www.githubstatus.com"

SUMMARY_ENDPOINT = "/api/v2/summary.json"
STATUS_ENDPOINT = "/api/v2/status.json"
COMPONENTS_ENDPOINT = "/api/v2/components.json"
UNRESOLVED_INCIDENTS_ENDPOINT = "/api/v2/incidents/unresolved.json"
ALL_INCIDENTS_ENDPOINT = "/api/v2/incidents.json"
UPCOMING_SCHEDULED_MAINTENANCES_ENDPOINT = "/api/v2/scheduled-maintenances/upcoming.json"
ACTIVE_SCHEDULED_MAINTENANCES_ENDPOINT = "/api/v2/scheduled-maintenances/active.json"
ALL_SCHEDULED_MAINTENANCES_ENDPOINT = "/api/v2/scheduled-maintenances.json"

REQUEST_TIMEOUT_SECONDS = 5.0
MAX_RETRIES = 5
RETRY_WAIT_MIN = 1.0
RETRY_WAIT_MAX = 5.0

log = logging.getLogger(__name__)

R = TypeVar("R")


def _should_retry(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def retry_wait(attempt: int) -> float:
    """Exponential backoff between ``RETRY_WAIT_MIN`` and ``RETRY_WAIT_MAX``."""
    return min(RETRY_WAIT_MIN * (2 ** attempt), RETRY_WAIT_MAX)


class GitHubStatusProvider(SummarySource):
    """Client for the GitHub Status (Statuspage v2) JSON API.

    Transport errors, 429 and 5xx responses are retried up to
    ``MAX_RETRIES`` times with exponential backoff. Anything else that is not
    a 200 with a decodable JSON body raises ``FetchError``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = GITHUB_STATUS_URL,
        *,
        max_retries: int = MAX_RETRIES,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "GitHub"

    async def fetch_summary(self) -> Snapshot:
        return await self._get(SUMMARY_ENDPOINT, Snapshot.from_dict)

    async def fetch_status(self) -> StatusResponse:
        return await self._get(STATUS_ENDPOINT, StatusResponse.from_dict)

    async def fetch_components(self) -> ComponentsResponse:
        return await self._get(COMPONENTS_ENDPOINT, ComponentsResponse.from_dict)

    async def fetch_unresolved_incidents(self) -> IncidentsResponse:
        return await self._get(UNRESOLVED_INCIDENTS_ENDPOINT, IncidentsResponse.from_dict)

    async def fetch_all_incidents(self) -> IncidentsResponse:
        return await self._get(ALL_INCIDENTS_ENDPOINT, IncidentsResponse.from_dict)

    async def fetch_upcoming_scheduled_maintenances(self) -> ScheduledMaintenancesResponse:
        return await self._get(
            UPCOMING_SCHEDULED_MAINTENANCES_ENDPOINT, ScheduledMaintenancesResponse.from_dict
        )

    async def fetch_active_scheduled_maintenances(self) -> ScheduledMaintenancesResponse:
        return await self._get(
            ACTIVE_SCHEDULED_MAINTENANCES_ENDPOINT, ScheduledMaintenancesResponse.from_dict
        )

    async def fetch_all_scheduled_maintenances(self) -> ScheduledMaintenancesResponse:
        return await self._get(
            ALL_SCHEDULED_MAINTENANCES_ENDPOINT, ScheduledMaintenancesResponse.from_dict
        )

    async def _get(self, endpoint: str, decode: Callable[[dict[str, Any]], R]) -> R:
        url = f"{self._base_url}{endpoint}"
        resp = await self._request(url)

        if resp.status_code != 200:
            raise FetchError(f"GET {url} returned HTTP {resp.status_code}")

        try:
            data = resp.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return decode(data)
        except (ValueError, TypeError, KeyError) as exc:
            raise FetchError(f"error decoding {url}: {exc}") from exc

    async def _request(self, url: str) -> httpx.Response:
        attempt = 0
        while True:
            try:
                resp = await self._client.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
            except httpx.HTTPError as exc:
                if attempt >= self._max_retries:
                    raise FetchError(f"GET {url} failed: {exc}") from exc
                log.debug("[%s] HTTP error on %s: %s, retrying", self.name, url, exc)
            else:
                if not _should_retry(resp.status_code) or attempt >= self._max_retries:
                    return resp
                log.debug(
                    "[%s] %s returned %d, retrying", self.name, url, resp.status_code
                )

            await self._sleep(retry_wait(attempt))
            attempt += 1
