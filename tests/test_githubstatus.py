from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from core.errors import FetchError
from models.summary import Indicator
from providers.githubstatus import (
    MAX_RETRIES,
    SUMMARY_ENDPOINT,
    GitHubStatusProvider,
    retry_wait,
)

SUMMARY = {
    "page": {
        "id": "kctbh9vrtdwd",
        "name": "GitHub",
        "url": "https://www.githubstatus.com",
        "updated_at": "2024-05-01T10:15:30.123Z",
    },
    "status": {"indicator": "minor", "description": "Minor Service Outage"},
    "components": [
        {
            "id": "8l4ygp009s5s",
            "name": "Git Operations",
            "status": "operational",
            "created_at": "2017-01-31T20:05:05.370Z",
            "updated_at": "2024-05-01T09:00:00Z",
            "position": 1,
            "description": "Performance of git clones, pulls, pushes",
            "showcase": False,
            "start_date": None,
            "group_id": None,
            "page_id": "kctbh9vrtdwd",
            "group": False,
            "only_show_if_degraded": False,
        },
    ],
    "incidents": [
        {
            "id": "inc1",
            "name": "Incident with Actions",
            "status": "investigating",
            "impact": "minor",
            "created_at": "2024-05-01T10:00:00Z",
            "updated_at": "2024-05-01T10:15:00Z",
            "monitoring_at": None,
            "resolved_at": None,
            "shortlink": "https://stspg.io/x",
            "page_id": "kctbh9vrtdwd",
            "incident_updates": [
                {
                    "id": "u2",
                    "incident_id": "inc1",
                    "status": "investigating",
                    "body": "We are investigating reports of degraded performance.",
                    "created_at": "2024-05-01T10:15:00Z",
                    "updated_at": "2024-05-01T10:15:00Z",
                    "display_at": "2024-05-01T10:15:00Z",
                },
            ],
        },
    ],
    "scheduled_maintenances": [],
}


def _provider(handler, **kwargs) -> tuple[GitHubStatusProvider, list[float]]:
    sleeps: list[float] = []

    async def sleep(seconds: float) -> None:
        sleeps.append(seconds)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubStatusProvider(client, "https://status.test", sleep=sleep, **kwargs), sleeps


@pytest.mark.asyncio
async def test_fetch_summary_decodes_snapshot() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == SUMMARY_ENDPOINT
        return httpx.Response(200, json=SUMMARY)

    provider, _ = _provider(handler)
    summary = await provider.fetch_summary()

    assert summary.page_updated_at == datetime(2024, 5, 1, 10, 15, 30, 123000, tzinfo=timezone.utc)
    assert summary.status.indicator == Indicator.MINOR
    assert [c.name for c in summary.components] == ["Git Operations"]
    assert summary.components[0].group_id == ""
    incident = summary.incidents[0]
    assert incident.resolved_at is None
    assert incident.latest_update is not None
    assert incident.latest_update.body.startswith("We are investigating")
    assert summary.scheduled_maintenances == ()


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("fetch_status", "/api/v2/status.json"),
        ("fetch_components", "/api/v2/components.json"),
        ("fetch_unresolved_incidents", "/api/v2/incidents/unresolved.json"),
        ("fetch_all_incidents", "/api/v2/incidents.json"),
        ("fetch_upcoming_scheduled_maintenances", "/api/v2/scheduled-maintenances/upcoming.json"),
        ("fetch_active_scheduled_maintenances", "/api/v2/scheduled-maintenances/active.json"),
        ("fetch_all_scheduled_maintenances", "/api/v2/scheduled-maintenances.json"),
    ],
)
@pytest.mark.asyncio
async def test_endpoints(method: str, path: str) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=SUMMARY)

    provider, _ = _provider(handler)
    resp = await getattr(provider, method)()

    assert seen == [path]
    assert resp.page.name == "GitHub"


@pytest.mark.asyncio
async def test_retries_server_errors() -> None:
    responses = [httpx.Response(503), httpx.Response(429), httpx.Response(200, json=SUMMARY)]

    provider, sleeps = _provider(lambda r: responses.pop(0))
    summary = await provider.fetch_summary()

    assert summary.status.description == "Minor Service Outage"
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_gives_up_after_max_retries() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    provider, sleeps = _provider(handler)
    with pytest.raises(FetchError, match="connection refused"):
        await provider.fetch_summary()

    assert calls == MAX_RETRIES + 1
    assert sleeps == [retry_wait(i) for i in range(MAX_RETRIES)]
    assert max(sleeps) == 5.0


@pytest.mark.asyncio
async def test_client_error_is_not_retried() -> None:
    provider, sleeps = _provider(lambda r: httpx.Response(404))

    with pytest.raises(FetchError, match="HTTP 404"):
        await provider.fetch_summary()
    assert sleeps == []


@pytest.mark.asyncio
async def test_malformed_body() -> None:
    provider, _ = _provider(lambda r: httpx.Response(200, text="<html>"))

    with pytest.raises(FetchError, match="error decoding"):
        await provider.fetch_summary()


@pytest.mark.asyncio
async def test_bad_timestamp() -> None:
    body = {"page": {"updated_at": "yesterday"}}
    provider, _ = _provider(lambda r: httpx.Response(200, json=body))

    with pytest.raises(FetchError):
        await provider.fetch_summary()
