from __future__ import annotations

import logging
from typing import Any

import httpx

from core.errors import CleanupError, ConfigurationError, DeliveryError
from models.message import Message
from models.summary import ComponentStatus, IncidentStatus, Indicator, ScheduledMaintenanceStatus
from notifiers.base import Notifier
from notifiers.settings import NotifierSettings
from notifiers.writer import format_timestamp

SLACK = "slack"
SLACK_API_URL = "https://slack.com/api"

GOOD_EMOJI = ":white_check_mark:"
BAD_EMOJI = ":warning:"
INFO_EMOJI = ":information_source:"

_TIMEOUT_SECONDS = 15.0

log = logging.getLogger(__name__)


def _header(text: str) -> dict[str, Any]:
    return {"type": "header", "text": {"type": "plain_text", "text": text}}


def _section(text: str, block_id: str, *, markdown: bool = True) -> dict[str, Any]:
    return {
        "type": "section",
        "block_id": block_id,
        "text": {"type": "mrkdwn" if markdown else "plain_text", "text": text},
    }


def _status_blocks(message: Message) -> list[dict[str, Any]]:
    status = message.changed_status
    if status is None:
        return []
    if status.indicator == Indicator.NONE:
        text = f"{GOOD_EMOJI} Github reports no outages"
    else:
        text = f"{BAD_EMOJI} Github is reporting a *{status.indicator}* outage"
    if status.description:
        text += f": {status.description}"
    return [_header("Status"), _section(text, "status")]


def _component_blocks(message: Message) -> list[dict[str, Any]]:
    if not message.changed_components:
        return []
    blocks = [_header("Components")]
    for component in message.changed_components:
        if component.status == ComponentStatus.OPERATIONAL:
            text = f"{GOOD_EMOJI} {component.name} is operational"
        else:
            text = f"{BAD_EMOJI} {component.name} is reporting {component.status}"
        text += f", updated at {format_timestamp(component.updated_at)}"
        blocks.append(_section(text, f"component-{component.name}"))
    return blocks


_INCIDENT_TEMPLATES = {
    IncidentStatus.INVESTIGATING.value: (BAD_EMOJI, '"{name}" is being investigated'),
    IncidentStatus.IDENTIFIED.value: (INFO_EMOJI, 'The cause of "{name}" has been identified'),
    IncidentStatus.MONITORING.value: (INFO_EMOJI, '"{name}" is being monitored'),
    IncidentStatus.RESOLVED.value: (GOOD_EMOJI, '"{name}" has been resolved'),
    IncidentStatus.POSTMORTEM.value: (GOOD_EMOJI, '"{name}" has a postmortem'),
}

_MAINTENANCE_TEMPLATES = {
    ScheduledMaintenanceStatus.SCHEDULED.value: '"{name}" is scheduled',
    ScheduledMaintenanceStatus.IN_PROGRESS.value: '"{name}" is in progress',
    ScheduledMaintenanceStatus.VERIFYING.value: '"{name}" is being verified',
    ScheduledMaintenanceStatus.COMPLETED.value: '"{name}" is completed',
}


def _incident_blocks(message: Message) -> list[dict[str, Any]]:
    if not message.changed_incidents:
        return []
    blocks = [_header("Incidents")]
    for incident in message.changed_incidents:
        emoji, template = _INCIDENT_TEMPLATES.get(
            incident.status, (INFO_EMOJI, '"{name}" has status {status}')
        )
        text = f"{emoji} " + template.format(name=incident.name, status=incident.status)
        text += f" (impact {incident.impact}), updated at {format_timestamp(incident.updated_at)}"
        if incident.latest_update is not None:
            text += f": {incident.latest_update.body}"
        blocks.append(_section(text, f"incident-{incident.id}"))
    return blocks


def _maintenance_blocks(message: Message) -> list[dict[str, Any]]:
    if not message.changed_scheduled_maintenances:
        return []
    blocks = [_header("Scheduled Maintenances")]
    for maintenance in message.changed_scheduled_maintenances:
        template = _MAINTENANCE_TEMPLATES.get(maintenance.status, '"{name}" has status {status}')
        text = f"{INFO_EMOJI} " + template.format(name=maintenance.name, status=maintenance.status)
        text += (
            f" (expected impact {maintenance.impact}),"
            f" updated at {format_timestamp(maintenance.updated_at)}"
        )
        if maintenance.latest_update is not None:
            text += f": {maintenance.latest_update.body}"
        blocks.append(
            _section(text, f"scheduled-maintenance-{maintenance.id}", markdown=False)
        )
    return blocks


def build_blocks(message: Message) -> list[dict[str, Any]]:
    """Translate a change message into Slack Block Kit blocks."""
    return [
        *_status_blocks(message),
        *_component_blocks(message),
        *_incident_blocks(message),
        *_maintenance_blocks(message),
    ]


class SlackNotifier(Notifier):
    """Posts change messages to a Slack channel through the Web API.

    A channel given as ``#name`` is resolved to its ID through
    ``conversations.list`` the first time a message is sent, and joined first
    when ``join_channel`` is set.
    """

    def __init__(
        self,
        token: str,
        channel: str,
        *,
        join_channel: bool = False,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not token:
            raise ConfigurationError("OAuth token must be supplied for the Slack notifier")
        if not channel:
            raise ConfigurationError("channel must be supplied for the Slack notifier")

        self._token = token
        self._channel = channel
        self._channel_id: str | None = None if channel.startswith("#") else channel
        self._join_channel = join_channel
        self._joined = False
        self._client = client or httpx.AsyncClient(
            base_url=SLACK_API_URL, timeout=_TIMEOUT_SECONDS
        )

    @classmethod
    def from_settings(cls, settings: NotifierSettings) -> SlackNotifier:
        return cls(
            settings.slack_oauth_token,
            settings.slack_channel,
            join_channel=settings.slack_join_channel,
        )

    @property
    def name(self) -> str:
        return SLACK

    async def notify(self, message: Message) -> None:
        blocks = build_blocks(message)
        if not blocks:
            log.debug("Slack notifier found no changes.")
            return

        channel_id = await self._ensure_channel()
        await self._call("chat.postMessage", json={"channel": channel_id, "blocks": blocks})
        log.debug("Slack notified of %d block(s).", len(blocks))

    async def cleanup(self) -> None:
        try:
            await self._client.aclose()
        except httpx.HTTPError as exc:
            raise CleanupError(f"error closing Slack client: {exc}") from exc

    async def _ensure_channel(self) -> str:
        if self._channel_id is None:
            self._channel_id = await self._find_channel(self._channel.removeprefix("#"))

        if self._join_channel and not self._joined:
            await self._call("conversations.join", json={"channel": self._channel_id})
            self._joined = True

        return self._channel_id

    async def _find_channel(self, channel_name: str) -> str:
        cursor = ""
        while True:
            params = {"cursor": cursor} if cursor else {}
            data = await self._call("conversations.list", params=params)
            for conversation in data.get("channels") or ():
                if conversation.get("name") == channel_name:
                    return str(conversation["id"])
            cursor = (data.get("response_metadata") or {}).get("next_cursor") or ""
            if not cursor:
                raise DeliveryError(f"unable to find Slack channel #{channel_name}")

    async def _call(
        self,
        method: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            if json is None:
                resp = await self._client.get(f"/{method}", params=params, headers=headers)
            else:
                resp = await self._client.post(f"/{method}", json=json, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise DeliveryError(f"slack {method} failed: {exc}") from exc

        if not data.get("ok"):
            raise DeliveryError(f"slack {method} failed: {data.get('error', 'unknown error')}")
        return data
