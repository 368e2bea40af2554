from __future__ import annotations

from datetime import datetime
from typing import TextIO

from core.errors import DeliveryError
from models.message import Message
from models.summary import IncidentUpdate
from notifiers.base import Notifier


def format_timestamp(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S %Z") if value else "unknown"


def _latest(update: IncidentUpdate | None) -> str:
    return f" - {update.body}" if update and update.body else ""


def render_message(message: Message) -> list[str]:
    """Render a change message as human readable lines."""
    lines: list[str] = []

    status = message.changed_status
    if status is not None:
        lines.append(f"Status: {status.indicator} ({status.description})")

    for component in message.changed_components:
        lines.append(
            f"Component {component.name}: {component.status}, "
            f"updated at: {format_timestamp(component.updated_at)}"
        )

    for incident in message.changed_incidents:
        lines.append(
            f"Incident {incident.name}: {incident.status}, "
            f"updated at: {format_timestamp(incident.updated_at)}{_latest(incident.latest_update)}"
        )

    for maintenance in message.changed_scheduled_maintenances:
        lines.append(
            f"Scheduled maintenance {maintenance.name}: {maintenance.status}, "
            f"updated at: {format_timestamp(maintenance.updated_at)}{_latest(maintenance.latest_update)}"
        )

    return lines


class WriterNotifier(Notifier):
    """Writes rendered messages to a text stream.

    Meant as the building block of the stream based notifiers; it is not
    registered on its own.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    @property
    def name(self) -> str:
        return "writer"

    async def notify(self, message: Message) -> None:
        try:
            for line in render_message(message):
                self._stream.write(line + "\n")
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise DeliveryError(f"{self.name}: error while writing message: {exc}") from exc
