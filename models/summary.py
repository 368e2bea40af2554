from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Indicator(str, Enum):
    """Severity of the overall status or of an incident's impact."""

    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class ComponentStatus(str, Enum):
    OPERATIONAL = "operational"
    DEGRADED_PERFORMANCE = "degraded_performance"
    PARTIAL_OUTAGE = "partial_outage"
    MAJOR_OUTAGE = "major_outage"


class IncidentStatus(str, Enum):
    INVESTIGATING = "investigating"
    IDENTIFIED = "identified"
    MONITORING = "monitoring"
    RESOLVED = "resolved"
    POSTMORTEM = "postmortem"


class ScheduledMaintenanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    VERIFYING = "verifying"
    COMPLETED = "completed"


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse ISO 8601 timestamps that may include fractional seconds.

    ``None`` and empty strings map to ``None`` (the unset timestamp).
    """
    if not raw:
        return None
    cleaned = raw.replace("Z", "+00:00")
    return datetime.fromisoformat(cleaned).astimezone(timezone.utc)


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Page:
    """Metadata of the status page a response was read from."""

    id: str = ""
    name: str = ""
    url: str = ""
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Page:
        data = data or {}
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            url=_str(data, "url"),
            updated_at=parse_timestamp(data.get("updated_at")),
        )


@dataclass(frozen=True)
class Status:
    """Overall status of the page. Compared by value on both fields."""

    indicator: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Status:
        data = data or {}
        return cls(
            indicator=_str(data, "indicator"),
            description=_str(data, "description"),
        )


@dataclass(frozen=True)
class Component:
    """A component and its current status.

    The feed does not guarantee stable component IDs, so ``name`` is the
    identity key used for change detection.
    """

    name: str
    status: str = ""
    updated_at: datetime | None = None
    created_at: datetime | None = None
    description: str = ""
    group: bool = False
    group_id: str = ""
    only_show_if_degraded: bool = False
    page_id: str = ""
    position: int = 0
    showcase: bool = False
    start_date: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Component:
        return cls(
            name=_str(data, "name"),
            status=_str(data, "status"),
            updated_at=parse_timestamp(data.get("updated_at")),
            created_at=parse_timestamp(data.get("created_at")),
            description=_str(data, "description"),
            group=bool(data.get("group", False)),
            group_id=_str(data, "group_id"),
            only_show_if_degraded=bool(data.get("only_show_if_degraded", False)),
            page_id=_str(data, "page_id"),
            position=int(data.get("position") or 0),
            showcase=bool(data.get("showcase", False)),
            start_date=_str(data, "start_date"),
        )


@dataclass(frozen=True)
class IncidentUpdate:
    """One entry of an incident's update history."""

    body: str = ""
    status: str = ""
    updated_at: datetime | None = None
    created_at: datetime | None = None
    display_at: datetime | None = None
    id: str = ""
    incident_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IncidentUpdate:
        return cls(
            body=_str(data, "body"),
            status=_str(data, "status"),
            updated_at=parse_timestamp(data.get("updated_at")),
            created_at=parse_timestamp(data.get("created_at")),
            display_at=parse_timestamp(data.get("display_at")),
            id=_str(data, "id"),
            incident_id=_str(data, "incident_id"),
        )


def _updates(data: dict[str, Any]) -> tuple[IncidentUpdate, ...]:
    return tuple(IncidentUpdate.from_dict(u) for u in data.get("incident_updates") or ())


@dataclass(frozen=True)
class Incident:
    """An incident. ``incident_updates`` are ordered newest first."""

    id: str
    name: str = ""
    status: str = ""
    impact: str = ""
    updated_at: datetime | None = None
    created_at: datetime | None = None
    monitoring_at: datetime | None = None
    resolved_at: datetime | None = None
    page_id: str = ""
    shortlink: str = ""
    incident_updates: tuple[IncidentUpdate, ...] = ()

    @property
    def latest_update(self) -> IncidentUpdate | None:
        return self.incident_updates[0] if self.incident_updates else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Incident:
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            status=_str(data, "status"),
            impact=_str(data, "impact"),
            updated_at=parse_timestamp(data.get("updated_at")),
            created_at=parse_timestamp(data.get("created_at")),
            monitoring_at=parse_timestamp(data.get("monitoring_at")),
            resolved_at=parse_timestamp(data.get("resolved_at")),
            page_id=_str(data, "page_id"),
            shortlink=_str(data, "shortlink"),
            incident_updates=_updates(data),
        )


@dataclass(frozen=True)
class ScheduledMaintenance:
    """A scheduled maintenance window."""

    id: str
    name: str = ""
    status: str = ""
    impact: str = ""
    updated_at: datetime | None = None
    created_at: datetime | None = None
    monitoring_at: datetime | None = None
    resolved_at: datetime | None = None
    scheduled_for: datetime | None = None
    scheduled_until: datetime | None = None
    page_id: str = ""
    shortlink: str = ""
    incident_updates: tuple[IncidentUpdate, ...] = ()

    @property
    def latest_update(self) -> IncidentUpdate | None:
        return self.incident_updates[0] if self.incident_updates else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScheduledMaintenance:
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            status=_str(data, "status"),
            impact=_str(data, "impact"),
            updated_at=parse_timestamp(data.get("updated_at")),
            created_at=parse_timestamp(data.get("created_at")),
            monitoring_at=parse_timestamp(data.get("monitoring_at")),
            resolved_at=parse_timestamp(data.get("resolved_at")),
            scheduled_for=parse_timestamp(data.get("scheduled_for")),
            scheduled_until=parse_timestamp(data.get("scheduled_until")),
            page_id=_str(data, "page_id"),
            shortlink=_str(data, "shortlink"),
            incident_updates=_updates(data),
        )


@dataclass(frozen=True)
class Snapshot:
    """One full point-in-time capture of the summary endpoint.

    ``Snapshot()`` is the zero snapshot: its ``page_updated_at`` is ``None``,
    which the change detector treats as "nothing observed yet".
    """

    page: Page = field(default_factory=Page)
    status: Status = field(default_factory=Status)
    components: tuple[Component, ...] = ()
    incidents: tuple[Incident, ...] = ()
    scheduled_maintenances: tuple[ScheduledMaintenance, ...] = ()

    @property
    def page_updated_at(self) -> datetime | None:
        return self.page.updated_at

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        return cls(
            page=Page.from_dict(data.get("page")),
            status=Status.from_dict(data.get("status")),
            components=tuple(Component.from_dict(c) for c in data.get("components") or ()),
            incidents=tuple(Incident.from_dict(i) for i in data.get("incidents") or ()),
            scheduled_maintenances=tuple(
                ScheduledMaintenance.from_dict(s)
                for s in data.get("scheduled_maintenances") or ()
            ),
        )


# Responses of the single-resource endpoints, used by the inspection commands.


@dataclass(frozen=True)
class StatusResponse:
    page: Page
    status: Status

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusResponse:
        return cls(page=Page.from_dict(data.get("page")), status=Status.from_dict(data.get("status")))


@dataclass(frozen=True)
class ComponentsResponse:
    page: Page
    components: tuple[Component, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ComponentsResponse:
        return cls(
            page=Page.from_dict(data.get("page")),
            components=tuple(Component.from_dict(c) for c in data.get("components") or ()),
        )


@dataclass(frozen=True)
class IncidentsResponse:
    page: Page
    incidents: tuple[Incident, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IncidentsResponse:
        return cls(
            page=Page.from_dict(data.get("page")),
            incidents=tuple(Incident.from_dict(i) for i in data.get("incidents") or ()),
        )


@dataclass(frozen=True)
class ScheduledMaintenancesResponse:
    page: Page
    scheduled_maintenances: tuple[ScheduledMaintenance, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScheduledMaintenancesResponse:
        return cls(
            page=Page.from_dict(data.get("page")),
            scheduled_maintenances=tuple(
                ScheduledMaintenance.from_dict(s)
                for s in data.get("scheduled_maintenances") or ()
            ),
        )
