from models.message import Message
from models.summary import (
    Component,
    ComponentStatus,
    Incident,
    IncidentStatus,
    IncidentUpdate,
    Indicator,
    Page,
    ScheduledMaintenance,
    ScheduledMaintenanceStatus,
    Snapshot,
    Status,
)

__all__ = [
    "Component",
    "ComponentStatus",
    "Incident",
    "IncidentStatus",
    "IncidentUpdate",
    "Indicator",
    "Message",
    "Page",
    "ScheduledMaintenance",
    "ScheduledMaintenanceStatus",
    "Snapshot",
    "Status",
]
