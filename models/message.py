from __future__ import annotations

from dataclasses import dataclass

from models.summary import Component, Incident, ScheduledMaintenance, Status


@dataclass(frozen=True)
class Message:
    """Change message handed to every registered notifier.

    Fields:
        changed_status:                 Current status, set only if it changed.
        changed_components:             New or updated components.
        changed_incidents:              New or updated incidents.
        changed_scheduled_maintenances: New or updated scheduled maintenances.

    Collections follow the order of the current snapshot.
    """

    changed_status: Status | None = None
    changed_components: tuple[Component, ...] = ()
    changed_incidents: tuple[Incident, ...] = ()
    changed_scheduled_maintenances: tuple[ScheduledMaintenance, ...] = ()

    def is_empty(self) -> bool:
        return (
            self.changed_status is None
            and not self.changed_components
            and not self.changed_incidents
            and not self.changed_scheduled_maintenances
        )
