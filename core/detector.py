"""Change detection between two successive summary snapshots.

Everything here is pure: no I/O, no state, neither snapshot is mutated.

Only timestamps are authoritative. A resource is reported when it is new or
when its ``updated_at`` differs from the previous observation; other field
differences with an identical ``updated_at`` are not changes. Resources that
disappear are ignored, since the feed drops resolved entries.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Sequence
from datetime import datetime
from typing import NamedTuple, TypeVar

from models.message import Message
from models.summary import Component, Incident, ScheduledMaintenance, Snapshot, Status

log = logging.getLogger(__name__)

# Informational entry the GitHub feed lists among its components.
SENTINEL_COMPONENT_NAME = "Visit www.githubstatus.com for more information"

T = TypeVar("T")


class Detection(NamedTuple):
    """Outcome of one detection run.

    ``snapshot`` is what the caller must keep as its last-known snapshot;
    ``message`` is ``None`` when there is nothing to notify.
    """

    snapshot: Snapshot
    message: Message | None


def status_changed(previous: Status, current: Status) -> bool:
    return (
        previous.description != current.description
        or previous.indicator != current.indicator
    )


def find_changed_resources(
    last: Sequence[T],
    current: Sequence[T],
    key: Callable[[T], Hashable],
    updated_at: Callable[[T], datetime | None],
) -> tuple[T, ...]:
    """Return the resources of ``current`` that are new or updated.

    Output keeps the order of ``current``. Duplicated keys are not collapsed.
    """
    last_by_key = {key(resource): resource for resource in last}

    changed: list[T] = []
    for resource in current:
        previous = last_by_key.get(key(resource))
        if previous is None:
            changed.append(resource)
        elif updated_at(previous) != updated_at(resource):
            changed.append(resource)

    return tuple(changed)


def find_changed_components(
    last: Sequence[Component], current: Sequence[Component]
) -> tuple[Component, ...]:
    current = [c for c in current if c.name != SENTINEL_COMPONENT_NAME]
    return find_changed_resources(last, current, lambda c: c.name, lambda c: c.updated_at)


def find_changed_incidents(
    last: Sequence[Incident], current: Sequence[Incident]
) -> tuple[Incident, ...]:
    return find_changed_resources(last, current, lambda i: i.id, lambda i: i.updated_at)


def find_changed_scheduled_maintenances(
    last: Sequence[ScheduledMaintenance], current: Sequence[ScheduledMaintenance]
) -> tuple[ScheduledMaintenance, ...]:
    return find_changed_resources(last, current, lambda s: s.id, lambda s: s.updated_at)


def detect_changes(
    previous: Snapshot,
    current: Snapshot,
    *,
    notify_on_first_run: bool = False,
) -> Detection:
    """Compare ``current`` against ``previous``.

    1. ``previous`` has never been set: adopt ``current`` silently, unless
       ``notify_on_first_run`` asks for a full diff against the empty state.
    2. Page timestamps are equal: keep ``previous``, drop ``current``.
    3. Otherwise diff status and resources, and adopt ``current`` whether or
       not anything changed.
    """
    if previous.page_updated_at is None and not notify_on_first_run:
        log.debug("Notify on first run is disabled, skipping the notification.")
        return Detection(current, None)

    if current.page_updated_at == previous.page_updated_at:
        log.debug("Current summary is equal to the old one, no updates.")
        return Detection(previous, None)

    message = Message(
        changed_status=current.status if status_changed(previous.status, current.status) else None,
        changed_components=find_changed_components(previous.components, current.components),
        changed_incidents=find_changed_incidents(previous.incidents, current.incidents),
        changed_scheduled_maintenances=find_changed_scheduled_maintenances(
            previous.scheduled_maintenances, current.scheduled_maintenances
        ),
    )

    if message.is_empty():
        return Detection(current, None)
    return Detection(current, message)
