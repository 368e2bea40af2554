from __future__ import annotations

from abc import ABC, abstractmethod

from models.summary import Snapshot


class SummarySource(ABC):
    """Abstract source of summary snapshots.

    Implementations own their transport and retry policy. ``fetch_summary``
    returns a freshly built snapshot on every call, or raises when the feed
    is unreachable or malformed. The caller bounds the call with its own
    timeout.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source name (e.g. 'GitHub')."""

    @abstractmethod
    async def fetch_summary(self) -> Snapshot:
        """Fetch the current summary of the status page."""
