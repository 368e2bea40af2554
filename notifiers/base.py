from __future__ import annotations

from abc import ABC, abstractmethod

from models.message import Message


class Notifier(ABC):
    """Abstract base for all notification backends.

    The monitor hands every change ``Message`` to each registered notifier
    and has no knowledge of how it is delivered. Implementations raise
    ``DeliveryError`` from ``notify()`` when a message cannot be delivered;
    the monitor collects the error and keeps going with the other notifiers.

    ``cleanup()`` is called exactly once at shutdown, whether or not
    ``notify()`` ever ran.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the notifier (e.g. 'stdout')."""

    @abstractmethod
    async def notify(self, message: Message) -> None:
        """Deliver a change message."""

    async def cleanup(self) -> None:
        """Release any resources held by the notifier.

        Override in subclasses that hold files, clients, etc.
        """
