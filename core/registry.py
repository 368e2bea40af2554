from __future__ import annotations

from collections.abc import Callable

from core.errors import ConfigurationError, DuplicateNotifierError, NotifierNotFoundError
from core.locks import ReadWriteLock
from notifiers.base import Notifier

NotifierFactory = Callable[[], Notifier]


class NotifierRegistry:
    """Registry mapping notifier names to zero-argument factories.

    Backend configuration is bound into the factory before registration
    (e.g. with ``functools.partial``), so ``resolve()`` needs only a name.
    Adding a backend requires only a ``register()`` call -- no changes to the
    monitor or the CLI.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._factories: dict[str, NotifierFactory] = {}

    def register(self, name: str, factory: NotifierFactory) -> None:
        with self._lock.write():
            if name in self._factories:
                raise DuplicateNotifierError(name)
            self._factories[name] = factory

    def resolve(self, name: str) -> Notifier:
        """Build the notifier registered under ``name``.

        Raises ``NotifierNotFoundError`` for unknown names and
        ``ConfigurationError`` when the backend cannot be built.
        """
        with self._lock.read():
            factory = self._factories.get(name)
        if factory is None:
            raise NotifierNotFoundError(name)

        try:
            return factory()
        except ConfigurationError as exc:
            raise ConfigurationError(f"error creating notifier {name}: {exc}") from exc

    def names(self) -> list[str]:
        with self._lock.read():
            return sorted(self._factories)
