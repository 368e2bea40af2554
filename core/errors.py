from __future__ import annotations


class GHStatusError(Exception):
    """Base class for all errors raised by this package."""


class FetchError(GHStatusError):
    """The status feed could not be fetched or decoded."""


class ConfigurationError(GHStatusError):
    """Required settings are missing or invalid."""


class DuplicateNotifierError(GHStatusError):
    def __init__(self, name: str) -> None:
        super().__init__(f"duplicate notifier {name}")
        self.name = name


class NotifierNotFoundError(GHStatusError):
    def __init__(self, name: str) -> None:
        super().__init__(f"no notifier named {name}")
        self.name = name


class DeliveryError(GHStatusError):
    """A notifier failed to deliver a message."""


class CleanupError(GHStatusError):
    """A notifier failed to release its resources."""


class DispatchError(GHStatusError):
    """Every notifier failure collected during one monitor tick."""

    def __init__(self, errors: list[BaseException]) -> None:
        super().__init__("; ".join(str(e) or type(e).__name__ for e in errors))
        self.errors = list(errors)
