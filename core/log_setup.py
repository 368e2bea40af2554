from __future__ import annotations

import logging
import os

from core.errors import ConfigurationError

LOG_LEVEL_ENV = "LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging() -> None:
    """Configure root logging from the ``LOG_LEVEL`` environment variable."""
    raw = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper() or "INFO"
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ConfigurationError(f"invalid {LOG_LEVEL_ENV} {raw!r}")

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    # Per-request httpx logging is noise at INFO.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
