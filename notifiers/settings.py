from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

FILE_PATH_ENV = "FN_FILEPATH"
SLACK_OAUTH_TOKEN_ENV = "SLACK_OAUTH_TOKEN"
SLACK_CHANNEL_ENV = "SLACK_CHANNEL"
SLACK_JOIN_CHANNEL_ENV = "SLACK_JOIN_CHANNEL"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    s = str(raw).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None:
        return str(default)
    return str(raw).strip()


@dataclass(frozen=True)
class NotifierSettings:
    """Configuration of every notifier backend.

    Values come from the environment first; command-line flags override them
    through ``with_overrides``.
    """

    file_path: str = field(default_factory=lambda: _env_str(FILE_PATH_ENV))
    slack_oauth_token: str = field(default_factory=lambda: _env_str(SLACK_OAUTH_TOKEN_ENV))
    slack_channel: str = field(default_factory=lambda: _env_str(SLACK_CHANNEL_ENV))
    slack_join_channel: bool = field(
        default_factory=lambda: _env_bool(SLACK_JOIN_CHANNEL_ENV, False)
    )

    @classmethod
    def from_env(cls) -> NotifierSettings:
        return cls()

    def with_overrides(self, **overrides: Any) -> NotifierSettings:
        """Return a copy where every non-``None`` override replaces the field."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
