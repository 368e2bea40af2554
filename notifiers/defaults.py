from __future__ import annotations

from functools import partial

from core.registry import NotifierRegistry
from notifiers.console import STDOUT, StdoutNotifier
from notifiers.file import FILE, FileNotifier
from notifiers.settings import NotifierSettings
from notifiers.slack import SLACK, SlackNotifier


def build_registry(settings: NotifierSettings) -> NotifierRegistry:
    """Return a registry holding every built-in backend bound to ``settings``."""
    registry = NotifierRegistry()
    registry.register(STDOUT, StdoutNotifier)
    registry.register(FILE, partial(FileNotifier.from_settings, settings))
    registry.register(SLACK, partial(SlackNotifier.from_settings, settings))
    return registry
