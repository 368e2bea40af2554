from __future__ import annotations

import sys

from notifiers.writer import WriterNotifier

STDOUT = "stdout"


class StdoutNotifier(WriterNotifier):
    """Notifier that prints change messages to stdout."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)

    @property
    def name(self) -> str:
        return STDOUT
