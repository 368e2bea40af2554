from __future__ import annotations

import os

from core.errors import CleanupError, ConfigurationError
from notifiers.settings import NotifierSettings
from notifiers.writer import WriterNotifier

FILE = "file"


class FileNotifier(WriterNotifier):
    """Appends change messages to a file.

    The file is opened when the notifier is built, so a bad path fails at
    startup rather than on the first change.
    """

    def __init__(self, path: str) -> None:
        if not path:
            raise ConfigurationError("file notifier needs the file path to be set")
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
            stream = os.fdopen(fd, "a", encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"error opening {path} for writing: {exc}") from exc
        super().__init__(stream)
        self.path = path

    @classmethod
    def from_settings(cls, settings: NotifierSettings) -> FileNotifier:
        return cls(settings.file_path)

    @property
    def name(self) -> str:
        return FILE

    async def cleanup(self) -> None:
        try:
            self._stream.close()
        except OSError as exc:
            raise CleanupError(f"error closing {self.path}: {exc}") from exc
