from notifiers.base import Notifier
from notifiers.console import STDOUT, StdoutNotifier
from notifiers.file import FILE, FileNotifier
from notifiers.settings import NotifierSettings
from notifiers.slack import SLACK, SlackNotifier
from notifiers.writer import WriterNotifier

__all__ = [
    "FILE",
    "SLACK",
    "STDOUT",
    "FileNotifier",
    "Notifier",
    "NotifierSettings",
    "SlackNotifier",
    "StdoutNotifier",
    "WriterNotifier",
]
