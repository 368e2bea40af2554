from core.clock import FakeClock, RealClock
from core.detector import Detection, detect_changes, find_changed_resources
from core.registry import NotifierRegistry
from core.scheduler import Monitor

__all__ = [
    "Detection",
    "FakeClock",
    "Monitor",
    "NotifierRegistry",
    "RealClock",
    "detect_changes",
    "find_changed_resources",
]
