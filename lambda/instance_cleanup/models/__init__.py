"""Data models for the instance cleanup Lambda."""

from .cleanup_action import CleanupAction, RunSummary, STOP, TERMINATE
from .config import CleanupConfig
from .instance import InstanceSnapshot, RUNNING, STOPPED

__all__ = [
    "CleanupAction",
    "RunSummary",
    "STOP",
    "TERMINATE",
    "CleanupConfig",
    "InstanceSnapshot",
    "RUNNING",
    "STOPPED",
]
