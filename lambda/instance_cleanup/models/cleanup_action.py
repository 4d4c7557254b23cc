"""CleanupAction and RunSummary data classes."""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any

STOP = "STOP"
TERMINATE = "TERMINATE"


@dataclass
class CleanupAction:
    """Represents a cleanup action to be taken."""

    instance_id: str
    region: str
    name: str
    action: str
    reason: str
    avg_cpu: float | None = None
    days_stopped: int | None = None
    stop_time_source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        if self.avg_cpu is not None:
            data["avg_cpu"] = round(self.avg_cpu, 2)
        return data


@dataclass
class RunSummary:
    """Counts of actions taken during one cleanup invocation."""

    stopped_count: int = 0
    terminated_count: int = 0
    actions: list[CleanupAction] = field(default_factory=list)

    def record(self, action: CleanupAction) -> None:
        """Count an executed action."""
        self.actions.append(action)
        if action.action == STOP:
            self.stopped_count += 1
        elif action.action == TERMINATE:
            self.terminated_count += 1

    @property
    def message(self) -> str:
        return (
            f"Cleanup completed. Stopped: {self.stopped_count}, "
            f"Terminated: {self.terminated_count}"
        )

    def __str__(self) -> str:
        return self.message
