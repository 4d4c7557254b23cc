"""InstanceSnapshot data class."""

from __future__ import annotations
from dataclasses import dataclass, field

RUNNING = "running"
STOPPED = "stopped"


@dataclass(frozen=True)
class InstanceSnapshot:
    """Point-in-time view of one EC2 instance, decoupled from boto3 responses."""

    instance_id: str
    state: str
    tags: dict[str, str] = field(default_factory=dict)
    state_transition_reason: str | None = None
    name: str = "N/A"

    @property
    def is_running(self) -> bool:
        return self.state == RUNNING

    @property
    def is_stopped(self) -> bool:
        return self.state == STOPPED
