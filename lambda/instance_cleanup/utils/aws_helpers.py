"""AWS helper functions."""

from __future__ import annotations
import datetime
from typing import Any

from ..models.instance import InstanceSnapshot


def convert_tags_to_dict(tags: list[dict[str, str]] | None) -> dict[str, str]:
    """Convert AWS tag list to dictionary."""
    return {tag["Key"]: tag["Value"] for tag in tags} if tags else {}


def to_instance_snapshot(instance: dict[str, Any]) -> InstanceSnapshot:
    """Translate a DescribeInstances record into an InstanceSnapshot."""
    tags_dict = convert_tags_to_dict(instance.get("Tags", []))
    return InstanceSnapshot(
        instance_id=instance["InstanceId"],
        state=instance["State"]["Name"],
        tags=tags_dict,
        state_transition_reason=instance.get("StateTransitionReason") or None,
        name=tags_dict.get("Name", "N/A"),
    )


def format_iso_timestamp(moment: datetime.datetime) -> str:
    """Render an aware datetime as a second-precision ISO-8601 UTC string."""
    return (
        moment.astimezone(datetime.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )
