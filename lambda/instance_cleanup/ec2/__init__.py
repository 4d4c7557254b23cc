"""EC2 instance discovery, lifecycle policies and stop-time resolution."""

from .instances import (
    list_target_instances,
    tag_instance_with_stop_time,
    execute_cleanup_action,
)
from .policies import (
    check_idle_running,
    check_stopped_grace_period,
    decide_action,
)
from .stop_time import (
    parse_auto_stop_tag,
    parse_transition_reason,
    resolve_stop_time,
    resolve_stop_time_with_source,
)

__all__ = [
    "list_target_instances",
    "tag_instance_with_stop_time",
    "execute_cleanup_action",
    "check_idle_running",
    "check_stopped_grace_period",
    "decide_action",
    "parse_auto_stop_tag",
    "parse_transition_reason",
    "resolve_stop_time",
    "resolve_stop_time_with_source",
]
