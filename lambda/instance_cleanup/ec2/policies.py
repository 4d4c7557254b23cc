"""EC2 lifecycle policy checks (idle running, stopped past grace period)."""

from __future__ import annotations
import datetime
from typing import Callable

from ..models import CleanupAction, CleanupConfig, InstanceSnapshot, STOP, TERMINATE
from ..utils import get_logger
from .stop_time import resolve_stop_time_with_source

logger = get_logger()

UtilizationLookup = Callable[[str, datetime.datetime, datetime.datetime], float | None]


def check_idle_running(
    instance: InstanceSnapshot, avg_cpu: float | None, config: CleanupConfig
) -> CleanupAction | None:
    """
    Check if a running instance is idle and should be stopped.

    No datapoints (avg_cpu is None) counts as 0% CPU.
    """
    if not instance.is_running:
        return None

    effective_cpu = 0.0 if avg_cpu is None else avg_cpu

    if effective_cpu >= config.cpu_threshold_percent:
        return None

    if avg_cpu is None:
        reason = f"No CPU datapoints in last {config.stop_after_days}d"
    else:
        reason = (
            f"Idle: avg CPU {avg_cpu:.2f}% < {config.cpu_threshold_percent}% "
            f"over last {config.stop_after_days}d"
        )

    return CleanupAction(
        instance_id=instance.instance_id,
        region="",  # Set by caller
        name=instance.name,
        action=STOP,
        reason=reason,
        avg_cpu=effective_cpu,
    )


def check_stopped_grace_period(
    instance: InstanceSnapshot, config: CleanupConfig, now: datetime.datetime
) -> CleanupAction | None:
    """
    Check if a stopped instance has been stopped for at least the grace period.

    Elapsed time is counted in whole days; partial days do not count.
    Instances whose stop time cannot be determined are left alone.
    """
    if not instance.is_stopped:
        return None

    stop_time, source = resolve_stop_time_with_source(instance)
    if stop_time is None:
        logger.info(
            "Stop time unknown, leaving instance stopped",
            extra={"instance_id": instance.instance_id},
        )
        return None

    # Whole days, truncated toward zero so a slightly future tag counts as 0
    days_stopped = int((now - stop_time) / datetime.timedelta(days=1))
    logger.debug(
        "Resolved stop time",
        extra={
            "instance_id": instance.instance_id,
            "stop_time": stop_time.isoformat(),
            "source": source,
            "days_stopped": days_stopped,
        },
    )

    if days_stopped < config.delete_after_days:
        return None

    stopped_at = stop_time.strftime("%Y-%m-%d %H:%M:%S UTC")
    reason = (
        f"Stopped {days_stopped}d (grace period {config.delete_after_days}d). "
        f"Stopped {stopped_at} per {source}"
    )

    return CleanupAction(
        instance_id=instance.instance_id,
        region="",
        name=instance.name,
        action=TERMINATE,
        reason=reason,
        days_stopped=days_stopped,
        stop_time_source=source,
    )


def decide_action(
    instance: InstanceSnapshot,
    config: CleanupConfig,
    utilization_lookup: UtilizationLookup,
    now: datetime.datetime,
) -> CleanupAction | None:
    """
    Decide the lifecycle transition for one instance.

    Running instances are judged on average CPU over the trailing
    stop_after_days window; stopped instances on how long they have been
    stopped. Any other state yields no action.
    """
    if instance.is_running:
        window_start = now - datetime.timedelta(days=config.stop_after_days)
        avg_cpu = utilization_lookup(instance.instance_id, window_start, now)
        logger.info(
            "Running instance utilization",
            extra={
                "instance_id": instance.instance_id,
                "avg_cpu": avg_cpu,
                "threshold": config.cpu_threshold_percent,
            },
        )
        return check_idle_running(instance, avg_cpu, config)

    if instance.is_stopped:
        return check_stopped_grace_period(instance, config, now)

    logger.debug(
        "Ignoring instance in unexpected state",
        extra={"instance_id": instance.instance_id, "state": instance.state},
    )
    return None
