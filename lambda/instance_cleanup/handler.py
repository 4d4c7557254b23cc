"""Main Lambda handler for instance lifecycle cleanup."""

from __future__ import annotations
import datetime
import time
import boto3
from typing import Any

from .models import CleanupConfig, RunSummary
from .utils import get_logger
from .cloudwatch import make_utilization_lookup
from .ec2 import decide_action, execute_cleanup_action, list_target_instances

logger = get_logger()


class CleanupError(RuntimeError):
    """Raised when a cleanup run aborts; carries the original error message."""


def send_notification(summary: RunSummary, config: CleanupConfig) -> None:
    """Send SNS notification about cleanup actions."""
    if not config.sns_topic_arn or not summary.actions:
        return

    try:
        sns = boto3.client("sns", region_name=config.region)

        mode = "DRY-RUN" if config.dry_run else "LIVE"
        message_lines = [
            f"Instance Lifecycle Cleanup Report - {config.region}",
            f"Mode: {mode}",
            f"Timestamp: {datetime.datetime.now(datetime.timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}",
            f"Selector: {config.tag_key}={config.tag_value}",
            "",
            summary.message,
            "",
        ]

        for action in summary.actions:
            message_lines.append(f"Instance: {action.instance_id}")
            for key, value in action.to_dict().items():
                # Evidence fields not used by this action type are None
                if key != "instance_id" and value is not None:
                    message_lines.append(f"  {key}: {value}")
            message_lines.append("")

        subject = f"[{mode}] Instance Lifecycle Cleanup: {len(summary.actions)} actions in {config.region}"

        sns.publish(
            TopicArn=config.sns_topic_arn,
            Subject=subject[:100],  # SNS subject limit
            Message="\n".join(message_lines),
        )

        logger.info(
            f"Sent SNS notification for {len(summary.actions)} actions in {config.region}"
        )

    except Exception as e:
        logger.error(f"Failed to send SNS notification: {e}")


def run_cleanup(
    config: CleanupConfig,
    ec2: Any = None,
    cloudwatch: Any = None,
    now: datetime.datetime | None = None,
) -> RunSummary:
    """
    Evaluate and act on every managed instance in the configured region.

    Instances are processed in listing order; each decision is executed before
    the next instance is evaluated. Provider errors propagate unchanged.
    """
    start_time = time.time()
    config.validate()

    if ec2 is None:
        ec2 = boto3.client("ec2", region_name=config.region)
    if cloudwatch is None:
        cloudwatch = boto3.client("cloudwatch", region_name=config.region)
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)

    utilization_lookup = make_utilization_lookup(
        cloudwatch, config.metric_period_seconds
    )
    summary = RunSummary()

    instances = list_target_instances(ec2, config.tag_key, config.tag_value)
    logger.info(
        f"Found {len(instances)} instances with {config.tag_key}={config.tag_value} "
        f"in {config.region}"
    )

    for instance in instances:
        logger.info(
            "Processing instance",
            extra={"instance_id": instance.instance_id, "state": instance.state},
        )

        action = decide_action(instance, config, utilization_lookup, now)
        if not action:
            continue

        action.region = config.region
        if execute_cleanup_action(action, ec2, now, dry_run=config.dry_run):
            summary.record(action)

    duration = time.time() - start_time
    logger.info(
        f"Completed {config.region} in {duration:.1f}s: "
        f"{len(instances)} instances, {summary.stopped_count} stopped, "
        f"{summary.terminated_count} terminated"
    )

    return summary


def lambda_handler(event: dict[str, Any], context: Any) -> str:
    """Main Lambda handler. The event payload is ignored."""
    config = CleanupConfig.from_env()
    logger.info(f"Starting instance lifecycle cleanup (DRY_RUN={config.dry_run})")

    try:
        summary = run_cleanup(config)
    except Exception as e:
        logger.error(f"Lambda execution failed: {e}")
        raise CleanupError(str(e)) from e

    send_notification(summary, config)

    logger.info(summary.message)
    return summary.message
