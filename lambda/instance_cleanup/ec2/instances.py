"""EC2 instance operations."""

from __future__ import annotations
import datetime
from typing import Any

from botocore.exceptions import ClientError

from ..models import CleanupAction, InstanceSnapshot, STOP, TERMINATE, RUNNING, STOPPED
from ..models.config import AUTO_STOP_TIME_TAG
from ..utils import format_iso_timestamp, get_logger, to_instance_snapshot

logger = get_logger()


def list_target_instances(
    ec2: Any, tag_key: str, tag_value: str
) -> list[InstanceSnapshot]:
    """List running or stopped instances carrying the provisioning tag."""
    paginator = ec2.get_paginator("describe_instances")
    pages = paginator.paginate(
        Filters=[
            {"Name": f"tag:{tag_key}", "Values": [tag_value]},
            {"Name": "instance-state-name", "Values": [RUNNING, STOPPED]},
        ]
    )

    snapshots = []
    for page in pages:
        for reservation in page["Reservations"]:
            for instance in reservation["Instances"]:
                snapshots.append(to_instance_snapshot(instance))
    return snapshots


def tag_instance_with_stop_time(
    ec2: Any, instance_id: str, stop_time: datetime.datetime
) -> str:
    """Record when this Lambda stopped the instance. Returns the tag value."""
    value = format_iso_timestamp(stop_time)
    ec2.create_tags(
        Resources=[instance_id],
        Tags=[{"Key": AUTO_STOP_TIME_TAG, "Value": value}],
    )
    return value


def execute_cleanup_action(
    action: CleanupAction,
    ec2: Any,
    now: datetime.datetime,
    dry_run: bool = False,
) -> bool:
    """
    Execute a cleanup action (stop + tag, or terminate).

    The stop call is always issued before the AutoStopTime tag write.
    ClientError is logged and re-raised so the run aborts.
    """
    try:
        if action.action == TERMINATE:
            if dry_run:
                logger.info(
                    "Would TERMINATE instance",
                    extra={
                        "dry_run": True,
                        "instance_id": action.instance_id,
                        "region": action.region,
                        "reason": action.reason,
                    },
                )
            else:
                logger.info(
                    "TERMINATE instance",
                    extra={
                        "instance_id": action.instance_id,
                        "region": action.region,
                        "reason": action.reason,
                    },
                )
                ec2.terminate_instances(InstanceIds=[action.instance_id])
            return True

        elif action.action == STOP:
            if dry_run:
                logger.info(
                    "Would STOP instance",
                    extra={
                        "dry_run": True,
                        "instance_id": action.instance_id,
                        "region": action.region,
                        "reason": action.reason,
                    },
                )
            else:
                logger.info(
                    "STOP instance",
                    extra={
                        "instance_id": action.instance_id,
                        "region": action.region,
                        "reason": action.reason,
                    },
                )
                ec2.stop_instances(InstanceIds=[action.instance_id])
                tag_value = tag_instance_with_stop_time(ec2, action.instance_id, now)
                logger.info(
                    "Tagged stopped instance",
                    extra={
                        "instance_id": action.instance_id,
                        "tag": AUTO_STOP_TIME_TAG,
                        "value": tag_value,
                    },
                )
            return True

    except ClientError as e:
        logger.error(
            "Failed to execute cleanup action",
            extra={
                "action": action.action,
                "instance_id": action.instance_id,
                "error": str(e),
            },
        )
        raise

    logger.warning(
        "Unknown cleanup action",
        extra={"action": action.action, "instance_id": action.instance_id},
    )
    return False
