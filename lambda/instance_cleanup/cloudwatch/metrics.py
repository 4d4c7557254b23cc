"""CloudWatch CPU utilization lookups."""

from __future__ import annotations
import datetime
from typing import Any

from ..utils import get_logger

logger = get_logger()


def get_average_cpu_utilization(
    cloudwatch: Any,
    instance_id: str,
    start_time: datetime.datetime,
    end_time: datetime.datetime,
    period_seconds: int = 3600,
) -> float | None:
    """
    Average CPUUtilization for an instance over [start_time, end_time].

    Returns:
        Mean of the per-period averages, or None when CloudWatch has no
        datapoints for the window (distinct from a measured 0.0).
    """
    response = cloudwatch.get_metric_statistics(
        Namespace="AWS/EC2",
        MetricName="CPUUtilization",
        Dimensions=[{"Name": "InstanceId", "Value": instance_id}],
        StartTime=start_time,
        EndTime=end_time,
        Period=period_seconds,
        Statistics=["Average"],
    )

    datapoints = response.get("Datapoints", [])
    if not datapoints:
        logger.debug(
            "No CPUUtilization datapoints",
            extra={"instance_id": instance_id},
        )
        return None

    return sum(dp["Average"] for dp in datapoints) / len(datapoints)


def make_utilization_lookup(cloudwatch: Any, period_seconds: int):
    """Bind a CloudWatch client into the (instance_id, start, end) lookup the policies expect."""

    def _lookup(
        instance_id: str, start_time: datetime.datetime, end_time: datetime.datetime
    ) -> float | None:
        return get_average_cpu_utilization(
            cloudwatch, instance_id, start_time, end_time, period_seconds
        )

    return _lookup
