"""CloudWatch metric queries."""

from .metrics import get_average_cpu_utilization, make_utilization_lookup

__all__ = ["get_average_cpu_utilization", "make_utilization_lookup"]
