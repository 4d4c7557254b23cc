"""Configuration from environment variables."""

from __future__ import annotations
import os
from dataclasses import dataclass

# Configuration from environment variables
DRY_RUN = os.environ.get("DRY_RUN", "false").lower() == "true"
SNS_TOPIC_ARN = os.environ.get("SNS_TOPIC_ARN", "")

# Provisioning tag identifying managed instances
TAG_KEY = os.environ.get("TAG_KEY", "Provisioner")
TAG_VALUE = os.environ.get("TAG_VALUE", "Terraform via Semaphore")

# Idle detection and grace period thresholds
CPU_THRESHOLD_PERCENT = float(os.environ.get("CPU_THRESHOLD_PERCENT", "1.0"))
STOP_AFTER_DAYS = int(os.environ.get("STOP_AFTER_DAYS", "1"))
DELETE_AFTER_DAYS = int(os.environ.get("DELETE_AFTER_DAYS", "2"))
METRIC_PERIOD_SECONDS = int(os.environ.get("METRIC_PERIOD_SECONDS", "3600"))

# Region scanned (Lambda sets AWS_REGION to its own region)
TARGET_REGION = os.environ.get(
    "TARGET_REGION", os.environ.get("AWS_REGION", "us-west-2")
)

# Tag written when this Lambda stops an instance
AUTO_STOP_TIME_TAG = "AutoStopTime"


@dataclass(frozen=True)
class CleanupConfig:
    """Policy and provider settings for one cleanup run."""

    tag_key: str = TAG_KEY
    tag_value: str = TAG_VALUE
    cpu_threshold_percent: float = CPU_THRESHOLD_PERCENT
    stop_after_days: int = STOP_AFTER_DAYS
    delete_after_days: int = DELETE_AFTER_DAYS
    metric_period_seconds: int = METRIC_PERIOD_SECONDS
    region: str = TARGET_REGION
    dry_run: bool = DRY_RUN
    sns_topic_arn: str = SNS_TOPIC_ARN

    @classmethod
    def from_env(cls) -> CleanupConfig:
        """Build a config from the module-level environment settings."""
        return cls(
            tag_key=TAG_KEY,
            tag_value=TAG_VALUE,
            cpu_threshold_percent=CPU_THRESHOLD_PERCENT,
            stop_after_days=STOP_AFTER_DAYS,
            delete_after_days=DELETE_AFTER_DAYS,
            metric_period_seconds=METRIC_PERIOD_SECONDS,
            region=TARGET_REGION,
            dry_run=DRY_RUN,
            sns_topic_arn=SNS_TOPIC_ARN,
        )

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if not self.tag_key:
            raise ValueError("TAG_KEY must not be empty")
        if not 0 <= self.cpu_threshold_percent <= 100:
            raise ValueError(
                f"CPU_THRESHOLD_PERCENT must be within 0-100, got {self.cpu_threshold_percent}"
            )
        if self.stop_after_days < 1:
            raise ValueError(f"STOP_AFTER_DAYS must be >= 1, got {self.stop_after_days}")
        if self.delete_after_days < 0:
            raise ValueError(
                f"DELETE_AFTER_DAYS must be >= 0, got {self.delete_after_days}"
            )
        # CloudWatch accepts 60s multiples for standard-resolution metrics
        if self.metric_period_seconds < 60 or self.metric_period_seconds % 60:
            raise ValueError(
                f"METRIC_PERIOD_SECONDS must be a positive multiple of 60, "
                f"got {self.metric_period_seconds}"
            )
