"""Pytest configuration and shared fixtures for instance lifecycle cleanup tests.

Organization:
1. InstanceBuilder - builds DescribeInstances-shaped records
2. Core fixtures - fixed clock, default config
3. Fixture factories - make_instance, make_snapshot, utilization lookups
"""

from __future__ import annotations
import datetime
import pytest
from typing import Any

from instance_cleanup.models import CleanupConfig, InstanceSnapshot
from instance_cleanup.utils import to_instance_snapshot


class InstanceBuilder:
    """Builder pattern for creating test EC2 instances.

    Produces the dictionaries boto3 returns from describe_instances so both the
    adapters and (via to_instance_snapshot) the policies can be tested without
    AWS.
    """

    def __init__(self):
        self._instance = {
            "InstanceId": "i-test123456",
            "State": {"Name": "running"},
            "LaunchTime": datetime.datetime(2024, 10, 1, tzinfo=datetime.timezone.utc),
            "StateTransitionReason": "",
            "Tags": [{"Key": "Provisioner", "Value": "Terraform via Semaphore"}],
        }

    def with_instance_id(self, instance_id: str) -> InstanceBuilder:
        """Set instance ID."""
        self._instance["InstanceId"] = instance_id
        return self

    def with_name(self, name: str) -> InstanceBuilder:
        """Set Name tag."""
        self._add_tag("Name", name)
        return self

    def with_state(self, state: str) -> InstanceBuilder:
        """Set instance state (running, stopped)."""
        self._instance["State"]["Name"] = state
        return self

    def with_auto_stop_time(self, value: str) -> InstanceBuilder:
        """Add AutoStopTime tag (raw string, may be malformed on purpose)."""
        self._add_tag("AutoStopTime", value)
        return self

    def with_state_transition_reason(self, reason: str) -> InstanceBuilder:
        """Set StateTransitionReason."""
        self._instance["StateTransitionReason"] = reason
        return self

    def with_tag(self, key: str, value: str) -> InstanceBuilder:
        """Add custom tag."""
        self._add_tag(key, value)
        return self

    def _add_tag(self, key: str, value: str):
        self._instance["Tags"].append({"Key": key, "Value": value})

    def build(self) -> dict[str, Any]:
        """Build and return the instance dictionary."""
        return self._instance


# ===== Core Fixtures =====


@pytest.fixture
def instance_builder():
    """Fixture that returns a new InstanceBuilder."""
    return InstanceBuilder()


@pytest.fixture
def now():
    """Fixed 'current time' for deterministic day arithmetic."""
    return datetime.datetime(2024, 10, 25, 12, 0, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def config():
    """Default policy configuration (1% CPU, 1 day window, 2 day grace period)."""
    return CleanupConfig(
        tag_key="Provisioner",
        tag_value="Terraform via Semaphore",
        cpu_threshold_percent=1.0,
        stop_after_days=1,
        delete_after_days=2,
        metric_period_seconds=3600,
        region="us-west-2",
        dry_run=False,
        sns_topic_arn="",
    )


# ===== Fixture Factories =====


@pytest.fixture
def iso(now):
    """Render `now - delta` as an AutoStopTime tag value."""

    def _iso(**delta) -> str:
        moment = now - datetime.timedelta(**delta)
        return moment.strftime("%Y-%m-%dT%H:%M:%SZ")

    return _iso


@pytest.fixture
def make_instance():
    """Factory fixture for DescribeInstances-shaped records.

    Args:
        instance_id: Instance ID (default: "i-test123456")
        name: Name tag (default: "test-instance")
        state: Instance state (default: "running")
        auto_stop_time: AutoStopTime tag value (default: None)
        transition_reason: StateTransitionReason (default: "")
        **tags: Additional custom tags

    Example:
        instance = make_instance(state="stopped", auto_stop_time="2024-10-22T12:00:00Z")
    """

    def _make(
        instance_id: str = "i-test123456",
        name: str = "test-instance",
        state: str = "running",
        auto_stop_time: str | None = None,
        transition_reason: str = "",
        **tags,
    ) -> dict[str, Any]:
        builder = (
            InstanceBuilder()
            .with_instance_id(instance_id)
            .with_name(name)
            .with_state(state)
            .with_state_transition_reason(transition_reason)
        )
        if auto_stop_time is not None:
            builder = builder.with_auto_stop_time(auto_stop_time)
        for key, value in tags.items():
            builder = builder.with_tag(key, value)
        return builder.build()

    return _make


@pytest.fixture
def make_snapshot(make_instance):
    """Factory fixture returning InstanceSnapshot objects (same args as make_instance)."""

    def _make(**kwargs) -> InstanceSnapshot:
        return to_instance_snapshot(make_instance(**kwargs))

    return _make


@pytest.fixture
def utilization_lookup():
    """Build a utilization lookup that returns a fixed value and records calls."""

    def _factory(value: float | None):
        calls = []

        def _lookup(instance_id, start_time, end_time):
            calls.append((instance_id, start_time, end_time))
            return value

        _lookup.calls = calls
        return _lookup

    return _factory
