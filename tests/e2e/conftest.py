"""Fixtures specific to end-to-end handler tests."""

import pytest
from unittest.mock import Mock


@pytest.fixture(autouse=True)
def _mark_as_e2e(request):
    """Automatically mark all tests in e2e/ as e2e tests."""
    request.node.add_marker(pytest.mark.e2e)


@pytest.fixture
def fake_clients():
    """Build mock EC2 and CloudWatch clients from instance records and per-instance CPU.

    Example:
        ec2, cw = fake_clients([instance], cpu={"i-1": [{"Average": 0.2}]})
    """
    def _create(instances, cpu=None):
        cpu = cpu or {}

        ec2 = Mock()
        ec2.get_paginator.return_value.paginate.return_value = [
            {"Reservations": [{"Instances": instances}]}
        ]

        cloudwatch = Mock()

        def _stats(**kwargs):
            instance_id = kwargs["Dimensions"][0]["Value"]
            return {"Datapoints": cpu.get(instance_id, [])}

        cloudwatch.get_metric_statistics.side_effect = _stats
        return ec2, cloudwatch

    return _create
