"""Fixtures specific to integration tests."""

import pytest
from unittest.mock import Mock


@pytest.fixture(autouse=True)
def _mark_as_integration(request):
    """Automatically mark all tests in integration/ as integration tests."""
    request.node.add_marker(pytest.mark.integration)


@pytest.fixture
def mock_ec2_client():
    """Factory for creating mock EC2 clients with common behaviors.

    Example:
        ec2 = mock_ec2_client(pages=[{"Reservations": [{"Instances": [instance]}]}])
    """
    def _create_mock(**kwargs):
        mock = Mock()
        paginator = Mock()
        paginator.paginate.return_value = kwargs.get(
            "pages",
            [{"Reservations": []}]
        )
        mock.get_paginator.return_value = paginator
        mock.stop_instances.return_value = kwargs.get("stop_response", {})
        mock.terminate_instances.return_value = kwargs.get("terminate_response", {})
        mock.create_tags.return_value = {}
        return mock
    return _create_mock


@pytest.fixture
def mock_cloudwatch_client():
    """Factory for creating mock CloudWatch clients.

    Example:
        cw = mock_cloudwatch_client(datapoints=[{"Average": 0.5}])
    """
    def _create_mock(**kwargs):
        mock = Mock()
        mock.get_metric_statistics.return_value = {
            "Label": "CPUUtilization",
            "Datapoints": kwargs.get("datapoints", []),
        }
        return mock
    return _create_mock
