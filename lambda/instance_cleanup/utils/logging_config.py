"""Logging configuration using AWS Lambda Powertools."""

import os

from aws_lambda_powertools import Logger

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Structured JSON logging with Lambda context injection
logger = Logger(
    service="instance-lifecycle-cleanup",
    level=LOG_LEVEL,
)


def get_logger():
    """Get the shared Powertools logger used by every module in the package."""
    return logger
