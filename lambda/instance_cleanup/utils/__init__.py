"""Utility functions for the instance cleanup Lambda."""

from .aws_helpers import (
    convert_tags_to_dict,
    to_instance_snapshot,
    format_iso_timestamp,
)
from .logging_config import get_logger

__all__ = [
    "convert_tags_to_dict",
    "to_instance_snapshot",
    "format_iso_timestamp",
    "get_logger",
]
