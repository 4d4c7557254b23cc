"""EC2 instance lifecycle cleanup Lambda: stop idle instances, terminate long-stopped ones."""

from .handler import lambda_handler, run_cleanup, CleanupError

__version__ = "1.0.0"
__description__ = "Automated stop/terminate lifecycle for tagged EC2 instances"

__all__ = ["lambda_handler", "run_cleanup", "CleanupError"]
