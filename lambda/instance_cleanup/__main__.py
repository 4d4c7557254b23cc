"""Run one cleanup pass from the command line with the environment configuration."""

from __future__ import annotations
import argparse
import dataclasses
import sys

from .handler import run_cleanup, send_notification
from .models import CleanupConfig


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="instance-cleanup",
        description="Stop idle tagged EC2 instances and terminate long-stopped ones.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log intended actions without stopping, tagging or terminating",
    )
    parser.add_argument("--region", help="AWS region to scan (default: TARGET_REGION)")
    args = parser.parse_args(argv)

    config = CleanupConfig.from_env()
    overrides = {}
    if args.dry_run:
        overrides["dry_run"] = True
    if args.region:
        overrides["region"] = args.region
    if overrides:
        config = dataclasses.replace(config, **overrides)

    try:
        summary = run_cleanup(config)
    except Exception as e:
        print(f"Cleanup failed: {e}", file=sys.stderr)
        return 1

    send_notification(summary, config)
    print(summary.message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
