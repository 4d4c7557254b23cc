"""Stop-time derivation for stopped instances.

Two sources are consulted in priority order:

1. The ``AutoStopTime`` tag written when this Lambda stopped the instance.
2. The timestamp EC2 embeds in ``StateTransitionReason``, e.g.
   ``"User initiated (2024-10-23 12:34:56 GMT)"``. This covers instances stopped
   by someone else, or stopped by us when the tag write failed.

Neither parser raises; an unusable value resolves to None.
"""

from __future__ import annotations
import datetime
import re

from ..models.config import AUTO_STOP_TIME_TAG
from ..models.instance import InstanceSnapshot
from ..utils import get_logger

logger = get_logger()

TAG_SOURCE = AUTO_STOP_TIME_TAG
TRANSITION_REASON_SOURCE = "StateTransitionReason"

_GMT_SUFFIX = " GMT"

# Zero-padded date and time are required; a date-only tag is rejected
_ISO_INSTANT_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})?"
)
_TRANSITION_TIMESTAMP_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} GMT")


def _parse_iso_instant(value: str) -> datetime.datetime | None:
    if not _ISO_INSTANT_PATTERN.fullmatch(value):
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed.astimezone(datetime.timezone.utc)


def parse_auto_stop_tag(
    tags_dict: dict[str, str], instance_id: str = ""
) -> datetime.datetime | None:
    """Parse the AutoStopTime tag as an ISO-8601 instant."""
    value = tags_dict.get(AUTO_STOP_TIME_TAG)
    if value is None:
        return None

    stop_time = _parse_iso_instant(value.strip())
    if stop_time is None:
        logger.warning(
            "Malformed AutoStopTime tag, falling back to StateTransitionReason",
            extra={"instance_id": instance_id, "tag_value": value},
        )
    return stop_time


def parse_transition_reason(reason: str | None) -> datetime.datetime | None:
    """
    Extract the stop instant from an EC2 StateTransitionReason string.

    The text between the first "(" and the first ")" after it must read
    "YYYY-MM-DD HH:MM:SS GMT".
    """
    if not reason:
        return None

    start = reason.find("(")
    if start == -1:
        return None
    end = reason.find(")", start + 1)
    if end == -1:
        return None

    candidate = reason[start + 1 : end]
    if not _TRANSITION_TIMESTAMP_PATTERN.fullmatch(candidate):
        return None

    iso_value = candidate[: -len(_GMT_SUFFIX)].replace(" ", "T", 1) + "Z"
    try:
        return datetime.datetime.strptime(iso_value, "%Y-%m-%dT%H:%M:%SZ").replace(
            tzinfo=datetime.timezone.utc
        )
    except ValueError:
        return None


def resolve_stop_time_with_source(
    instance: InstanceSnapshot,
) -> tuple[datetime.datetime | None, str | None]:
    """Resolve the stop instant and report which source provided it."""
    stop_time = parse_auto_stop_tag(instance.tags, instance.instance_id)
    if stop_time is not None:
        return stop_time, TAG_SOURCE

    stop_time = parse_transition_reason(instance.state_transition_reason)
    if stop_time is not None:
        return stop_time, TRANSITION_REASON_SOURCE

    return None, None


def resolve_stop_time(instance: InstanceSnapshot) -> datetime.datetime | None:
    """Return when the instance stopped, or None if no source is usable."""
    stop_time, _ = resolve_stop_time_with_source(instance)
    return stop_time
