# app/utils/time_codec.py
"""
Text <-> datetime conversion for every time column crossing the storage boundary.

Stored layout is "YYYY-MM-DD HH:MM:SS" in the process's local time zone.
Decoded values are timezone-aware (local zone). A value that cannot be decoded
becomes ZERO_TIME instead of raising, so one bad column never hides a row.
ZERO_TIME is stored as "0001-01-01 00:00:00" and decodes back to ZERO_TIME.
"""

from datetime import datetime, timezone
from typing import Optional, Union

import structlog

from app.utils.logger import get_logger

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Stand-in for an unset / undecodable timestamp
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)
ZERO_TEXT = "0001-01-01 00:00:00"


def is_zero(value: Optional[datetime]) -> bool:
    return value is None or value == ZERO_TIME or value == datetime.min


def _local(value: datetime) -> datetime:
    # Naive values are taken as local wall time
    return value.astimezone()


def encode(value: datetime) -> str:
    """Render a datetime in the local zone, truncated to whole seconds."""
    if is_zero(value):
        return ZERO_TEXT
    # isoformat keeps four-digit years, which strftime("%Y") does not on every platform
    return _local(value).replace(tzinfo=None, microsecond=0).isoformat(sep=" ")


def decode(
    value: Union[str, datetime, None],
    log: Optional[structlog.stdlib.BoundLogger] = None,
) -> datetime:
    """
    Parse a stored timestamp into an aware local datetime.
    Drivers that already hand back datetime objects (MySQL DATETIME) are
    attached to the local zone unchanged. Returns ZERO_TIME on failure.
    """
    log = log or logger
    try:
        if isinstance(value, datetime):
            parsed = value.replace(microsecond=0)
        else:
            parsed = datetime.strptime(value, DATE_FORMAT)
        if parsed.tzinfo is None and parsed == datetime.min:
            return ZERO_TIME
        return _local(parsed)
    except (TypeError, ValueError, OverflowError) as e:
        log.error("Error while parsing datetime", value=repr(value), error=str(e))
        return ZERO_TIME
