"""
Centralized DateTime Utilities
==============================

Wall-clock handling for the inspection core. Shift boundaries, image folder
names and production log file names are all local-time concepts, so every
wall-clock read goes through `now()` which uses the configured timezone.

Functions:
- now(): Returns timezone-aware datetime in the line's local timezone
- monotonic(): Monotonic seconds for timeouts and liveness checks
- to_iso(): Convert datetime object to ISO 8601 string
- parse_iso(): Safely parse ISO 8601 string to datetime
"""
import logging
import time
import zoneinfo
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Optional

from ..core.config import get_settings

logger = logging.getLogger(__name__)


def _get_app_timezone() -> tzinfo:
    """
    Get the line timezone from config.
    Returns timezone object (defaults to UTC if invalid).
    """
    tz_str = get_settings().local_timezone

    if tz_str.upper() == "UTC":
        return dt_timezone.utc

    try:
        return zoneinfo.ZoneInfo(tz_str)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Invalid timezone '{tz_str}', falling back to UTC")
        return dt_timezone.utc


def now() -> datetime:
    """
    Get current datetime with the configured line timezone.

    Returns:
        timezone-aware datetime object
    """
    return datetime.now(_get_app_timezone())


def monotonic() -> float:
    return time.monotonic()


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to ISO 8601 string.
    If datetime is naive, assumes the line timezone.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_get_app_timezone())

    if dt.tzinfo == dt_timezone.utc:
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return dt.isoformat(timespec="milliseconds")


def parse_iso(dt_str: Optional[str]) -> Optional[datetime]:
    """
    Parse ISO 8601 string to datetime object.
    If string is naive, assumes the line timezone.

    Returns:
        timezone-aware datetime object, or None if parsing fails
    """
    if not dt_str:
        return None

    try:
        dt = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_get_app_timezone())
    return dt
