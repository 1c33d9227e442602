"""Timestamp helpers bound to the configured application timezone.

The domain works with aware datetimes; the database columns store the
localized wall-clock time without ``tzinfo``.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

logger = logging.getLogger(__name__)

_FIXED_OFFSET = re.compile(
    r"^(?:UTC|GMT)?\s*(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def _parse_timezone(name: str) -> tzinfo:
    if not name or name.upper() in {"UTC", "Z", "GMT"}:
        return timezone.utc

    offset = _FIXED_OFFSET.match(name)
    if offset:
        delta = timedelta(
            hours=int(offset.group("hours")), minutes=int(offset.group("minutes") or 0)
        )
        return timezone(-delta if offset.group("sign") == "-" else delta)

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r, falling back to UTC", name)
        return timezone.utc


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone named by ``APP_TIMEZONE``: an IANA name or a ``UTC+HH:MM`` offset."""

    return _parse_timezone((get_settings().app_timezone or "").strip())


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert to (aware input) the application timezone."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the application-local wall-clock time of ``value`` for storage."""

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None
