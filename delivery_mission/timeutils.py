"""Time conversion utilities."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Asia/Seoul".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"invalid timezone: {tz_name!r}. Example: Asia/Seoul") from exc


def dt_from_epoch_ms(epoch_ms: int, tz_name: str) -> datetime:
    """Convert epoch milliseconds to timezone-aware datetime."""

    tz = tzinfo_from_name(tz_name)
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tz)


def epoch_ms_from_dt(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Args:
        dt: Datetime. If naive, will be treated as UTC (discouraged).

    Returns:
        Epoch milliseconds.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)
