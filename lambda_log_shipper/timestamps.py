"""Timestamp parsing shared by the builders."""

from datetime import datetime, timezone


def parse_iso_timestamp(value: str) -> datetime:
    """Parse '2017-04-26T10:41:09.023Z' style timestamps. Raises ValueError."""
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def parse_event_timestamp(value) -> datetime | None:
    """Parse a subscription event timestamp (epoch millis or ISO-8601).

    Returns None when the value cannot be read.
    """
    if value is None:
        return None
    text = str(value).strip()
    try:
        return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        pass
    try:
        return parse_iso_timestamp(text)
    except ValueError:
        return None
