"""Timestamp rendering for ``--time-format``."""

from __future__ import annotations

from datetime import UTC, datetime

NOT_AVAILABLE = "N/A"
HUMAN_LAYOUT = "%Y-%m-%d %H:%M:%S UTC"

# Epoch values above this are taken to be milliseconds.
_MILLIS_THRESHOLD = 1e12


def to_datetime(value: datetime | int | float | str | None) -> datetime | None:
    """Normalize API timestamps (datetime, epoch seconds/millis, RFC 3339)."""
    if value is None or value == "" or value == 0:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            return to_datetime(int(stripped))
        parsed = datetime.fromisoformat(stripped.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    seconds = value / 1000 if value > _MILLIS_THRESHOLD else value
    return datetime.fromtimestamp(seconds, tz=UTC)


def format_timestamp(
    value: datetime | int | float | str | None,
    time_format: str = "human",
) -> str:
    """Render ``value`` as ``human``, ``iso8601`` or ``epoch``; missing is ``N/A``."""
    try:
        moment = to_datetime(value)
    except ValueError:
        return str(value)
    if moment is None:
        return NOT_AVAILABLE
    moment = moment.astimezone(UTC)
    if time_format == "epoch":
        return str(int(moment.timestamp()))
    if time_format == "iso8601":
        return moment.strftime("%Y-%m-%dT%H:%M:%SZ")
    return moment.strftime(HUMAN_LAYOUT)
