from __future__ import annotations

from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Return a UTC DateTime literal with millisecond precision, e.g. 2024-05-01T09:30:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
