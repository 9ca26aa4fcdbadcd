"""UTC timestamp helpers.

Timestamps are stored as ISO-8601 strings normalised to UTC, so they compare
and sort the same way as the instants they represent.
"""

from datetime import datetime
from typing import Optional

import pytz


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def to_utc_iso(value: datetime) -> str:
    """Normalise a datetime to a UTC ISO string; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    else:
        value = value.astimezone(pytz.utc)
    return value.isoformat()


def parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed


def is_past(value: str, now: Optional[datetime] = None) -> bool:
    """Return True when the stored instant lies strictly before ``now``."""
    now = now or utc_now()
    return now > parse_iso(value)
