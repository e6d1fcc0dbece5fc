"""Timestamp helpers shared by the ingestion adapter and the query layer.

Every timestamp hookdash writes uses one fixed-width UTC form,
``YYYY-MM-DDTHH:MM:SS.mmmZ``, so that plain string comparison orders them.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_DATE_PREFIX_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_ts(value: datetime) -> str:
    """Render a datetime in the log's fixed-width UTC form."""
    dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_ts(value: str | None) -> datetime | None:
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def minutes_ago(minutes: float, now: datetime | None = None) -> str:
    reference = now or utc_now()
    return format_ts(reference - timedelta(minutes=minutes))


def seconds_since(value: str | None, now: datetime | None = None) -> float | None:
    parsed = parse_ts(value)
    if parsed is None:
        return None
    reference = now or utc_now()
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    return (reference - parsed).total_seconds()


def date_part(value: str | None) -> str:
    """Return the ``YYYY-MM-DD`` prefix of a timestamp, or ``""``."""
    match = _DATE_PREFIX_RE.match((value or "").strip())
    return match.group(1) if match else ""
