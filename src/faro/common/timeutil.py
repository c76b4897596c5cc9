"""Timestamp parsing and human-relative ages."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; returns None when missing or unparsable.

    A trailing ``Z`` is accepted and naive values are taken as UTC.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def age_in_days(value: Optional[str], now: datetime) -> Optional[int]:
    """Whole days elapsed between ``value`` and ``now``; None when unparsable."""
    published = parse_timestamp(value)
    if published is None:
        return None
    return (as_utc(now) - published).days


def publish_age(value: Optional[str], now: datetime) -> str:
    """Render how long ago ``value`` was published, e.g. ``"7 days ago"``."""
    days = age_in_days(value, now)
    if days is None:
        return ""
    if days <= 0:
        return "today"
    if days == 1:
        return "1 day ago"
    if days < 60:
        return f"{days} days ago"
    if days < 730:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"
