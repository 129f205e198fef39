"""Timestamp formatting helpers."""

from datetime import datetime, timezone


def as_utc(timestamp: datetime) -> datetime:
    """Return timestamp in UTC. Naive values are taken to already be UTC."""

    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def rfc3339_utc(timestamp: datetime) -> str:
    """Format as RFC3339 with second precision and a Z suffix."""

    return as_utc(timestamp).strftime("%Y-%m-%dT%H:%M:%SZ")
