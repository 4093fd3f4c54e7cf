"""Timestamp utilities - Akahu uses millisecond-resolution UTC ISO 8601 timestamps"""

from datetime import datetime, timezone


def ensure_utc(value: datetime) -> datetime:
    """Convert an aware datetime to UTC; naive datetimes are ambiguous and rejected"""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"Timestamp {value.isoformat()} has no timezone")
    return value.astimezone(timezone.utc)


def floor_to_millisecond(value: datetime) -> datetime:
    """Drop sub-millisecond digits"""
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def format_timestamp(value: datetime) -> str:
    """
    Format as Akahu does, e.g. 2025-01-01T11:59:59.999Z.

    Sub-millisecond digits are floored. At Akahu's millisecond resolution this
    keeps both range semantics intact: an exclusive start of 12:00:00.0005
    and one of 12:00:00.000 admit exactly the same transactions, and the same
    holds for an inclusive end.
    """
    value = floor_to_millisecond(ensure_utc(value))
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(text: str) -> datetime:
    """
    Parse an ISO 8601 timestamp with an offset ("Z" or "+hh:mm") into UTC.

    Raises:
        ValueError: If the text is not ISO 8601 or carries no offset
    """
    return ensure_utc(datetime.fromisoformat(text))
