from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Return an aware datetime; naive values are taken to be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def as_bound(value: Optional[Union[date, datetime]]) -> Optional[datetime]:
    """
    Normalize a date-range bound.

    A bare ``date`` means midnight UTC of that day, the same instant a
    ``YYYY-MM-DD`` date input resolves to.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(ensure_utc(moment).timestamp() * 1000)


def timestamp_id(moment: datetime, prefix: Optional[str] = None) -> str:
    """
    Build a time-based identifier such as ``1717171717171`` or ``ORD-1717171717171``.
    """
    millis = str(epoch_millis(moment))
    return f"{prefix}-{millis}" if prefix else millis


def format_short_date(moment: datetime) -> str:
    """
    Day/month/year without zero padding (``5/1/2024``).
    """
    return f"{moment.day}/{moment.month}/{moment.year}"
