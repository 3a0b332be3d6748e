from __future__ import annotations

from datetime import datetime, timedelta

MONTH_ABBREVIATIONS = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sep", "oct", "nov", "dic")


def parse_backend_datetime(value: str) -> datetime:
    normalized = value.strip().replace("Z", "+00:00")
    return datetime.fromisoformat(normalized)


def to_local_iso(dt: datetime) -> str:
    """Render ``dt`` as ``YYYY-MM-DDTHH:MM:SS`` with no offset, the form the backend expects."""
    return dt.replace(tzinfo=None, microsecond=0).isoformat(timespec="seconds")


def shift_back(reference: datetime, *, days: int = 0, hours: int = 0, minute_mark: int | None = None) -> datetime:
    shifted = reference - timedelta(days=days, hours=hours)
    if minute_mark is not None:
        shifted = shifted.replace(minute=minute_mark, second=0, microsecond=0)
    return shifted


def format_display_date(value: str) -> str:
    try:
        dt = parse_backend_datetime(value)
    except ValueError:
        return value
    month = MONTH_ABBREVIATIONS[dt.month - 1]
    return f"{dt.day} {month} {dt.year}, {dt.hour:02d}:{dt.minute:02d}"
