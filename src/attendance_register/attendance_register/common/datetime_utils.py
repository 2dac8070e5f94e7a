from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.constants import DATE_KEY_FORMAT
from ..core.exceptions import ValidationError


def parse_date_key(value: str) -> date:
    """Parse a YYYY-MM-DD string into date."""
    try:
        parsed = datetime.strptime(value or "", DATE_KEY_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None
    # strptime accepts unpadded fields like 2024-5-6; keys must stay canonical.
    if parsed.strftime(DATE_KEY_FORMAT) != value:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    return parsed


def format_date_key(value: date | datetime) -> str:
    """Canonical register key for the *local* calendar day of ``value``.

    Aware datetimes are converted to local time first so a timestamp shortly
    after midnight does not land on the previous (UTC) day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        value = value.date()
    return value.strftime(DATE_KEY_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_key() -> str:
    return format_date_key(now_local())


def is_weekend(date_key: str) -> bool:
    return parse_date_key(date_key).weekday() >= 5


def require_weekday(date_key: str) -> str:
    if is_weekend(date_key):
        raise ValidationError("Selected date is a Saturday or Sunday. Please choose a weekday.")
    return date_key


def default_register_date(today: date | None = None) -> str:
    """Today, or the previous Friday when today falls on a weekend."""
    today = today or now_local().date()
    if today.weekday() == 5:
        today -= timedelta(days=1)
    elif today.weekday() == 6:
        today -= timedelta(days=2)
    return format_date_key(today)
