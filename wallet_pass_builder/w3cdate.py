"""
W3C date strings as used by the pass descriptor.

Dates are written as ``YYYY-MM-DDTHH:MM+HH:MM``: no seconds, zero padded,
and always with an explicit numeric offset.
"""

import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Union

W3C_DATE_REGEX = re.compile(
    r"^20\d{2}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d(:[0-5]\d)?(Z|[+-][01]\d:[0-5]\d)$"
)

_W3C_PARTS_REGEX = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hours>\d{2}):(?P<mins>\d{2})(:\d{2})?"
    r"(?:(?P<utc>Z)|(?P<tz_sign>[+-])(?P<tz_hour>\d{2}):(?P<tz_min>\d{2}))$"
)


def is_valid_w3c_date(value) -> bool:
    """Checks that the given value is a string in W3C date format."""
    if not isinstance(value, str):
        return False
    return W3C_DATE_REGEX.match(value) is not None


def _parse_date_string(value: str) -> datetime:
    """Parses any ISO-8601 or RFC 2822 date string, raising TypeError if impossible."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        raise TypeError(f"Value {value!r} can't be converted into a date") from None


def get_w3c_date_string(value: Union[str, datetime]) -> str:
    """
    Converts a string or datetime into a W3C date string.

    Strings already in W3C format are returned unchanged. Naive datetimes are
    taken as local time.

    Raises:
        TypeError: when the value is neither a string nor a datetime, or the
            string can't be parsed as a date
    """
    if not isinstance(value, (str, datetime)):
        raise TypeError(
            f"Argument must be either a string or datetime, received {type(value).__name__}"
        )
    if isinstance(value, str):
        if is_valid_w3c_date(value):
            return value
        value = _parse_date_string(value)

    date = value if value.tzinfo is not None else value.astimezone()
    offset = date.utcoffset() or timedelta(0)
    offset_minutes = int(offset.total_seconds() // 60)
    sign = "-" if offset_minutes < 0 else "+"
    offset_hours, offset_rest = divmod(abs(offset_minutes), 60)
    return (
        f"{date.year:04d}-{date.month:02d}-{date.day:02d}"
        f"T{date.hour:02d}:{date.minute:02d}"
        f"{sign}{offset_hours:02d}:{offset_rest:02d}"
    )


def get_date_from_w3c_string(value: str) -> datetime:
    """
    Parses a W3C date string into an aware datetime in UTC.

    The instant is rebuilt from the wall clock fields and the explicit offset,
    never from the local timezone.
    """
    if not is_valid_w3c_date(value):
        raise TypeError(f"Date string {value!r} is not a valid W3C date string")
    match = _W3C_PARTS_REGEX.match(value)
    if not match:
        raise TypeError(f"Date string {value!r} is not a valid W3C date string")

    parts = match.groupdict()
    try:
        utc_date = datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hours"]),
            int(parts["mins"]),
            tzinfo=timezone.utc,
        )
    except ValueError as e:
        raise TypeError(f"Date string {value!r} is not a valid date: {e}") from None

    if parts["utc"]:
        return utc_date
    offset = timedelta(hours=int(parts["tz_hour"]), minutes=int(parts["tz_min"]))
    return utc_date - offset if parts["tz_sign"] == "+" else utc_date + offset


def to_datetime(value: Union[str, datetime]) -> datetime:
    """Coerces a W3C string, any parseable date string or a datetime into a datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        if is_valid_w3c_date(value):
            return get_date_from_w3c_string(value)
        return _parse_date_string(value)
    raise TypeError(
        f"Date value must be either a string or datetime, received {type(value).__name__}"
    )
