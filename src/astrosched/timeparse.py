"""Date/time parsing for user input."""

from __future__ import annotations

from datetime import datetime

# yyyy-MM-dd HH:mm
DEFAULT_FORMAT = "%Y-%m-%d %H:%M"


def parse_datetime(text: str, fmt: str = DEFAULT_FORMAT) -> datetime:
    """Parse ``text`` with ``fmt``, raising ValueError if it doesn't match."""
    return datetime.strptime(text.strip(), fmt)


def parse_datetime_or_now(
    text: str,
    fmt: str = DEFAULT_FORMAT,
    now: datetime | None = None,
) -> tuple[datetime, bool]:
    """Lenient parse used by the interactive shell.

    Unparsable input falls back to the current time, truncated to the minute.

    Returns (value, parsed_ok).
    """
    try:
        return parse_datetime(text, fmt), True
    except ValueError:
        if now is None:
            now = datetime.now()
        return now.replace(second=0, microsecond=0), False


def format_datetime(value: datetime, fmt: str = DEFAULT_FORMAT) -> str:
    return value.strftime(fmt)

