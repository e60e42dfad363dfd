"""Date and time utility functions."""
import re
from datetime import datetime, timezone

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a timezone-aware datetime.

    Args:
        value: Timestamp string (e.g., "2024-03-10T10:30:00Z", "2024-03-10")

    Returns:
        datetime object in UTC when no offset was given

    Raises:
        ValueError: If the timestamp is empty or not ISO 8601
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp format: {value!r}")

    text = value.strip()
    try:
        if _DATE_ONLY.match(text):
            parsed = datetime.strptime(text, "%Y-%m-%d")
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp format: {value}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_registration_date(moment: datetime) -> str:
    """
    Format a registration timestamp for display.

    Args:
        moment: Parsed registration timestamp

    Returns:
        Date string such as "March 10, 2024"
    """
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"
