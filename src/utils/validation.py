"""Data validation utilities for registration records."""
from typing import Any, Dict, Optional

from src.utils.date_utils import parse_timestamp
from src.utils.exceptions import ValidationError

REQUIRED_FIELDS = ["name", "email", "registration_type", "created_at"]
VALID_REGISTRATION_TYPES = ["student", "professional"]


def resolve_record_id(record_data: Dict[str, Any]) -> str:
    """
    Resolve the record identifier from either wire naming.

    Args:
        record_data: Raw registration dictionary

    Returns:
        Identifier as a string (``id`` preferred over ``_id``)

    Raises:
        ValidationError: If neither key holds a usable identifier
    """
    for key in ("id", "_id"):
        value = record_data.get(key)
        if value is None:
            continue
        # Extended JSON exports wrap document ids as {"$oid": "..."}
        if isinstance(value, dict):
            value = value.get("$oid")
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            text = str(value).strip()
            if text:
                return text

    raise ValidationError("Missing required field: id")


def normalize_registration_type(value: Any) -> str:
    """
    Normalize a registration type to its canonical lowercase value.

    Args:
        value: Raw type value, e.g. "Student" or "professional"

    Returns:
        "student" or "professional"

    Raises:
        ValidationError: If value is not a recognized type
    """
    if not isinstance(value, str):
        raise ValidationError(f"Registration type must be a string: {value!r}")

    normalized = value.strip().lower()
    if normalized not in VALID_REGISTRATION_TYPES:
        raise ValidationError(
            f"Registration type must be one of {VALID_REGISTRATION_TYPES}, got: {value}"
        )
    return normalized


def clean_optional_text(value: Any) -> Optional[str]:
    """Return stripped text, or None for missing/blank values."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Expected text value, got: {value!r}")
    text = value.strip()
    return text or None


def validate_registration(record_data: Dict[str, Any]) -> bool:
    """
    Validate a raw registration dictionary against all rules.

    Args:
        record_data: Dictionary as received from the registration store

    Returns:
        True if valid

    Raises:
        ValidationError: If validation fails with detailed message
    """
    if not isinstance(record_data, dict):
        raise ValidationError("Registration data must be a dictionary")

    resolve_record_id(record_data)

    for field in REQUIRED_FIELDS:
        if record_data.get(field) is None:
            raise ValidationError(f"Missing required field: {field}")

    for field in ("name", "email"):
        value = record_data[field]
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field.capitalize()} cannot be empty")

    normalize_registration_type(record_data["registration_type"])

    try:
        parse_timestamp(record_data["created_at"])
    except ValueError as e:
        raise ValidationError(str(e)) from e

    clean_optional_text(record_data.get("company"))
    clean_optional_text(record_data.get("phone"))

    return True
