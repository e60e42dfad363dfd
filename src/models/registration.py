"""Registration data model."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from src.utils.date_utils import parse_timestamp
from src.utils.validation import (
    clean_optional_text,
    normalize_registration_type,
    resolve_record_id,
    validate_registration,
)

EMPTY_CELL = "—"


class RegistrationType(str, Enum):
    """Closed set of registration categories."""

    STUDENT = "student"
    PROFESSIONAL = "professional"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Registration:
    """One applicant submission, read-only once loaded."""

    id: str
    name: str
    email: str
    registration_type: RegistrationType
    created_at: str  # ISO 8601 format
    company: Optional[str] = None
    phone: Optional[str] = None
    submitted_at: datetime = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate registration data."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Registration ID cannot be empty")

        if not self.name or not self.name.strip():
            raise ValueError("Name cannot be empty")

        if not self.email or not self.email.strip():
            raise ValueError("Email cannot be empty")

        if not isinstance(self.registration_type, RegistrationType):
            raise ValueError(f"Invalid registration type: {self.registration_type!r}")

        # Validate ISO 8601 timestamp format
        try:
            submitted_at = parse_timestamp(self.created_at)
        except ValueError as e:
            raise ValueError(f"Invalid timestamp format: {self.created_at}") from e
        object.__setattr__(self, "submitted_at", submitted_at)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Registration":
        """
        Build a registration from its wire representation.

        Accepts both ``id`` and ``_id`` keys and any casing of the type.

        Raises:
            ValidationError: If the record is malformed
        """
        validate_registration(data)
        return cls(
            id=resolve_record_id(data),
            name=data["name"],
            email=data["email"],
            registration_type=RegistrationType(normalize_registration_type(data["registration_type"])),
            created_at=data["created_at"].strip(),
            company=clean_optional_text(data.get("company")),
            phone=clean_optional_text(data.get("phone")),
        )

    def is_student(self) -> bool:
        return self.registration_type is RegistrationType.STUDENT

    def is_professional(self) -> bool:
        return self.registration_type is RegistrationType.PROFESSIONAL

    def display_company(self) -> str:
        """Company is only shown for professional registrations."""
        if self.is_professional() and self.company:
            return self.company
        return EMPTY_CELL

    def display_phone(self) -> str:
        return self.phone or EMPTY_CELL
