"""Roster DTOs for registration editing.

This module provides immutable data transfer objects for the roster being
edited on the client side, the responsible contact, and the per-entry error
records produced by the validation engine.
"""

import uuid
from dataclasses import dataclass, replace

from anmeldung.constants import ENTRY_FIELDS


@dataclass(frozen=True)
class ParticipantEntry:
    """Represents one participant within a roster being edited.

    The ``id`` is generated client-side, is stable for the lifetime of an
    editing session and is never reused for another entry.

    Attributes:
        id: Opaque entry identifier.
        first_name: First name as typed.
        last_name: Last name as typed.
        birth_year: Birth year as raw user input (validated later).
        gender: Gender code, "M" or "W" when valid.
    """

    id: str
    first_name: str = ""
    last_name: str = ""
    birth_year: str = ""
    gender: str = ""

    @classmethod
    def blank(cls) -> "ParticipantEntry":
        """Create an empty entry with a fresh identifier."""
        return cls(id=str(uuid.uuid4()))

    @property
    def is_blank(self) -> bool:
        """True if no name or birth year has been entered yet."""
        return not (
            self.first_name.strip() or self.last_name.strip() or self.birth_year.strip()
        )

    def with_value(self, field_name: str, value: str) -> "ParticipantEntry":
        """Return a copy with one field replaced.

        Raises:
            KeyError: If ``field_name`` is not an entry field.
        """
        if field_name not in ENTRY_FIELDS:
            raise KeyError(field_name)
        return replace(self, **{field_name: value})


@dataclass(frozen=True)
class ContactInfo:
    """Represents the responsible contact of a registration.

    Attributes:
        responsible_name: Name of the responsible person (coach).
        club_name: Club name, optional.
        email: Contact email address.
        phone: Contact phone number.
    """

    responsible_name: str = ""
    club_name: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class EntryErrorState:
    """Validation flags of one roster entry."""

    first_name_invalid: bool = False
    last_name_invalid: bool = False
    birth_year_invalid: bool = False
    gender_invalid: bool = False
    duplicate: bool = False

    @property
    def has_errors(self) -> bool:
        return (
            self.first_name_invalid
            or self.last_name_invalid
            or self.birth_year_invalid
            or self.gender_invalid
            or self.duplicate
        )

    def is_invalid(self, field_name: str) -> bool:
        """Return the flag belonging to an entry field."""
        return getattr(self, f"{field_name}_invalid")

    def with_flag(self, field_name: str, invalid: bool) -> "EntryErrorState":
        return replace(self, **{f"{field_name}_invalid": invalid})


@dataclass(frozen=True)
class ContactErrorState:
    """Validation flags of the contact block (club name is optional)."""

    responsible_name_invalid: bool = False
    email_invalid: bool = False
    phone_invalid: bool = False

    @property
    def has_errors(self) -> bool:
        return self.responsible_name_invalid or self.email_invalid or self.phone_invalid
