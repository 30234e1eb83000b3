"""Validation module

Shared rule set for the public signup flow and the administrative edit flow.
"""

from anmeldung.validation.duplicates import duplicate_ids, is_duplicate
from anmeldung.validation.eligibility import (
    EligibilityWindow,
    eligibility_window,
    is_year_allowed,
)
from anmeldung.validation.engine import (
    ValidationResult,
    collect_errors,
    validate_all,
    validate_contact,
    validate_entry,
    validate_field,
)
from anmeldung.validation.fields import (
    is_non_empty_text,
    is_valid_birth_year,
    is_valid_email,
    is_valid_gender_code,
    is_valid_phone,
    normalize_name,
)

__all__ = [
    "EligibilityWindow",
    "ValidationResult",
    "collect_errors",
    "duplicate_ids",
    "eligibility_window",
    "is_duplicate",
    "is_non_empty_text",
    "is_valid_birth_year",
    "is_valid_email",
    "is_valid_gender_code",
    "is_valid_phone",
    "is_year_allowed",
    "normalize_name",
    "validate_all",
    "validate_contact",
    "validate_entry",
    "validate_field",
]
