"""Patient profile helpers: age derivation and edit validation."""

from __future__ import annotations

from datetime import date
from typing import Any

from spitalverse.core.storage.models import BLOOD_GROUPS, GENDERS, PatientProfile
from spitalverse.domains.health.domain_logic.errors import ProfileValidationError


def calculate_age(date_of_birth: str | date | None, today: date) -> int | None:
    """Calendar age on ``today``; None when the birth date is missing or unparseable.

    One year is subtracted while the birthday has not yet been reached in
    the current year.
    """
    if not date_of_birth:
        return None
    if isinstance(date_of_birth, str):
        try:
            born = date.fromisoformat(date_of_birth[:10])
        except ValueError:
            return None
    else:
        born = date_of_birth

    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def validate_profile_changes(changes: dict[str, Any]) -> None:
    """Reject edits that would leave the profile unusable.

    Raises:
        ProfileValidationError: On an empty name, an unknown gender or
            blood group, a malformed birth date, or an unknown field.
    """
    known = set(PatientProfile.__dataclass_fields__)
    unknown = set(changes) - known
    if unknown:
        raise ProfileValidationError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
    if "id" in changes:
        raise ProfileValidationError("The profile id cannot be changed")

    if "full_name" in changes and not str(changes["full_name"] or "").strip():
        raise ProfileValidationError("Full name must not be empty")
    if "gender" in changes and changes["gender"] not in GENDERS:
        raise ProfileValidationError(f"Gender must be one of: {', '.join(GENDERS)}")
    if "blood_group" in changes and changes["blood_group"] not in BLOOD_GROUPS:
        raise ProfileValidationError(f"Blood group must be one of: {', '.join(BLOOD_GROUPS)}")
    if changes.get("date_of_birth"):
        try:
            date.fromisoformat(changes["date_of_birth"])
        except ValueError as exc:
            raise ProfileValidationError(f"Invalid date of birth: {exc}") from exc
