"""Tests for age derivation and profile edit validation."""

from __future__ import annotations

from datetime import date

import pytest

from spitalverse.domains.health.domain_logic.errors import ProfileValidationError
from spitalverse.domains.health.domain_logic.profile import calculate_age, validate_profile_changes


class TestCalculateAge:
    def test_day_before_birthday(self):
        assert calculate_age("1997-03-28", date(2024, 3, 27)) == 26

    def test_on_birthday(self):
        assert calculate_age("1997-03-28", date(2024, 3, 28)) == 27

    def test_accepts_date_and_datetime_strings(self):
        assert calculate_age(date(2000, 1, 1), date(2025, 1, 10)) == 25
        assert calculate_age("2000-01-01T00:00:00Z", date(2025, 1, 10)) == 25

    @pytest.mark.parametrize("value", [None, "", "not-a-date"])
    def test_missing_or_invalid(self, value):
        assert calculate_age(value, date(2025, 1, 10)) is None


class TestValidateProfileChanges:
    def test_valid_changes(self):
        validate_profile_changes({"full_name": "Alex", "gender": "female", "blood_group": "AB-"})

    def test_empty_name(self):
        with pytest.raises(ProfileValidationError, match="Full name"):
            validate_profile_changes({"full_name": "  "})

    def test_unknown_gender(self):
        with pytest.raises(ProfileValidationError, match="Gender"):
            validate_profile_changes({"gender": "unknown"})

    def test_unknown_blood_group(self):
        with pytest.raises(ProfileValidationError, match="Blood group"):
            validate_profile_changes({"blood_group": "C+"})

    def test_bad_birth_date(self):
        with pytest.raises(ProfileValidationError, match="date of birth"):
            validate_profile_changes({"date_of_birth": "28/03/1997"})

    def test_id_is_immutable(self):
        with pytest.raises(ProfileValidationError, match="id"):
            validate_profile_changes({"id": "other"})

    def test_unknown_field(self):
        with pytest.raises(ProfileValidationError, match="Unknown profile fields"):
            validate_profile_changes({"shoe_size": 42})
