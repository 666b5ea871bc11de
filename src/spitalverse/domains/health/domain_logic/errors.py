"""Input validation errors raised before a record reaches the store."""

from __future__ import annotations


class InputValidationError(ValueError):
    """A user-entered record or request is not submittable."""


class LabReportValidationError(InputValidationError):
    pass


class MedicationValidationError(InputValidationError):
    pass


class AppointmentValidationError(InputValidationError):
    pass


class DocumentValidationError(InputValidationError):
    pass


class ProfileValidationError(InputValidationError):
    pass


class SymptomInputError(InputValidationError):
    pass


class ConfirmationError(InputValidationError):
    """A destructive operation was requested without the exact confirmation."""
