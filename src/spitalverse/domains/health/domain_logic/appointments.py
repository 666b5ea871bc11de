"""Appointment scheduling helpers.

Whether an appointment is upcoming is always derived from its date, time
and the current moment. The stored ``is_upcoming`` flag is only a cache.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from spitalverse.core.storage.models import Appointment, new_id
from spitalverse.domains.health.domain_logic.errors import AppointmentValidationError


def appointment_datetime(appointment: Appointment) -> datetime | None:
    """Naive local datetime of the appointment, or None if unparseable."""
    try:
        return datetime.fromisoformat(f"{appointment.date}T{appointment.time}")
    except ValueError:
        return None


def _local_wall_time(now: datetime) -> datetime:
    # Appointment times carry no offset and are read as local wall-clock time.
    return now.astimezone().replace(tzinfo=None)


def is_upcoming(appointment: Appointment, now: datetime) -> bool:
    """True when the appointment starts strictly after ``now``."""
    when = appointment_datetime(appointment)
    return when is not None and when > _local_wall_time(now)


def upcoming_appointments(appointments: Iterable[Appointment], now: datetime) -> list[Appointment]:
    """Future appointments, soonest first."""
    upcoming = [a for a in appointments if is_upcoming(a, now)]
    return sorted(upcoming, key=lambda a: appointment_datetime(a))  # type: ignore[arg-type,return-value]


def past_appointments(appointments: Iterable[Appointment], now: datetime) -> list[Appointment]:
    """Appointments that are not upcoming, most recent first."""
    past = [a for a in appointments if not is_upcoming(a, now)]
    return sorted(
        past,
        key=lambda a: appointment_datetime(a) or datetime.min,
        reverse=True,
    )


def build_appointment(
    *,
    doctor_name: str,
    specialty: str,
    date: str,
    time: str,
    location: str,
    now: datetime,
    notes: str | None = None,
    appointment_id: str | None = None,
) -> Appointment:
    """Validate form input and build an appointment with a fresh cache flag.

    Raises:
        AppointmentValidationError: On a missing doctor name or an
            unparseable date/time.
    """
    if not doctor_name.strip():
        raise AppointmentValidationError("Doctor name must not be empty")
    appointment = Appointment(
        id=appointment_id or new_id(),
        doctor_name=doctor_name.strip(),
        specialty=specialty.strip(),
        date=date,
        time=time,
        location=location.strip(),
        notes=notes or None,
    )
    if appointment_datetime(appointment) is None:
        raise AppointmentValidationError(f"Invalid appointment date/time: {date} {time}")
    appointment.is_upcoming = is_upcoming(appointment, now)
    return appointment
