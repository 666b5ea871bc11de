"""The record store — single source of truth for every health entity.

The store is constructed once at application start and passed to every
consumer (tools, insight service, HTTP routes). It holds the profile and
five collections, exposes CRUD-style mutations, and flushes the full
snapshot to its persistent slot after every mutation.

The store is a trusted-input container: it performs no validation and
raises no domain errors. Form-level validation lives in
``spitalverse.domains.health.domain_logic``.
"""

from __future__ import annotations

import copy
import dataclasses
import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from spitalverse.core.storage.models import (
    Appointment,
    HealthSummary,
    LabReport,
    MedicalDocument,
    Medication,
    PatientProfile,
    default_profile,
)
from spitalverse.core.storage.slots import StateSlotRepository, StorageError

logger = logging.getLogger(__name__)

DEFAULT_SLOT_NAME = "spitalverse-storage"

_T = TypeVar("_T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclasses.dataclass
class StoreState:
    """In-memory contents of the store."""

    profile: PatientProfile
    documents: list[MedicalDocument] = dataclasses.field(default_factory=list)
    medications: list[Medication] = dataclasses.field(default_factory=list)
    lab_reports: list[LabReport] = dataclasses.field(default_factory=list)
    appointments: list[Appointment] = dataclasses.field(default_factory=list)
    health_summaries: list[HealthSummary] = dataclasses.field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "documents": [d.to_dict() for d in self.documents],
            "medications": [m.to_dict() for m in self.medications],
            "labReports": [r.to_dict() for r in self.lab_reports],
            "appointments": [a.to_dict() for a in self.appointments],
            "healthSummaries": [s.to_dict() for s in self.health_summaries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoreState:
        profile_data = data.get("profile")
        return cls(
            profile=PatientProfile.from_dict(profile_data) if profile_data else default_profile(),
            documents=[MedicalDocument.from_dict(d) for d in data.get("documents") or []],
            medications=[Medication.from_dict(m) for m in data.get("medications") or []],
            lab_reports=[LabReport.from_dict(r) for r in data.get("labReports") or []],
            appointments=[Appointment.from_dict(a) for a in data.get("appointments") or []],
            health_summaries=[
                HealthSummary.from_dict(s) for s in data.get("healthSummaries") or []
            ],
        )


def empty_state() -> StoreState:
    """Default profile and no records."""
    return StoreState(profile=default_profile())


def _decode_state(data: dict[str, Any], source: str) -> StoreState:
    """Build a StoreState from snapshot data.

    Raises:
        StorageError: If the snapshot does not have the store's shape.
    """
    try:
        return StoreState.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"{source} is not a valid store snapshot: {exc!r}") from exc


class HealthRecordStore:
    """Persisted container for the profile and the five entity collections.

    Collections keep insertion order, except health summaries which are
    kept newest-first (``add_health_summary`` prepends).

    A mutation takes effect only once its snapshot has been written: the
    next state is built aside, flushed, and then swapped in. If the slot
    write raises, the in-memory state is unchanged.

    Usage::

        store = HealthRecordStore(StateSlotRepository(db))
        store.add_medication(med)
        store.update_medication(med.id, {"notes": "with food"})
        snapshot = store.export_data()
    """

    def __init__(
        self,
        slots: StateSlotRepository,
        *,
        slot_name: str = DEFAULT_SLOT_NAME,
        initial_state: Callable[[], StoreState] = empty_state,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Load the store from its slot, or seed it if the slot is empty.

        Args:
            slots: Durable slot backend.
            slot_name: Name of the slot holding this store.
            initial_state: Factory for the contents of a never-written slot.
            clock: Source of the current time (used for ``exportedAt``).

        Raises:
            StorageError: If an existing slot cannot be decoded.
        """
        self._slots = slots
        self._slot_name = slot_name
        self._clock = clock

        saved = slots.read(slot_name)
        if saved is None:
            self._state = empty_state()
            self._commit(initial_state())
            logger.info("Initialized new record store in slot %s", slot_name)
        else:
            self._state = _decode_state(saved, f"Slot {slot_name!r}")
            logger.info(
                "Loaded record store from slot %s (%d medications, %d lab reports, "
                "%d appointments, %d documents, %d summaries)",
                slot_name,
                len(self._state.medications),
                len(self._state.lab_reports),
                len(self._state.appointments),
                len(self._state.documents),
                len(self._state.health_summaries),
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _commit(self, state: StoreState) -> None:
        """Flush ``state`` to the slot, then make it current."""
        self._slots.write(self._slot_name, state.to_dict())
        self._state = state

    def _replace(self, **collections: Any) -> None:
        self._commit(dataclasses.replace(self._state, **collections))

    @property
    def slot_name(self) -> str:
        return self._slot_name

    # ------------------------------------------------------------------
    # Read accessors (copies; callers never hold live store entities)
    # ------------------------------------------------------------------

    @property
    def profile(self) -> PatientProfile:
        return copy.deepcopy(self._state.profile)

    @property
    def documents(self) -> list[MedicalDocument]:
        return copy.deepcopy(self._state.documents)

    @property
    def medications(self) -> list[Medication]:
        return copy.deepcopy(self._state.medications)

    @property
    def lab_reports(self) -> list[LabReport]:
        return copy.deepcopy(self._state.lab_reports)

    @property
    def appointments(self) -> list[Appointment]:
        return copy.deepcopy(self._state.appointments)

    @property
    def health_summaries(self) -> list[HealthSummary]:
        return copy.deepcopy(self._state.health_summaries)

    def get_medication(self, medication_id: str) -> Medication | None:
        return _find_copy(self._state.medications, medication_id)

    def get_lab_report(self, report_id: str) -> LabReport | None:
        return _find_copy(self._state.lab_reports, report_id)

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        return _find_copy(self._state.appointments, appointment_id)

    def get_document(self, document_id: str) -> MedicalDocument | None:
        return _find_copy(self._state.documents, document_id)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_profile(self, changes: dict[str, Any]) -> PatientProfile:
        """Shallow-merge ``changes`` (snake_case attribute names) into the profile."""
        self._replace(profile=dataclasses.replace(self._state.profile, **changes))
        return self.profile

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def add_document(self, document: MedicalDocument) -> None:
        self._replace(documents=[*self._state.documents, copy.deepcopy(document)])

    def delete_document(self, document_id: str) -> bool:
        documents, removed = _without(self._state.documents, document_id)
        if removed:
            self._replace(documents=documents)
        return removed

    # ------------------------------------------------------------------
    # Medications
    # ------------------------------------------------------------------

    def add_medication(self, medication: Medication) -> None:
        self._replace(medications=[*self._state.medications, copy.deepcopy(medication)])

    def update_medication(self, medication_id: str, changes: dict[str, Any]) -> bool:
        medications, updated = _merged(self._state.medications, medication_id, changes)
        if updated:
            self._replace(medications=medications)
        return updated

    def delete_medication(self, medication_id: str) -> bool:
        medications, removed = _without(self._state.medications, medication_id)
        if removed:
            self._replace(medications=medications)
        return removed

    # ------------------------------------------------------------------
    # Lab reports (created and deleted as a unit; no partial updates)
    # ------------------------------------------------------------------

    def add_lab_report(self, report: LabReport) -> None:
        self._replace(lab_reports=[*self._state.lab_reports, copy.deepcopy(report)])

    def delete_lab_report(self, report_id: str) -> bool:
        lab_reports, removed = _without(self._state.lab_reports, report_id)
        if removed:
            self._replace(lab_reports=lab_reports)
        return removed

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def add_appointment(self, appointment: Appointment) -> None:
        self._replace(appointments=[*self._state.appointments, copy.deepcopy(appointment)])

    def update_appointment(self, appointment_id: str, changes: dict[str, Any]) -> bool:
        appointments, updated = _merged(self._state.appointments, appointment_id, changes)
        if updated:
            self._replace(appointments=appointments)
        return updated

    def delete_appointment(self, appointment_id: str) -> bool:
        appointments, removed = _without(self._state.appointments, appointment_id)
        if removed:
            self._replace(appointments=appointments)
        return removed

    # ------------------------------------------------------------------
    # Health summaries (newest first)
    # ------------------------------------------------------------------

    def add_health_summary(self, summary: HealthSummary) -> None:
        """Insert ``summary`` at index 0; readers treat index 0 as latest."""
        self._replace(
            health_summaries=[copy.deepcopy(summary), *self._state.health_summaries]
        )

    @property
    def latest_summary(self) -> HealthSummary | None:
        if not self._state.health_summaries:
            return None
        return copy.deepcopy(self._state.health_summaries[0])

    # ------------------------------------------------------------------
    # Export / import / wipe
    # ------------------------------------------------------------------

    def export_data(self) -> str:
        """Serialize every collection plus an ``exportedAt`` timestamp.

        Apart from ``exportedAt`` the output depends only on current state.
        """
        snapshot = self._state.to_dict()
        snapshot["exportedAt"] = self._clock().isoformat()
        return json.dumps(snapshot, indent=2, ensure_ascii=False)

    def import_data(self, exported: str) -> None:
        """Replace the whole store with a snapshot produced by ``export_data``.

        Raises:
            StorageError: If ``exported`` is not a JSON object with the
                store's shape. The current state is left untouched in
                that case.
        """
        try:
            data = json.loads(exported)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Import is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError("Import must be a JSON object")

        data.pop("exportedAt", None)
        self._commit(_decode_state(data, "Import"))
        logger.info("Imported record store snapshot into slot %s", self._slot_name)

    def clear_all_data(self) -> None:
        """Empty every collection and reset the profile to the default profile.

        Irreversible: the previous contents of the slot are overwritten.
        """
        self._commit(empty_state())
        logger.info("Cleared all data in slot %s", self._slot_name)


# ---------------------------------------------------------------------------
# Collection helpers
# ---------------------------------------------------------------------------

def _find_copy(items: list[_T], entity_id: str) -> _T | None:
    for item in items:
        if item.id == entity_id:  # type: ignore[attr-defined]
            return copy.deepcopy(item)
    return None


def _without(items: list[_T], entity_id: str) -> tuple[list[_T], bool]:
    kept = [item for item in items if item.id != entity_id]  # type: ignore[attr-defined]
    return kept, len(kept) != len(items)


def _merged(items: list[_T], entity_id: str, changes: dict[str, Any]) -> tuple[list[_T], bool]:
    updated = False
    result: list[_T] = []
    for item in items:
        if item.id == entity_id:  # type: ignore[attr-defined]
            item = dataclasses.replace(item, **changes)  # type: ignore[type-var]
            updated = True
        result.append(item)
    return result, updated
