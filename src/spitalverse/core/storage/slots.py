"""Named persistent slots — durable storage for whole-store snapshots.

A slot is one row keyed by name whose payload is the JSON serialization of
the entire record store. Writes are committed before returning so a
completed mutation survives a process restart.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from spitalverse.core.storage.database import HealthDatabase
from spitalverse.core.storage.encryption import EncryptionError, PayloadEncryptor

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a slot cannot be read back into a state mapping."""


class StateSlotRepository:
    """Reads and writes named JSON slots, optionally encrypted at rest.

    Usage::

        db = HealthDatabase(":memory:")
        db.initialize()
        slots = StateSlotRepository(db)
        slots.write("spitalverse-storage", {"profile": {...}})
        state = slots.read("spitalverse-storage")
    """

    def __init__(
        self,
        database: HealthDatabase,
        encryptor: PayloadEncryptor | None = None,
    ) -> None:
        self._db = database
        self._enc = encryptor

    @property
    def encrypted(self) -> bool:
        return self._enc is not None

    def read(self, name: str) -> dict[str, Any] | None:
        """Return the decoded slot contents, or None if the slot is empty.

        Raises:
            StorageError: If the payload is encrypted without a configured
                key, cannot be decrypted, or is not a JSON object.
        """
        row = self._db.connection.execute(
            "SELECT payload, encrypted FROM state_slots WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None

        payload = row["payload"]
        if row["encrypted"]:
            if self._enc is None:
                raise StorageError(
                    f"Slot {name!r} is encrypted but no ENCRYPTION_KEY is configured"
                )
            try:
                payload = self._enc.decrypt(payload)
            except EncryptionError as exc:
                raise StorageError(f"Cannot decrypt slot {name!r}: {exc}") from exc

        try:
            state = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Slot {name!r} does not hold valid JSON: {exc}") from exc
        if not isinstance(state, dict):
            raise StorageError(f"Slot {name!r} does not hold a JSON object")
        return state

    def write(self, name: str, state: dict[str, Any]) -> None:
        """Serialize ``state`` into the slot and commit."""
        payload = json.dumps(state, separators=(",", ":"), ensure_ascii=False)
        encrypted = 0
        if self._enc is not None:
            payload = self._enc.encrypt(payload)
            encrypted = 1

        conn = self._db.connection
        conn.execute(
            """INSERT INTO state_slots (name, payload, encrypted, updated_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(name) DO UPDATE SET
                   payload = excluded.payload,
                   encrypted = excluded.encrypted,
                   updated_at = excluded.updated_at""",
            (name, payload, encrypted, datetime.now(timezone.utc).isoformat()),
        )
        conn.commit()
        logger.debug("Slot %s flushed (%d bytes)", name, len(payload))

    def delete(self, name: str) -> bool:
        """Remove a slot entirely. Returns True if a row was deleted."""
        conn = self._db.connection
        cursor = conn.execute("DELETE FROM state_slots WHERE name = ?", (name,))
        conn.commit()
        return cursor.rowcount > 0

    def list_slots(self) -> list[str]:
        rows = self._db.connection.execute(
            "SELECT name FROM state_slots ORDER BY name"
        ).fetchall()
        return [row["name"] for row in rows]
