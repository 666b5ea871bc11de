"""Audit logger — LLM disclosure and deletion tracking.

Every insight request records whether health data left this machine for
the external LLM, and every destructive operation records what was
removed. Rows never contain raw health data:

* ``input_hash``    — SHA-256 of the canonical JSON request body.
* ``llm_disclosed`` — True when the request was forwarded to the provider.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from spitalverse.core.storage.database import HealthDatabase

logger = logging.getLogger(__name__)


def _hash_input(data: Any) -> str:
    """SHA-256 hash of canonical JSON, or empty string if not serializable."""
    try:
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()
    except (TypeError, ValueError):
        return ""


@dataclass
class AuditEvent:
    """A single audit log entry."""

    action: str                          # 'llm_request' | 'data_delete'
    endpoint: str = ""
    input_hash: str = ""
    llm_provider: str | None = None
    llm_disclosed: bool = False
    duration_ms: float | None = None
    status: str = "ok"                   # 'ok' | 'unavailable' | 'error'
    error_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class AuditLogger:
    """Records audit events to the ``audit_log`` SQLite table.

    Usage::

        audit = AuditLogger(health_db)
        audit.log_llm_request(
            endpoint="generate-summary",
            request_body=payload,
            llm_provider="openrouter",
            llm_disclosed=True,
        )
    """

    def __init__(self, database: HealthDatabase) -> None:
        self._db = database

    def log_event(self, event: AuditEvent) -> str:
        """Insert an audit event and return its UUID (empty string on failure).

        Audit writes never break the request they describe.
        """
        event_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        metadata_json = (
            json.dumps(event.metadata, separators=(",", ":")) if event.metadata else None
        )

        try:
            conn = self._db.connection
            conn.execute(
                """INSERT INTO audit_log
                   (id, timestamp, action, endpoint, input_hash, llm_provider,
                    llm_disclosed, duration_ms, status, error_type, metadata_json)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event_id,
                    now,
                    event.action,
                    event.endpoint or None,
                    event.input_hash or None,
                    event.llm_provider,
                    1 if event.llm_disclosed else 0,
                    event.duration_ms,
                    event.status,
                    event.error_type,
                    metadata_json,
                ),
            )
            conn.commit()
        except Exception:
            logger.exception("Failed to write audit event — event lost")
            return ""

        return event_id

    def log_llm_request(
        self,
        endpoint: str,
        request_body: Any = None,
        *,
        llm_provider: str | None = None,
        llm_disclosed: bool = False,
        duration_ms: float | None = None,
        status: str = "ok",
        error_type: str | None = None,
    ) -> str:
        """Log one insight endpoint call (the body is hashed, never stored)."""
        return self.log_event(AuditEvent(
            action="llm_request",
            endpoint=endpoint,
            input_hash=_hash_input(request_body) if request_body is not None else "",
            llm_provider=llm_provider,
            llm_disclosed=llm_disclosed,
            duration_ms=duration_ms,
            status=status,
            error_type=error_type,
        ))

    def log_data_delete(
        self,
        *,
        endpoint: str = "",
        entity: str = "",
        count: int = 0,
    ) -> str:
        """Log a deletion (single entity or a full wipe)."""
        return self.log_event(AuditEvent(
            action="data_delete",
            endpoint=endpoint,
            metadata={"entity": entity, "records_deleted": count},
        ))

    def get_events(
        self,
        *,
        action: str | None = None,
        endpoint: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Query audit events, newest first."""
        conditions: list[str] = []
        params: list[Any] = []
        if action:
            conditions.append("action = ?")
            params.append(action)
        if endpoint:
            conditions.append("endpoint = ?")
            params.append(endpoint)

        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        query = f"SELECT * FROM audit_log{where} ORDER BY timestamp DESC LIMIT ?"
        params.append(limit)

        rows = self._db.connection.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def count_disclosures(self) -> int:
        """How many times health data was sent to the external LLM."""
        row = self._db.connection.execute(
            "SELECT COUNT(*) FROM audit_log WHERE llm_disclosed = 1"
        ).fetchone()
        return row[0]
