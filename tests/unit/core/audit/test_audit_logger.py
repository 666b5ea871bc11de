"""Tests for the AuditLogger and related utilities."""

from __future__ import annotations

import json
import time

import pytest

from spitalverse.core.audit.logger import AuditEvent, AuditLogger, _hash_input
from spitalverse.core.storage.database import HealthDatabase


# ---------------------------------------------------------------------------
# _hash_input tests
# ---------------------------------------------------------------------------

class TestHashInput:
    def test_hashes_dict(self):
        h = _hash_input({"key": "value"})
        assert isinstance(h, str)
        assert len(h) == 64  # SHA-256 hex

    def test_deterministic(self):
        data = {"a": 1, "b": 2}
        assert _hash_input(data) == _hash_input(data)

    def test_order_independent(self):
        """Canonical JSON sorts keys, so order doesn't matter."""
        assert _hash_input({"z": 1, "a": 2}) == _hash_input({"a": 2, "z": 1})

    def test_different_inputs_differ(self):
        assert _hash_input({"a": 1}) != _hash_input({"a": 2})

    def test_non_serializable_returns_empty(self):
        assert _hash_input(object()) == ""


# ---------------------------------------------------------------------------
# AuditLogger.log_event / log_llm_request
# ---------------------------------------------------------------------------

class TestLogEvent:
    def test_log_event_returns_uuid(self, audit_logger):
        eid = audit_logger.log_event(AuditEvent(action="llm_request", endpoint="health-tips"))
        assert isinstance(eid, str)
        assert len(eid) == 36

    def test_llm_request_retrievable(self, audit_logger):
        audit_logger.log_llm_request(
            endpoint="generate-summary",
            request_body={"profile": {"age": 27}},
            llm_provider="openrouter",
            llm_disclosed=True,
            duration_ms=150.5,
        )
        events = audit_logger.get_events()
        assert len(events) == 1
        assert events[0]["action"] == "llm_request"
        assert events[0]["endpoint"] == "generate-summary"
        assert events[0]["llm_provider"] == "openrouter"
        assert events[0]["llm_disclosed"] == 1
        assert events[0]["status"] == "ok"

    def test_request_body_is_hashed_not_stored(self, audit_logger):
        body = {"symptoms": "headache and nausea"}
        audit_logger.log_llm_request(endpoint="symptom-checker", request_body=body)
        row = audit_logger.get_events()[0]
        assert row["input_hash"] == _hash_input(body)
        assert "headache" not in json.dumps(row)

    def test_unavailable_status_and_error_type(self, audit_logger):
        audit_logger.log_llm_request(
            endpoint="health-tips", status="error", error_type="TimeoutError"
        )
        row = audit_logger.get_events()[0]
        assert row["status"] == "error"
        assert row["error_type"] == "TimeoutError"
        assert row["llm_disclosed"] == 0

    def test_write_failure_returns_empty_string(self):
        db = HealthDatabase(":memory:")
        logger = AuditLogger(db)  # never initialized
        assert logger.log_llm_request(endpoint="health-tips") == ""


# ---------------------------------------------------------------------------
# AuditLogger.log_data_delete
# ---------------------------------------------------------------------------

class TestLogDataDelete:
    def test_log_delete_event(self, audit_logger):
        eid = audit_logger.log_data_delete(
            endpoint="clear_all_data", entity="all", count=7
        )
        assert len(eid) == 36

        events = audit_logger.get_events(action="data_delete")
        assert len(events) == 1
        assert events[0]["endpoint"] == "clear_all_data"
        meta = json.loads(events[0]["metadata_json"])
        assert meta == {"entity": "all", "records_deleted": 7}


# ---------------------------------------------------------------------------
# AuditLogger.get_events (filtering) / count_disclosures
# ---------------------------------------------------------------------------

class TestGetEvents:
    def test_filter_by_action(self, audit_logger):
        audit_logger.log_llm_request(endpoint="health-tips")
        audit_logger.log_data_delete(endpoint="delete_medication", entity="medication", count=1)
        audit_logger.log_llm_request(endpoint="generate-summary")

        assert len(audit_logger.get_events(action="llm_request")) == 2
        assert len(audit_logger.get_events(action="data_delete")) == 1

    def test_filter_by_endpoint(self, audit_logger):
        audit_logger.log_llm_request(endpoint="health-tips")
        audit_logger.log_llm_request(endpoint="generate-summary")
        audit_logger.log_llm_request(endpoint="health-tips")
        assert len(audit_logger.get_events(endpoint="health-tips")) == 2

    def test_limit_respected(self, audit_logger):
        for _ in range(10):
            audit_logger.log_llm_request(endpoint="health-tips")
        assert len(audit_logger.get_events(limit=3)) == 3

    def test_newest_first(self, audit_logger):
        audit_logger.log_llm_request(endpoint="first")
        # Tiny sleep to ensure different timestamps
        time.sleep(0.01)
        audit_logger.log_llm_request(endpoint="second")

        events = audit_logger.get_events()
        assert [e["endpoint"] for e in events] == ["second", "first"]

    def test_count_disclosures(self, audit_logger):
        audit_logger.log_llm_request("a", llm_disclosed=True, llm_provider="openrouter")
        audit_logger.log_llm_request("b", llm_disclosed=False)
        audit_logger.log_llm_request("c", llm_disclosed=True, llm_provider="anthropic")
        assert audit_logger.count_disclosures() == 2


@pytest.mark.parametrize("status", ["ok", "unavailable", "error"])
def test_every_insight_status_is_storable(audit_logger, status):
    audit_logger.log_llm_request(endpoint="health-tips", status=status)
    assert audit_logger.get_events()[0]["status"] == status
