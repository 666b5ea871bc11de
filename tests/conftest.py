"""Shared test fixtures for Spitalverse Health tests."""

from __future__ import annotations

import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("OPENROUTER_API_KEY", "")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("DB_PATH", ":memory:")
    monkeypatch.setenv("ENCRYPTION_KEY", "")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")
    # Local wall-clock time is read from TZ; pin it so "now" is the same everywhere.
    monkeypatch.setenv("TZ", "UTC")
    if hasattr(time, "tzset"):
        time.tzset()

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from spitalverse.core.audit.logger import AuditLogger  # noqa: E402
from spitalverse.core.llm.client import StructuredLLMClient  # noqa: E402
from spitalverse.core.llm.providers.mock import MockProvider  # noqa: E402
from spitalverse.core.storage.database import HealthDatabase  # noqa: E402
from spitalverse.core.storage.encryption import PayloadEncryptor  # noqa: E402
from spitalverse.core.storage.slots import StateSlotRepository  # noqa: E402
from spitalverse.core.storage.store import HealthRecordStore  # noqa: E402

# A fixed "now" for everything time-dependent: 2025-01-10 09:00 UTC.
FIXED_NOW = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


# ---------------------------------------------------------------------------
# In-memory storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def health_db():
    """Create an in-memory HealthDatabase for testing."""
    db = HealthDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def encryption_key() -> str:
    return PayloadEncryptor.generate_key()


@pytest.fixture
def payload_encryptor(encryption_key: str) -> PayloadEncryptor:
    return PayloadEncryptor(encryption_key)


@pytest.fixture
def slots(health_db) -> StateSlotRepository:
    """Unencrypted slot repository backed by in-memory SQLite."""
    return StateSlotRepository(health_db)


@pytest.fixture
def store(slots, clock) -> HealthRecordStore:
    """A fresh record store (default profile, no records)."""
    return HealthRecordStore(slots, clock=clock)


@pytest.fixture
def audit_logger(health_db) -> AuditLogger:
    """Create an AuditLogger backed by in-memory SQLite."""
    return AuditLogger(health_db)


# ---------------------------------------------------------------------------
# LLM fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def mock_llm_client(mock_provider: MockProvider) -> StructuredLLMClient:
    """LLM client over a MockProvider; set ``mock_provider.response_content`` per test."""
    return StructuredLLMClient(provider=mock_provider, provider_name="mock")


# ---------------------------------------------------------------------------
# Local time zone
# ---------------------------------------------------------------------------

@pytest.fixture
def local_timezone(monkeypatch: pytest.MonkeyPatch):
    """Switch the process-local time zone; call with an IANA name."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _switch(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _switch
    _switch("UTC")
