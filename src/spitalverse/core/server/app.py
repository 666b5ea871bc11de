"""Spitalverse Health MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastmcp import FastMCP

from spitalverse.core.audit.logger import AuditLogger
from spitalverse.core.config.settings import Settings, get_settings
from spitalverse.core.llm.client import StructuredLLMClient
from spitalverse.core.llm.provider import create_provider
from spitalverse.core.storage.database import HealthDatabase
from spitalverse.core.storage.encryption import EncryptionError, PayloadEncryptor
from spitalverse.core.storage.slots import StateSlotRepository
from spitalverse.core.storage.store import HealthRecordStore, empty_state
from spitalverse.domains.health.domain_logic.sample_records import demo_state
from spitalverse.domains.health.prompts.health_prompts import register_health_prompts
from spitalverse.domains.health.routes.insight_routes import register_insight_routes
from spitalverse.domains.health.services.insights import HealthInsightsService
from spitalverse.domains.health.services.record_insights import RecordInsightsService
from spitalverse.domains.health.tools.appointment_tools import register_appointment_tools
from spitalverse.domains.health.tools.audit_tools import register_audit_tools
from spitalverse.domains.health.tools.data_management_tools import (
    register_data_management_tools,
)
from spitalverse.domains.health.tools.document_tools import register_document_tools
from spitalverse.domains.health.tools.insight_tools import register_insight_tools
from spitalverse.domains.health.tools.lab_report_tools import register_lab_report_tools
from spitalverse.domains.health.tools.medication_tools import register_medication_tools
from spitalverse.domains.health.tools.profile_tools import register_profile_tools

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_llm_client(settings: Settings) -> StructuredLLMClient | None:
    """Create the LLM client for the configured provider.

    Returns None when the provider is ``mock`` or its API key is empty;
    the insight endpoints then answer ``unavailable``.
    """
    if settings.llm_provider == "mock":
        logger.info("LLM provider is 'mock'; AI insights disabled, using local rules")
        return None

    if settings.llm_provider == "openrouter":
        api_key = settings.openrouter_api_key
        model = settings.openrouter_model
        base_url = settings.openrouter_base_url
    elif settings.llm_provider == "anthropic":
        api_key = settings.anthropic_api_key
        model = settings.anthropic_model
        base_url = ""
    elif settings.llm_provider == "openai":
        api_key = settings.openai_api_key
        model = settings.openai_model
        base_url = ""
    else:  # pragma: no cover
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

    if not api_key:
        logger.info(
            "No API key configured for provider '%s'; AI insights disabled, using local rules",
            settings.llm_provider,
        )
        return None

    provider = create_provider(
        provider_name=settings.llm_provider,
        api_key=api_key,
        model=model,
        base_url=base_url,
    )
    return StructuredLLMClient(provider=provider, provider_name=settings.llm_provider)


def create_app(
    *,
    store_override: HealthRecordStore | None = None,
    llm_client_override: StructuredLLMClient | None = None,
    audit_logger_override: AuditLogger | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> FastMCP:
    """Create and configure the Spitalverse Health MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Opens the SQLite database (record slot and audit trail)
    3. Loads the record store from its slot (seeding demo data if enabled)
    4. Creates the LLM client, if a provider credential is configured
    5. Registers HTTP insight routes, MCP tools and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        "Spitalverse Health",
        instructions=(
            "Spitalverse personal health record server. Manages the patient's "
            "profile, medications, lab reports, appointments and documents, and "
            "provides health summaries, daily tips and symptom guidance, using an "
            "external LLM when configured and local rules otherwise."
        ),
    )

    # --- Storage (health record slot + audit trail) ---
    health_db = HealthDatabase(settings.db_path)
    health_db.initialize()
    logger.info(
        "Health database ready: %s (schema v%d)",
        settings.db_path,
        health_db.get_schema_version(),
    )

    if store_override is not None:
        store = store_override
    else:
        encryptor: PayloadEncryptor | None = None
        if settings.encryption_key:
            try:
                encryptor = PayloadEncryptor(settings.encryption_key)
            except EncryptionError as exc:
                logger.error("Invalid ENCRYPTION_KEY: %s", exc)
                raise
        else:
            logger.info(
                "No ENCRYPTION_KEY configured; the record slot is stored unencrypted. "
                "Set ENCRYPTION_KEY to encrypt it at rest."
            )
        store = HealthRecordStore(
            StateSlotRepository(health_db, encryptor),
            slot_name=settings.storage_slot,
            initial_state=demo_state if settings.seed_demo_data else empty_state,
            clock=clock,
        )

    audit_logger = audit_logger_override or AuditLogger(health_db)

    # --- LLM ---
    if llm_client_override is not None:
        llm_client: StructuredLLMClient | None = llm_client_override
    else:
        llm_client = build_llm_client(settings)

    insights = HealthInsightsService(llm_client, audit_logger)
    record_insights = RecordInsightsService(store, insights, clock=clock)

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": "Spitalverse Health",
            "version": "0.1.0",
            "storage_slot": store.slot_name,
            "ai_insights_available": insights.available,
            "llm_provider": llm_client.provider_name if llm_client else None,
        }

    register_profile_tools(server, store, clock)
    register_medication_tools(server, store, clock, audit_logger)
    register_lab_report_tools(server, store, clock, audit_logger)
    register_appointment_tools(server, store, clock, audit_logger)
    register_document_tools(server, store, clock, audit_logger)
    register_data_management_tools(server, store, audit_logger)
    register_insight_tools(server, store, record_insights, clock)
    register_audit_tools(server, audit_logger)
    logger.info("Health record tools registered")

    # --- Register HTTP insight endpoints ---
    register_insight_routes(server, insights)

    # --- Register prompts ---
    register_health_prompts(server)

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
