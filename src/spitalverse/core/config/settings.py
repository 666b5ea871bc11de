"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Spitalverse health server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: there is no authentication layer in front of the
    # record store, so exposing it beyond this machine must be opted into.
    phr_host: str = "127.0.0.1"
    phr_port: int = 8001
    phr_log_level: str = "info"
    phr_allow_insecure_bind: bool = False

    # External LLM. An empty key for the selected provider (or "mock") means
    # the insight endpoints answer "unavailable" and callers use the local
    # rule engines.
    llm_provider: Literal["openrouter", "anthropic", "openai", "mock"] = "openrouter"
    openrouter_api_key: str = ""
    openrouter_model: str = "openai/gpt-4o-mini"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Storage: one named slot in a SQLite file holds the whole record store
    db_path: str = "~/.spitalverse/health.db"
    storage_slot: str = "spitalverse-storage"
    seed_demo_data: bool = False

    # Encryption of the slot payload at rest (Fernet key; empty = plaintext)
    encryption_key: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
