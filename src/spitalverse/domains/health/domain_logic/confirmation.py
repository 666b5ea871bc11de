"""Typed confirmation for irreversible operations."""

from __future__ import annotations

from spitalverse.domains.health.domain_logic.errors import ConfirmationError

WIPE_CONFIRMATION_PHRASE = "delete my data"


def check_wipe_confirmation(typed: str) -> None:
    """Raises ConfirmationError unless ``typed`` is the wipe phrase (case-insensitive)."""
    if typed.lower() != WIPE_CONFIRMATION_PHRASE:
        raise ConfirmationError(
            f'Type "{WIPE_CONFIRMATION_PHRASE}" to confirm. This action cannot be undone.'
        )
