"""MCP tools for the medical document vault.

File content travels base64-encoded and is stored as a data URL.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.audit.logger import AuditLogger
    from spitalverse.core.storage.store import HealthRecordStore

from spitalverse.core.storage.models import MedicalDocument
from spitalverse.domains.health.domain_logic.documents import build_document, format_file_size
from spitalverse.domains.health.domain_logic.errors import DocumentValidationError

logger = logging.getLogger(__name__)


def _listing(document: MedicalDocument) -> dict[str, Any]:
    data = document.to_dict()
    del data["fileUrl"]
    data["fileSizeLabel"] = format_file_size(document.file_size)
    return data


def _not_found(document_id: str) -> str:
    return json.dumps({
        "status": "not_found",
        "document_id": document_id,
        "message": "No document found with that ID.",
    })


def register_document_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    clock: Callable[[], datetime],
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register document vault tools on the MCP server."""

    @mcp.tool
    async def list_documents(ctx: Context, category: str = "") -> str:
        """List stored documents (metadata only).

        Args:
            category: Optional filter: 'labs', 'prescriptions', 'imaging' or 'discharge'.
        """
        documents = store.documents
        if category:
            documents = [d for d in documents if d.category == category]
        return json.dumps({
            "status": "ok",
            "count": len(documents),
            "documents": [_listing(d) for d in documents],
        })

    @mcp.tool
    async def upload_document(
        ctx: Context,
        name: str,
        category: str,
        content_base64: str,
        mime_type: str,
    ) -> str:
        """Store a PDF or image (JPEG, PNG, WEBP) of up to 10 MB.

        Args:
            name: Display name, e.g. 'Blood test March 2025'.
            category: 'labs', 'prescriptions', 'imaging' or 'discharge'.
            content_base64: The file content, base64-encoded.
            mime_type: e.g. 'application/pdf', 'image/png'.
        """
        try:
            content = base64.b64decode(content_base64, validate=True)
        except (binascii.Error, ValueError):
            return json.dumps({"status": "error", "message": "content_base64 is not valid base64"})
        try:
            document = build_document(
                name=name,
                category=category,
                content=content,
                mime_type=mime_type,
                uploaded_at=clock(),
            )
        except DocumentValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.add_document(document)
        logger.info("Document stored: %s (%d bytes)", document.id, document.file_size)
        return json.dumps({"status": "saved", "document": _listing(document)})

    @mcp.tool
    async def get_document(ctx: Context, document_id: str) -> str:
        """Fetch a document including its data URL.

        Args:
            document_id: ID of the document.
        """
        document = store.get_document(document_id)
        if document is None:
            return _not_found(document_id)
        return json.dumps({"status": "ok", "document": document.to_dict()})

    @mcp.tool
    async def delete_document(ctx: Context, document_id: str) -> str:
        """Permanently delete a document.

        Args:
            document_id: ID of the document to delete.
        """
        if not store.delete_document(document_id):
            return _not_found(document_id)
        if audit_logger is not None:
            audit_logger.log_data_delete(endpoint="delete_document", entity="document", count=1)
        logger.info("Deleted document %s", document_id)
        return json.dumps({"status": "deleted", "document_id": document_id})
