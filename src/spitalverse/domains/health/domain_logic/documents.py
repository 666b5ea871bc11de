"""Building medical documents from uploaded bytes."""

from __future__ import annotations

import base64
from datetime import datetime

from spitalverse.core.storage.models import DOCUMENT_CATEGORIES, MedicalDocument, new_id
from spitalverse.domains.health.domain_logic.errors import DocumentValidationError

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024

ACCEPTED_MIME_TYPES: tuple[str, ...] = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
)


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def build_document(
    *,
    name: str,
    category: str,
    content: bytes,
    mime_type: str,
    uploaded_at: datetime,
) -> MedicalDocument:
    """Wrap raw file bytes as a stored document (base64 data URL).

    Raises:
        DocumentValidationError: On an unknown category, an unsupported
            file type, an empty file, or a file over 10 MB.
    """
    if category not in DOCUMENT_CATEGORIES:
        raise DocumentValidationError(
            f"Category must be one of: {', '.join(DOCUMENT_CATEGORIES)}"
        )
    if mime_type not in ACCEPTED_MIME_TYPES:
        raise DocumentValidationError(f"Unsupported file type: {mime_type}")
    if not content:
        raise DocumentValidationError("File is empty")
    if len(content) > MAX_DOCUMENT_BYTES:
        raise DocumentValidationError(
            f"File size must be less than {MAX_DOCUMENT_BYTES // (1024 * 1024)}MB"
        )

    encoded = base64.b64encode(content).decode("ascii")
    return MedicalDocument(
        id=new_id(),
        name=name.strip() or "Untitled document",
        category=category,
        file_type="pdf" if "pdf" in mime_type else "image",
        file_url=f"data:{mime_type};base64,{encoded}",
        upload_date=uploaded_at.isoformat(),
        file_size=len(content),
    )


def document_bytes(document: MedicalDocument) -> bytes:
    """Decode the raw bytes back out of a stored data URL.

    Raises:
        DocumentValidationError: If the stored URL is not a base64 data URL.
    """
    header, sep, data = document.file_url.partition(",")
    if not sep or not header.endswith(";base64"):
        raise DocumentValidationError(f"Document {document.id} has no base64 payload")
    try:
        return base64.b64decode(data, validate=True)
    except ValueError as exc:
        raise DocumentValidationError(f"Document {document.id} payload is corrupt") from exc
