"""
Upload intake for the customer import pipeline.

Rejects uploads that are missing, of the wrong type, or too large before
any bytes are handed to a parser, and works out which decoder to use.
"""

import logging
from pathlib import PurePath

from packages.core.customer_import.errors import (
    MissingInputError,
    PayloadTooLargeError,
    UnsupportedFormatError,
)
from packages.core.customer_import.models import SpreadsheetFormat, UploadedFile

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

ALLOWED_MIME_TYPES = frozenset(
    {
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
        "text/csv",
    }
)

ALLOWED_EXTENSIONS = frozenset({".xlsx", ".xls", ".csv"})

# Leading bytes of the two binary workbook containers
_ZIP_SIGNATURE = b"PK\x03\x04"
_OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def _normalize_mime_type(content_type: str | None) -> str:
    # "text/csv; charset=utf-8" -> "text/csv"
    return (content_type or "").split(";", 1)[0].strip().lower()


def _extension(filename: str | None) -> str:
    return PurePath(filename or "").suffix.lower()


def sniff_format(data: bytes) -> SpreadsheetFormat | None:
    """Detect a binary workbook from its leading bytes, if possible."""
    if data.startswith(_ZIP_SIGNATURE):
        return SpreadsheetFormat.XLSX
    if data.startswith(_OLE2_SIGNATURE):
        return SpreadsheetFormat.XLS
    return None


def validate_upload(
    upload: UploadedFile | None,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> SpreadsheetFormat:
    """
    Check an upload against the intake rules.

    Args:
        upload: The uploaded file, or None when the request carried none.
        max_bytes: Largest accepted payload in bytes.

    Returns:
        The format the decoder should use.

    Raises:
        MissingInputError: If there is no file.
        UnsupportedFormatError: If both MIME type and extension are unsupported.
        PayloadTooLargeError: If the payload exceeds ``max_bytes``.
    """
    if upload is None or (not upload.filename and not upload.data):
        raise MissingInputError()

    mime_type = _normalize_mime_type(upload.content_type)
    extension = _extension(upload.filename)

    # Browsers are unreliable about MIME types, so the extension is a fallback
    if mime_type not in ALLOWED_MIME_TYPES and extension not in ALLOWED_EXTENSIONS:
        logger.info(
            f"Rejected upload {upload.filename!r}: "
            f"content type {mime_type or 'unknown'}, extension {extension or 'none'}"
        )
        raise UnsupportedFormatError()

    if len(upload.data) > max_bytes:
        raise PayloadTooLargeError(max_bytes)

    # Only the content decides: Excel engines cannot read bytes that are not a
    # workbook container, so text saved as .xls or .xlsx is read as CSV
    detected = sniff_format(upload.data) or SpreadsheetFormat.CSV
    logger.debug(f"Upload {upload.filename!r} accepted as {detected.value}")
    return detected
