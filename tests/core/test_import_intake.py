"""
Tests for upload intake.

Uploads are rejected before parsing when missing, of an unsupported type
or too large; accepted uploads are mapped to the decoder format.
"""

import pytest

from packages.core.customer_import.errors import (
    MissingInputError,
    PayloadTooLargeError,
    UnsupportedFormatError,
)
from packages.core.customer_import.intake import validate_upload
from packages.core.customer_import.models import SpreadsheetFormat, UploadedFile

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME = "application/vnd.ms-excel"

CSV_BYTES = b"name,account_number,phone\nAlice,1001,555\n"


def _upload(filename, content_type, data=CSV_BYTES) -> UploadedFile:
    return UploadedFile(filename=filename, content_type=content_type, data=data)


class TestRejections:
    """Uploads that never reach the decoder."""

    def test_no_upload(self) -> None:
        """A request without a file is missing input."""
        with pytest.raises(MissingInputError) as exc_info:
            validate_upload(None)
        assert exc_info.value.message == "No file provided"
        assert exc_info.value.status_code == 400

    def test_empty_unnamed_part_is_missing(self) -> None:
        """An empty, unnamed file part counts as no file."""
        with pytest.raises(MissingInputError):
            validate_upload(_upload("", None, b""))

    def test_unsupported_mime_and_extension(self) -> None:
        """Unknown MIME type and unknown extension are rejected regardless of content."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            validate_upload(_upload("customers.txt", "text/plain"))
        assert "Please upload .xlsx, .xls, or .csv" in exc_info.value.message

    def test_unsupported_even_with_spreadsheet_bytes(self) -> None:
        """Content is not inspected when both declared type and extension are wrong."""
        with pytest.raises(UnsupportedFormatError):
            validate_upload(_upload("archive.zip", "application/zip", b"PK\x03\x04rest"))

    def test_too_large(self) -> None:
        """Payloads over the limit are rejected with 413."""
        with pytest.raises(PayloadTooLargeError) as exc_info:
            validate_upload(_upload("customers.csv", "text/csv"), max_bytes=10)
        assert exc_info.value.status_code == 413
        assert exc_info.value.message == "File size must be less than 10 bytes"

    def test_default_limit_message(self) -> None:
        """The default 10 MiB limit is reported in megabytes."""
        error = PayloadTooLargeError(10 * 1024 * 1024)
        assert error.message == "File size must be less than 10MB"

    def test_exactly_at_limit_is_accepted(self) -> None:
        """The limit is inclusive."""
        fmt = validate_upload(
            _upload("customers.csv", "text/csv"), max_bytes=len(CSV_BYTES)
        )
        assert fmt == SpreadsheetFormat.CSV


class TestFormatDetection:
    """Accepted uploads and the format chosen for them."""

    @pytest.mark.parametrize(
        "filename,content_type,expected",
        [
            ("customers.csv", "text/csv", SpreadsheetFormat.CSV),
            ("customers.csv", "application/octet-stream", SpreadsheetFormat.CSV),
            ("CUSTOMERS.CSV", None, SpreadsheetFormat.CSV),
            ("export", "text/csv; charset=utf-8", SpreadsheetFormat.CSV),
            # Windows browsers report CSV files as Excel
            ("customers.csv", XLS_MIME, SpreadsheetFormat.CSV),
        ],
    )
    def test_text_uploads(self, filename, content_type, expected) -> None:
        """Either a known MIME type or a known extension is enough."""
        assert validate_upload(_upload(filename, content_type)) == expected

    def test_zip_signature_is_xlsx(self) -> None:
        """Workbook bytes win over a misleading extension."""
        upload = _upload("legacy.xls", XLS_MIME, b"PK\x03\x04" + b"\x00" * 16)
        assert validate_upload(upload) == SpreadsheetFormat.XLSX

    def test_ole2_signature_is_xls(self) -> None:
        """Legacy workbooks are detected from their OLE2 header."""
        data = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 16
        assert validate_upload(_upload("book.xlsx", XLSX_MIME, data)) == SpreadsheetFormat.XLS

    @pytest.mark.parametrize(
        "filename,content_type",
        [("book.xlsx", None), ("export.xls", XLS_MIME), ("export.xlsx", XLSX_MIME)],
    )
    def test_text_under_workbook_extension_is_csv(self, filename, content_type) -> None:
        """Without a workbook signature the bytes are read as CSV whatever the name says."""
        assert validate_upload(_upload(filename, content_type)) == SpreadsheetFormat.CSV
