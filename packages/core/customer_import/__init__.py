"""Bulk customer import from spreadsheet and CSV uploads."""

from packages.core.customer_import.errors import (
    CustomerStoreError,
    DecodeError,
    DuplicateAccountNumberError,
    EmptyFileError,
    ImportPipelineError,
    MissingInputError,
    PayloadTooLargeError,
    RowLimitExceededError,
    UnsupportedFormatError,
)
from packages.core.customer_import.models import (
    CustomerPayload,
    CustomerStatus,
    ImportResult,
    RowError,
    SpreadsheetFormat,
    UploadedFile,
)
from packages.core.customer_import.pipeline import ImportOptions, run_import
from packages.core.customer_import.sink import CustomerSink

__all__ = [
    # Errors
    "CustomerStoreError",
    "DecodeError",
    "DuplicateAccountNumberError",
    "EmptyFileError",
    "ImportPipelineError",
    "MissingInputError",
    "PayloadTooLargeError",
    "RowLimitExceededError",
    "UnsupportedFormatError",
    # Models
    "CustomerPayload",
    "CustomerStatus",
    "ImportResult",
    "RowError",
    "SpreadsheetFormat",
    "UploadedFile",
    # Pipeline
    "CustomerSink",
    "ImportOptions",
    "run_import",
]
