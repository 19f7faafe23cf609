"""
Errors raised by the customer import pipeline.

Two tiers:

- ``ImportPipelineError`` subclasses abort the whole import before any row
  is attempted. Each carries the HTTP status the API layer should answer with.
- ``CustomerStoreError`` subclasses are raised by a sink for one row and are
  folded into the per-row error list by the pipeline.
"""


# -----------------------------
# Pipeline-fatal errors
# -----------------------------


class ImportPipelineError(Exception):
    """Base class for errors that abort an entire import."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingInputError(ImportPipelineError):
    """Raised when the request carries no file."""

    def __init__(self, message: str = "No file provided"):
        super().__init__(message)


class UnsupportedFormatError(ImportPipelineError):
    """Raised when neither the MIME type nor the extension is a spreadsheet."""

    def __init__(
        self,
        message: str = "Invalid file type. Please upload .xlsx, .xls, or .csv",
    ):
        super().__init__(message)


class PayloadTooLargeError(ImportPipelineError):
    """Raised when the upload exceeds the configured size limit."""

    status_code = 413

    def __init__(self, max_bytes: int):
        megabytes = max_bytes / (1024 * 1024)
        limit = f"{megabytes:g}MB" if megabytes >= 1 else f"{max_bytes} bytes"
        super().__init__(f"File size must be less than {limit}")
        self.max_bytes = max_bytes


class EmptyFileError(ImportPipelineError):
    """Raised when the decoded sheet has no data rows."""

    def __init__(self, message: str = "File is empty"):
        super().__init__(message)


class DecodeError(ImportPipelineError):
    """Raised when the spreadsheet bytes cannot be parsed.

    Parser detail is logged, never sent back to the client.
    """

    status_code = 500

    def __init__(self, message: str = "Failed to import customers"):
        super().__init__(message)


class RowLimitExceededError(ImportPipelineError):
    """Raised when the decoded sheet holds more rows than one import allows."""

    def __init__(self, row_count: int, max_rows: int):
        super().__init__(
            f"File has {row_count} rows; at most {max_rows} can be imported at once"
        )
        self.row_count = row_count
        self.max_rows = max_rows


# -----------------------------
# Row-level store errors
# -----------------------------


class CustomerStoreError(Exception):
    """Raised by a sink when the store rejects one insert."""

    pass


class DuplicateAccountNumberError(CustomerStoreError):
    """Raised when an insert violates the account number uniqueness constraint."""

    def __init__(self, account_number: str):
        super().__init__(f"Account number {account_number} already exists")
        self.account_number = account_number
