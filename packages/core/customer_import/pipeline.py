"""
Customer import pipeline.

Runs the stages in order for one upload:

1. Intake (reject missing / unsupported / oversized uploads)
2. Decode the first sheet into rows
3. Normalise and validate each row
4. Insert valid rows one at a time through a ``CustomerSink``
5. Aggregate successes and per-row errors into an ``ImportResult``

Pipeline-level problems raise ``ImportPipelineError``; everything that goes
wrong with a single row is recorded in the result and the loop moves on.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from packages.core.customer_import.decoder import decode_rows
from packages.core.customer_import.errors import (
    CustomerStoreError,
    RowLimitExceededError,
)
from packages.core.customer_import.intake import (
    DEFAULT_MAX_UPLOAD_BYTES,
    validate_upload,
)
from packages.core.customer_import.models import (
    ImportResult,
    ImportRow,
    RowError,
    RowFailure,
    UploadedFile,
)
from packages.core.customer_import.normalizer import normalize_row
from packages.core.customer_import.sink import CustomerSink

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], Awaitable[bool]]

IMPORT_CANCELLED = "Import cancelled"
IMPORT_TIMED_OUT = "Import timed out"
UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class ImportOptions:
    """Limits applied to one import run."""

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    max_rows: int | None = 10_000
    timeout_seconds: float | None = None


class ResultAggregator:
    """Accumulates per-row outcomes into an ``ImportResult``."""

    def __init__(self, total: int):
        self.result = ImportResult(total=total)

    def record_success(self) -> None:
        self.result.success += 1

    def record_failure(self, row: int, error: str) -> None:
        self.result.failed += 1
        self.result.errors.append(RowError(row=row, error=error))

    def abort_remaining(self, rows: list[ImportRow], reason: str) -> None:
        """Count every row that was never attempted as failed."""
        self.result.aborted = reason
        for row in rows:
            self.record_failure(row.position, reason)


async def insert_row(
    row: ImportRow,
    sink: CustomerSink,
    created_by: UUID | None,
) -> RowError | None:
    """
    Validate and insert one row.

    Returns None on success, otherwise the error to report for this row.
    Never raises for row-level problems.
    """
    try:
        outcome = normalize_row(row)
        if isinstance(outcome, RowFailure):
            return RowError(row=outcome.row, error=outcome.error)

        await sink.insert(outcome, created_by)
        return None
    except CustomerStoreError as e:
        # DuplicateAccountNumberError renders as "Account number ... already exists"
        return RowError(row=row.position, error=str(e) or UNKNOWN_ERROR)
    except Exception as e:
        logger.exception(f"Unexpected error importing row {row.position}")
        return RowError(row=row.position, error=str(e) or UNKNOWN_ERROR)


async def import_rows(
    rows: list[ImportRow],
    sink: CustomerSink,
    *,
    created_by: UUID | None = None,
    timeout_seconds: float | None = None,
    should_cancel: CancelCheck | None = None,
) -> ImportResult:
    """
    Insert decoded rows strictly in order, one at a time.

    Cancellation and the deadline are checked between rows; rows not yet
    attempted when either fires are counted as failed.
    """
    aggregator = ResultAggregator(total=len(rows))
    deadline = (
        time.monotonic() + timeout_seconds if timeout_seconds is not None else None
    )

    for i, row in enumerate(rows):
        if should_cancel is not None and await should_cancel():
            logger.warning(f"Import cancelled at row {row.position}")
            aggregator.abort_remaining(rows[i:], IMPORT_CANCELLED)
            break
        if deadline is not None and time.monotonic() > deadline:
            logger.warning(f"Import timed out at row {row.position}")
            aggregator.abort_remaining(rows[i:], IMPORT_TIMED_OUT)
            break

        error = await insert_row(row, sink, created_by)
        if error is None:
            aggregator.record_success()
        else:
            logger.debug(f"Row {error.row} rejected: {error.error}")
            aggregator.record_failure(error.row, error.error)

    return aggregator.result


async def run_import(
    upload: UploadedFile | None,
    sink: CustomerSink,
    *,
    created_by: UUID | None = None,
    options: ImportOptions | None = None,
    should_cancel: CancelCheck | None = None,
) -> ImportResult:
    """
    Import customers from a spreadsheet upload.

    Args:
        upload: The uploaded file (None if the request carried none).
        sink: Store the customers are inserted into.
        created_by: ID of the importing user, stamped on every customer.
        options: Size, row-count and time limits.
        should_cancel: Async check polled between rows.

    Returns:
        ImportResult with success/failed/total counts and per-row errors.

    Raises:
        ImportPipelineError: If the upload is rejected or cannot be decoded.
    """
    options = options or ImportOptions()

    fmt = validate_upload(upload, max_bytes=options.max_upload_bytes)
    rows = decode_rows(upload.data, fmt)

    if options.max_rows is not None and len(rows) > options.max_rows:
        raise RowLimitExceededError(len(rows), options.max_rows)

    logger.info(
        f"Importing {len(rows)} customer rows from {upload.filename!r} "
        f"({fmt.value}) for user {created_by}"
    )
    start_time = time.time()

    result = await import_rows(
        rows,
        sink,
        created_by=created_by,
        timeout_seconds=options.timeout_seconds,
        should_cancel=should_cancel,
    )

    logger.info(
        f"Import finished in {time.time() - start_time:.2f}s: "
        f"{result.success} succeeded, {result.failed} failed of {result.total}"
    )
    return result
