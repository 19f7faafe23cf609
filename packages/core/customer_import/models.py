"""
Data shapes that flow through the customer import pipeline.

Decoded cells are normalised once into ``CellValue`` (text, number or empty)
so that later stages never see parser-specific types.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

# text | number | empty
CellValue = str | int | float | None

# Display offset: zero-based data index -> spreadsheet row (header is row 1)
ROW_POSITION_OFFSET = 2


# -----------------------------
# Enums
# -----------------------------


class CustomerStatus(str, Enum):
    """Lifecycle status of a customer record."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    LEAD = "lead"


class SpreadsheetFormat(str, Enum):
    """Upload formats the decoder understands."""

    XLSX = "xlsx"
    XLS = "xls"
    CSV = "csv"


# -----------------------------
# Pipeline input
# -----------------------------


@dataclass(frozen=True)
class UploadedFile:
    """Raw upload as received from the client."""

    filename: str | None
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class ImportRow:
    """One decoded data row and its zero-based index in the sheet."""

    index: int
    values: dict[str, CellValue] = field(default_factory=dict)

    @property
    def position(self) -> int:
        """Row number as the user sees it in the spreadsheet."""
        return self.index + ROW_POSITION_OFFSET


# -----------------------------
# Normalizer output
# -----------------------------


class CustomerPayload(BaseModel):
    """Validated, stringified fields ready to be inserted as a customer."""

    name: str
    account_number: str
    phone: str
    nominee: str | None = None
    nid: str | None = None
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: str | None = None


@dataclass(frozen=True)
class RowFailure:
    """Validation failure for one row."""

    row: int
    error: str


# -----------------------------
# Pipeline output
# -----------------------------


class RowError(BaseModel):
    """Per-row error reported back to the caller."""

    row: int = Field(..., description="Spreadsheet row number (header is row 1)")
    error: str


class ImportResult(BaseModel):
    """
    Outcome of one import.

    ``success + failed == total`` always holds, where ``total`` is the
    number of decoded data rows.
    """

    success: int = 0
    failed: int = 0
    total: int = 0
    errors: list[RowError] = Field(default_factory=list)
    aborted: str | None = Field(
        None,
        description="Why the import stopped early (cancelled / timed out), if it did",
    )
