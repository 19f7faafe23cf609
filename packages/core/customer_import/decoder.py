"""
Tabular decoder for customer uploads.

Reads the first sheet of an ``.xlsx`` / ``.xls`` workbook or a CSV file
with pandas, treats the first row as the header and returns one
``ImportRow`` per non-blank data row with every cell normalised to
``CellValue``.
"""

import io
import logging
import math
import numbers
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd
from pandas.errors import EmptyDataError

from packages.core.customer_import.errors import DecodeError, EmptyFileError
from packages.core.customer_import.models import (
    CellValue,
    ImportRow,
    SpreadsheetFormat,
)

logger = logging.getLogger(__name__)

_EXCEL_ENGINES: dict[SpreadsheetFormat, str] = {
    SpreadsheetFormat.XLSX: "openpyxl",
    SpreadsheetFormat.XLS: "xlrd",
}

_TEXT_ENCODINGS = ("utf-8-sig", "utf-8", "latin-1")


# -----------------------------
# Cell normalisation
# -----------------------------


def normalize_cell(value: Any) -> CellValue:
    """
    Collapse a parser cell into text, number or empty (None).

    Integral floats become ints so that ``555.0`` later renders as ``"555"``.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        number = float(value)
        if math.isnan(number):
            return None
        if number.is_integer():
            return int(number)
        return number
    if pd.isna(value):
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip() or None


# -----------------------------
# Readers
# -----------------------------


def _decode_text(data: bytes) -> str:
    for encoding in _TEXT_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    logger.warning("CSV upload matched none of the supported text encodings")
    raise DecodeError()


def _trim_to_header(width: int):
    def trim(fields: list[str]) -> list[str]:
        return fields[:width]

    return trim


def _read_csv(text: str) -> pd.DataFrame:
    header = pd.read_csv(io.StringIO(text), nrows=0, dtype=str).columns
    # index_col=False: a data row longer than the header must never turn the
    # first column into an index and shift every field one place left
    return pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
        engine="python",
        on_bad_lines=_trim_to_header(len(header)),
    )


def _read_frame(data: bytes, fmt: SpreadsheetFormat) -> pd.DataFrame:
    if fmt is SpreadsheetFormat.CSV:
        # Keep every cell as text: account and phone numbers must keep leading zeros
        return _read_csv(_decode_text(data))

    return pd.read_excel(
        io.BytesIO(data),
        sheet_name=0,
        header=0,
        dtype=object,
        engine=_EXCEL_ENGINES[fmt],
    )


def decode_rows(data: bytes, fmt: SpreadsheetFormat) -> list[ImportRow]:
    """
    Decode an upload into data rows.

    Args:
        data: Raw file bytes (already accepted by intake).
        fmt: Format chosen by intake.

    Returns:
        Non-blank data rows in sheet order.

    Raises:
        EmptyFileError: If the sheet has no data rows.
        DecodeError: If the bytes cannot be parsed.
    """
    try:
        frame = _read_frame(data, fmt)
    except EmptyDataError:
        raise EmptyFileError()
    except DecodeError:
        raise
    except Exception as e:
        logger.warning(f"Failed to decode {fmt.value} upload: {e}")
        raise DecodeError() from e

    headers = [str(column).strip() for column in frame.columns]

    rows: list[ImportRow] = []
    for raw_values in frame.itertuples(index=False, name=None):
        values = {
            header: normalize_cell(raw)
            for header, raw in zip(headers, raw_values)
        }
        # Spreadsheet blank rows are skipped, not reported
        if all(value is None for value in values.values()):
            continue
        rows.append(ImportRow(index=len(rows), values=values))

    if not rows:
        raise EmptyFileError()

    logger.debug(f"Decoded {len(rows)} rows from {fmt.value} upload")
    return rows
