"""Row normalisation: decoded spreadsheet row -> customer payload or failure."""

from packages.core.customer_import.models import (
    CellValue,
    CustomerPayload,
    CustomerStatus,
    ImportRow,
    RowFailure,
)

MISSING_REQUIRED_FIELDS = "Missing required fields (name, account_number, phone)"

# Accepted header spellings per field, checked in order
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "Name"),
    "account_number": ("account_number", "accountNumber", "Account Number"),
    "phone": ("phone", "Phone"),
    "nominee": ("nominee", "Nominee"),
    "nid": ("nid", "NID"),
    "notes": ("notes", "Notes"),
    "status": ("status",),
}

REQUIRED_FIELDS = ("name", "account_number", "phone")
OPTIONAL_FIELDS = ("nominee", "nid", "notes")


def stringify(value: CellValue) -> str:
    """Render a non-empty cell as text (``555.0`` -> ``"555"``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def resolve_field(values: dict[str, CellValue], field: str) -> str | None:
    """Return the first non-empty alias value for ``field`` as text."""
    for alias in FIELD_ALIASES[field]:
        value = values.get(alias)
        if value is None:
            continue
        text = stringify(value).strip()
        if text:
            return text
    return None


def resolve_status(values: dict[str, CellValue]) -> CustomerStatus:
    """Status is taken verbatim; anything unrecognised falls back to active."""
    raw = resolve_field(values, "status")
    try:
        return CustomerStatus(raw)
    except ValueError:
        return CustomerStatus.ACTIVE


def normalize_row(row: ImportRow) -> CustomerPayload | RowFailure:
    """
    Validate one decoded row.

    Returns a ``CustomerPayload`` when name, account number and phone are
    all present, otherwise a ``RowFailure`` at the row's display position.
    Account number uniqueness is left to the store.
    """
    required = {field: resolve_field(row.values, field) for field in REQUIRED_FIELDS}
    if not all(required.values()):
        return RowFailure(row=row.position, error=MISSING_REQUIRED_FIELDS)

    optional = {field: resolve_field(row.values, field) for field in OPTIONAL_FIELDS}

    return CustomerPayload(
        **required,
        **optional,
        status=resolve_status(row.values),
    )
