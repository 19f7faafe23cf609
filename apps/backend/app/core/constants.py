"""Application-wide constants."""

# ──────────────────────────────────────────────────────────────────────
# Error messages
# ──────────────────────────────────────────────────────────────────────

UNAUTHORIZED_MESSAGE = "Unauthorized. Please login to continue."
CUSTOMER_NOT_FOUND_MESSAGE = "Customer not found"
ACCOUNT_NUMBER_EXISTS_MESSAGE = "Account number already exists"
IMPORT_FAILED_MESSAGE = "Failed to import customers"

# ──────────────────────────────────────────────────────────────────────
# Customer listing
# ──────────────────────────────────────────────────────────────────────

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
