"""
Tests for POST /api/customers/import.

Uploads go through the real pipeline and land in the per-test SQLite
database.
"""

import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from app.api.customers import import_routes
from app.core.constants import UNAUTHORIZED_MESSAGE

IMPORT_URL = "/api/customers/import"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

CUSTOMERS_CSV = (
    b"name,account_number,phone,nominee,status\n"
    b"Alice Rahman,1001,01711000000,Karim,lead\n"
    b"Bob,,01811000000,,\n"
    b"Carol,1003,01911000000,,archived\n"
)


def _upload(client: TestClient, data: bytes, filename="customers.csv", content_type="text/csv"):
    return client.post(IMPORT_URL, files={"file": (filename, data, content_type)})


def _customers(client: TestClient) -> dict[str, dict]:
    body = client.get("/api/customers", params={"limit": 100}).json()
    return {c["account_number"]: c for c in body["data"]}


def _xlsx(rows: list[list]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


# -----------------------------
# Successful imports
# -----------------------------


class TestImport:
    def test_csv_import(self, auth_client: TestClient, current_user_id: str) -> None:
        """Valid rows are stored; invalid ones are reported with their row number."""
        response = _upload(auth_client, CUSTOMERS_CSV)

        assert response.status_code == 200
        assert response.json() == {
            "success": 2,
            "failed": 1,
            "total": 3,
            "errors": [
                {"row": 3, "error": "Missing required fields (name, account_number, phone)"}
            ],
        }
        assert "aborted" not in response.json()

        stored = _customers(auth_client)
        assert sorted(stored) == ["1001", "1003"]
        assert stored["1001"]["nominee"] == "Karim"
        assert stored["1001"]["status"] == "lead"
        assert stored["1003"]["status"] == "active"
        assert stored["1001"]["phone"] == "01711000000"
        assert {c["created_by"] for c in stored.values()} == {current_user_id}

    def test_xlsx_import(self, auth_client: TestClient) -> None:
        """Numeric cells are stored as text without a trailing '.0'."""
        data = _xlsx(
            [
                ["Name", "Account Number", "Phone", "NID"],
                ["Dina", 5001, 8801711000000, 19901234.0],
                [None, None, None, None],
                ["Emon", 5002, "01822", None],
            ]
        )

        response = _upload(auth_client, data, "customers.xlsx", XLSX_MIME)

        assert response.status_code == 200
        assert response.json()["success"] == 2
        stored = _customers(auth_client)
        assert stored["5001"]["phone"] == "8801711000000"
        assert stored["5001"]["nid"] == "19901234"
        assert stored["5002"]["nid"] is None

    def test_second_import_fails_every_row(self, auth_client: TestClient) -> None:
        """Re-importing the same file collides on every account number."""
        csv = b"name,account_number,phone\nA,1,5\nB,2,5\n"
        assert _upload(auth_client, csv).json()["success"] == 2

        body = _upload(auth_client, csv).json()

        assert (body["success"], body["failed"], body["total"]) == (0, 2, 2)
        assert body["errors"] == [
            {"row": 2, "error": "Account number 1 already exists"},
            {"row": 3, "error": "Account number 2 already exists"},
        ]
        assert len(_customers(auth_client)) == 2

    def test_duplicate_in_file_keeps_earlier_rows(self, auth_client: TestClient) -> None:
        """A collision mid-file does not roll back rows already imported."""
        csv = b"name,account_number,phone\nA,1,5\nB,1,5\nC,3,5\n"

        body = _upload(auth_client, csv).json()

        assert (body["success"], body["failed"]) == (2, 1)
        assert body["errors"] == [{"row": 3, "error": "Account number 1 already exists"}]
        stored = _customers(auth_client)
        assert stored["1"]["name"] == "A"
        assert "3" in stored


# -----------------------------
# Rejected uploads
# -----------------------------


class TestRejectedUploads:
    def test_requires_session(self, client: TestClient) -> None:
        response = _upload(client, CUSTOMERS_CSV)

        assert response.status_code == 401
        assert response.json() == {"error": UNAUTHORIZED_MESSAGE}

    def test_no_file(self, auth_client: TestClient) -> None:
        response = auth_client.post(IMPORT_URL, data={"note": "nothing attached"})

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_unsupported_type(self, auth_client: TestClient) -> None:
        response = _upload(auth_client, b"hello", "notes.txt", "text/plain")

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid file type. Please upload .xlsx, .xls, or .csv"
        }

    def test_header_only(self, auth_client: TestClient) -> None:
        response = _upload(auth_client, b"name,account_number,phone\n")

        assert response.status_code == 400
        assert response.json() == {"error": "File is empty"}

    def test_too_large(self, auth_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(import_routes.settings, "import_max_upload_bytes", 20)

        response = _upload(auth_client, CUSTOMERS_CSV)

        assert response.status_code == 413
        assert response.json() == {"error": "File size must be less than 20 bytes"}
        assert _customers(auth_client) == {}

    def test_too_many_rows(self, auth_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(import_routes.settings, "import_max_rows", 2)

        response = _upload(auth_client, CUSTOMERS_CSV)

        assert response.status_code == 400
        assert "3" in response.json()["error"]
        assert _customers(auth_client) == {}

    def test_corrupt_workbook(self, auth_client: TestClient) -> None:
        response = _upload(auth_client, b"PK\x03\x04 broken", "customers.xlsx", XLSX_MIME)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to import customers"}
