"""Tests for the admin store schema verification endpoint."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from receptionist.api.deps import get_airtable_client, get_tenant_directory
from receptionist.api.routes.admin import build_schema_report
from receptionist.domain.models.call_record import EXPECTED_CALL_FIELDS
from receptionist.infrastructure.airtable_client import AirtableClient
from receptionist.main import app
from receptionist.persistence.database import get_db
from receptionist.persistence.models.clinic import Profile

client = TestClient(app)


def override_caller(role: str) -> None:
    directory = MagicMock()
    directory.get_profile = AsyncMock(
        return_value=Profile(id="user-1", email="ops@example.com", role=role)
    )
    app.dependency_overrides[get_tenant_directory] = lambda: directory
    app.dependency_overrides[get_db] = lambda: MagicMock()


def override_airtable(table) -> MagicMock:
    airtable = MagicMock(spec=AirtableClient)
    airtable.fetch_table_schema = AsyncMock(return_value=table)
    app.dependency_overrides[get_airtable_client] = lambda: airtable
    return airtable


def test_schema_report_flags_missing_and_unexpected_fields():
    fields = [{"name": name, "type": "singleLineText"} for name in EXPECTED_CALL_FIELDS[:-1]]
    fields.append({"name": "Notes", "type": "multilineText"})

    report = build_schema_report({"id": "tbl1", "name": "Calls", "fields": fields})

    assert report.total_fields == len(EXPECTED_CALL_FIELDS)
    assert report.verification.all_expected_fields_found is False
    assert report.verification.missing_fields == [EXPECTED_CALL_FIELDS[-1]]
    assert [field.name for field in report.verification.unexpected_fields] == ["Notes"]


class TestStoreSchemaEndpoint:
    def test_requires_admin(self, auth_headers):
        override_caller("user")
        override_airtable(None)

        response = client.get(
            "/api/v1/admin/store-schema",
            params={"base_id": "appBase"},
            headers=auth_headers,
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}

    def test_reports_complete_table(self, auth_headers):
        override_caller("admin")
        fields = [{"name": name, "type": "singleLineText"} for name in EXPECTED_CALL_FIELDS]
        airtable = override_airtable({"id": "tbl1", "name": "Calls", "fields": fields})

        response = client.get(
            "/api/v1/admin/store-schema",
            params={"base_id": "appBase"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["verification"]["allExpectedFieldsFound"] is True
        assert body["totalFields"] == len(EXPECTED_CALL_FIELDS)
        airtable.fetch_table_schema.assert_awaited_once_with("appBase", "Calls")

    def test_unknown_table_is_not_found(self, auth_headers):
        override_caller("admin")
        override_airtable(None)

        response = client.get(
            "/api/v1/admin/store-schema",
            params={"base_id": "appBase", "table_name": "Missing"},
            headers=auth_headers,
        )

        assert response.status_code == 404

    def test_base_or_clinic_required(self, auth_headers):
        override_caller("admin")
        override_airtable(None)

        response = client.get("/api/v1/admin/store-schema", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "base_id or clinic_id is required"}
