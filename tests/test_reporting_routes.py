"""Tests for the dashboard reporting endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from receptionist.api.deps import get_airtable_client, get_tenant_directory
from receptionist.core.auth import create_access_token
from receptionist.core.errors import StoreQueryError
from receptionist.domain.models.call_record import CallRecord
from receptionist.infrastructure.airtable_client import AirtableClient
from receptionist.main import app
from receptionist.persistence.models.clinic import Clinic, Profile

client = TestClient(app)


def make_profile(clinic: Clinic | None = None, role: str = "user") -> Profile:
    profile = Profile(
        id="user-1",
        email="front-desk@example.com",
        clinic_id=clinic.id if clinic else None,
        role=role,
    )
    profile.clinic = clinic
    return profile


def make_clinic(**overrides) -> Clinic:
    values = {
        "id": "clinic-1",
        "name": "Lakeside Physio",
        "airtable_base_id": "appClinic",
        "airtable_table_name": "Calls",
    }
    values.update(overrides)
    return Clinic(**values)


def override_directory(profile: Profile | None) -> MagicMock:
    directory = MagicMock()
    directory.get_profile = AsyncMock(return_value=profile)
    app.dependency_overrides[get_tenant_directory] = lambda: directory
    return directory


def override_airtable(records=None, error=None) -> MagicMock:
    airtable = MagicMock(spec=AirtableClient)
    if error is not None:
        airtable.fetch_records = AsyncMock(side_effect=error)
    else:
        airtable.fetch_records = AsyncMock(return_value=records or [])
    app.dependency_overrides[get_airtable_client] = lambda: airtable
    return airtable


def today_record(record_id: str, **fields) -> CallRecord:
    now = datetime.now().astimezone().isoformat()
    return CallRecord.from_store({
        "id": record_id,
        "createdTime": now,
        "fields": {"clinic_id": "clinic-1", "Created time": now, **fields},
    })


class TestAuthentication:
    def test_missing_authorization_header(self):
        response = client.post("/api/v1/get-call-stats")

        assert response.status_code == 401
        assert response.json() == {"error": "Missing Authorization header"}

    def test_invalid_token(self):
        response = client.post(
            "/api/v1/get-call-stats",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_token_for_other_audience_is_rejected(self):
        token = create_access_token({"sub": "user-1", "aud": "someone-else"})

        response = client.post(
            "/api/v1/get-recent-calls",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    def test_missing_profile_is_server_error(self, auth_headers):
        override_directory(None)

        response = client.post("/api/v1/get-call-stats", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Profile not found"}


class TestGetCallStats:
    def test_no_clinic_returns_zero_stats(self, auth_headers):
        override_directory(make_profile(clinic=None))
        airtable = override_airtable()

        response = client.post("/api/v1/get-call-stats", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["totalCallsToday"] == 0
        assert body["callbacksNeeded"] == 0
        assert len(body["weeklyData"]) == 7
        assert all(day["count"] == 0 for day in body["weeklyData"])
        airtable.fetch_records.assert_not_awaited()

    def test_stats_are_scoped_to_caller_clinic(self, auth_headers):
        override_directory(make_profile(make_clinic()))
        airtable = override_airtable([
            today_record("r1", **{"Patient Type": "new", "Intake URL Sent": True}),
            today_record("r2", **{"Patient Type": "existing", "Needs Callback": True}),
        ])

        response = client.post("/api/v1/get-call-stats", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["totalCallsToday"] == 2
        assert body["newPatientsToday"] == 1
        assert body["existingPatientsToday"] == 1
        assert body["intakeLinksSent"] == 1
        assert body["callbacksNeeded"] == 1
        assert body["weeklyData"][-1]["count"] == 2

        args, kwargs = airtable.fetch_records.await_args
        assert args == ("appClinic", "Calls", "clinic-1")
        assert kwargs["sort"][0].field == "Created time"
        assert kwargs["sort"][0].direction == "desc"

    def test_clinic_without_base_is_configuration_error(self, auth_headers):
        override_directory(make_profile(make_clinic(airtable_base_id=None)))
        override_airtable()

        response = client.post("/api/v1/get-call-stats", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Clinic Airtable configuration missing"}

    def test_store_failure_is_reported(self, auth_headers):
        override_directory(make_profile(make_clinic()))
        override_airtable(error=StoreQueryError(403, "NOT_AUTHORIZED"))

        response = client.post("/api/v1/get-call-stats", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Airtable API error: 403 - NOT_AUTHORIZED"}


class TestGetRecentCalls:
    def test_no_clinic_returns_empty_list(self, auth_headers):
        override_directory(make_profile(clinic=None))
        override_airtable()

        response = client.post("/api/v1/get-recent-calls", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "calls": [],
            "displayFields": [],
            "message": "No clinic assigned",
        }

    def test_returns_calls_with_default_display_fields(self, auth_headers):
        override_directory(make_profile(make_clinic()))
        airtable = override_airtable([today_record("r1", **{"Caller Name": "Ada"})])

        response = client.post(
            "/api/v1/get-recent-calls",
            headers=auth_headers,
            json={"limit": 5},
        )

        assert response.status_code == 200
        body = response.json()
        assert [call["id"] for call in body["calls"]] == ["r1"]
        assert body["calls"][0]["fields"]["Caller Name"] == "Ada"
        assert "createdTime" in body["calls"][0]
        assert body["displayFields"][0] == "Caller Name"
        assert "Needs Callback" in body["displayFields"]
        assert "message" not in body
        assert airtable.fetch_records.await_args.kwargs["max_records"] == 5

    def test_clinic_display_fields_are_used(self, auth_headers):
        clinic = make_clinic(airtable_display_fields=["Caller Name", "Call Summary"])
        override_directory(make_profile(clinic))
        override_airtable()

        response = client.post("/api/v1/get-recent-calls", headers=auth_headers)

        assert response.json()["displayFields"] == ["Caller Name", "Call Summary"]

    def test_limit_defaults_to_twenty(self, auth_headers):
        override_directory(make_profile(make_clinic()))
        airtable = override_airtable()

        client.post("/api/v1/get-recent-calls", headers=auth_headers)

        assert airtable.fetch_records.await_args.kwargs["max_records"] == 20

    def test_limit_out_of_range_is_rejected(self, auth_headers):
        override_directory(make_profile(make_clinic()))
        override_airtable()

        response = client.post(
            "/api/v1/get-recent-calls",
            headers=auth_headers,
            json={"limit": 500},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"


def test_unexpected_failure_is_json_envelope(auth_headers):
    override_directory(make_profile(make_clinic()))
    override_airtable(error=RuntimeError("connection reset"))

    response = client.post("/api/v1/get-call-stats", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "connection reset"}
