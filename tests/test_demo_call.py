"""Tests for the demo call endpoint and the Retell client."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from receptionist.api.deps import get_retell_client
from receptionist.core.errors import ConfigurationError, ProviderError
from receptionist.infrastructure.retell_client import RetellClient
from receptionist.main import app
from receptionist.settings import settings

client = TestClient(app)


def override_retell(configured=True, result=None, error=None) -> MagicMock:
    retell = MagicMock(spec=RetellClient)
    retell.configured = configured
    if error is not None:
        retell.create_phone_call = AsyncMock(side_effect=error)
    else:
        retell.create_phone_call = AsyncMock(return_value=result or {"call_id": "call_123"})
    app.dependency_overrides[get_retell_client] = lambda: retell
    return retell


class TestDemoCallEndpoint:
    def test_places_call_to_us_number(self):
        retell = override_retell()

        response = client.post("/api/v1/demo-call", json={"phone": "5551234567"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "callId": "call_123"}
        retell.create_phone_call.assert_awaited_once_with(
            from_number=settings.demo_call_from_number,
            to_number="+15551234567",
            agent_id=settings.demo_call_agent_id,
        )

    def test_international_number_is_dialed_as_given(self):
        retell = override_retell()

        client.post("/api/v1/demo-call", json={"phone": "+447700900123"})

        assert retell.create_phone_call.await_args.kwargs["to_number"] == "+447700900123"

    def test_short_phone_is_rejected(self):
        retell = override_retell()

        response = client.post("/api/v1/demo-call", json={"phone": "555-1234"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid phone number"}
        retell.create_phone_call.assert_not_awaited()

    def test_missing_phone_is_rejected(self):
        override_retell()

        response = client.post("/api/v1/demo-call", json={})

        assert response.status_code == 400

    def test_unconfigured_provider(self):
        override_retell(configured=False)

        response = client.post("/api/v1/demo-call", json={"phone": "5551234567"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error"}

    def test_provider_rejection_passes_status_through(self):
        override_retell(
            error=ProviderError("Failed to initiate call", 402, {"message": "No credits"})
        )

        response = client.post("/api/v1/demo-call", json={"phone": "5551234567"})

        assert response.status_code == 402
        assert response.json() == {
            "error": "Failed to initiate call",
            "details": {"message": "No credits"},
        }

    def test_rate_limited(self):
        override_retell()

        statuses = [
            client.post("/api/v1/demo-call", json={"phone": "5551234567"}).status_code
            for _ in range(settings.lead_rate_limit_requests + 1)
        ]

        assert statuses[-1] == 429


class TestRetellClient:
    @pytest.mark.asyncio
    async def test_create_phone_call(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"call_id": "call_123"})

        retell = RetellClient(
            api_key="key_retell",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            base_url="https://retell.test",
        )
        data = await retell.create_phone_call("+15550000000", "+15551234567", "agent_1")

        assert data == {"call_id": "call_123"}
        assert seen[0].url.path == "/v2/create-phone-call"
        assert seen[0].headers["Authorization"] == "Bearer key_retell"
        assert json.loads(seen[0].content) == {
            "from_number": "+15550000000",
            "to_number": "+15551234567",
            "agent_id": "agent_1",
        }

    @pytest.mark.asyncio
    async def test_create_phone_call_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "bad number"})

        retell = RetellClient(
            api_key="key_retell",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            base_url="https://retell.test",
        )

        with pytest.raises(ProviderError) as exc_info:
            await retell.create_phone_call("+15550000000", "+1555", "agent_1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"message": "bad number"}

    @pytest.mark.asyncio
    async def test_get_call_raises_on_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v2/get-call/call_1"
            return httpx.Response(404, json={})

        retell = RetellClient(
            api_key="key_retell",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            base_url="https://retell.test",
        )

        with pytest.raises(httpx.HTTPStatusError):
            await retell.get_call("call_1")

    @pytest.mark.asyncio
    async def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "retell_api_key", None)
        retell = RetellClient(base_url="https://retell.test")

        assert retell.configured is False
        with pytest.raises(ConfigurationError):
            await retell.get_call("call_1")
