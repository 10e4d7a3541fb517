"""Retell AI API client.

API docs: https://docs.retellai.com/api-references/get-call
"""

import logging
from typing import Any

import httpx

from receptionist.core.errors import ConfigurationError, ProviderError
from receptionist.settings import settings

logger = logging.getLogger(__name__)


class RetellClient:
    """Async client for the Retell call APIs."""

    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        self.api_key = api_key or settings.retell_api_key
        self.base_url = (base_url or settings.retell_api_url).rstrip("/")
        self._http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if not self.api_key:
            raise ConfigurationError("RETELL_API_KEY not configured")
        headers = {"Authorization": f"Bearer {self.api_key}"}
        url = f"{self.base_url}{path}"
        if self._http_client is not None:
            return await self._http_client.request(method, url, headers=headers, **kwargs)
        async with httpx.AsyncClient(timeout=settings.retell_timeout_seconds) as client:
            return await client.request(method, url, headers=headers, **kwargs)

    async def get_call(self, call_id: str) -> dict[str, Any]:
        """Fetch call details, including ``metadata`` and ``call_analysis``.

        Raises:
            httpx.HTTPStatusError: Retell returned a non-2xx status
        """
        response = await self._send("GET", f"/v2/get-call/{call_id}")
        response.raise_for_status()
        return response.json()

    async def create_phone_call(
        self, from_number: str, to_number: str, agent_id: str
    ) -> dict[str, Any]:
        """Place an outbound call.

        Raises:
            ProviderError: Retell rejected the call (carries Retell's status)
        """
        response = await self._send(
            "POST",
            "/v2/create-phone-call",
            json={
                "from_number": from_number,
                "to_number": to_number,
                "agent_id": agent_id,
            },
        )
        try:
            data = response.json()
        except ValueError:
            data = {"raw": response.text}

        if not response.is_success:
            logger.error(f"[RETELL] create-phone-call failed: {response.status_code} {data}")
            raise ProviderError("Failed to initiate call", response.status_code, data)

        logger.info(f"[RETELL] Call initiated: {data.get('call_id')}")
        return data
