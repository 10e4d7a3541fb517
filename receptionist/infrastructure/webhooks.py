"""Outbound JSON webhooks (n8n automation, Slack).

Posting is fire-and-forget: failures are logged and reported back as a
status, never raised to the request handler.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


async def post_json(
    url: str,
    payload: dict[str, Any],
    label: str,
    http_client: httpx.AsyncClient | None = None,
) -> int | None:
    """POST ``payload`` to ``url`` once.

    Args:
        url: Webhook URL
        payload: JSON body
        label: Log prefix, e.g. "N8N" or "SLACK"
        http_client: Optional shared client

    Returns:
        Response status code, or None if the request never completed
    """
    try:
        if http_client is not None:
            response = await http_client.post(url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS) as client:
                response = await client.post(url, json=payload)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"[{label}] Failed to post webhook: {e}")
        return None

    if response.is_success:
        logger.info(f"[{label}] Webhook delivered: {response.status_code}")
    else:
        logger.error(f"[{label}] Error {response.status_code}: {response.text}")
    return response.status_code
