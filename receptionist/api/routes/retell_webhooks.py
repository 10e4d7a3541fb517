"""Retell webhook endpoint.

Retell retries any webhook that does not get a 200, so this endpoint
answers 200 whenever the body parses, including when no clinic resolves.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from receptionist.api.deps import get_retell_client
from receptionist.core.tenant_context import set_tenant_context
from receptionist.domain.services.webhook_normalizer import WebhookNormalizer, extract_call_id
from receptionist.infrastructure.retell_client import RetellClient

logger = logging.getLogger(__name__)

router = APIRouter()


def get_webhook_normalizer(
    retell_client: Annotated[RetellClient, Depends(get_retell_client)],
) -> WebhookNormalizer:
    return WebhookNormalizer(retell_client=retell_client)


@router.post("/webhook")
async def retell_webhook(
    request: Request,
    normalizer: Annotated[WebhookNormalizer, Depends(get_webhook_normalizer)],
) -> JSONResponse:
    """Resolve the clinic for a call event and forward it to the automation.

    Returns:
        ``{"success": true}``, or 500 if the body is not valid JSON
    """
    try:
        payload = await request.json()
    except ValueError as e:
        logger.error(f"[WEBHOOK] Invalid JSON body: {e}")
        return JSONResponse(status_code=500, content={"error": "Invalid JSON body"})

    if not isinstance(payload, dict):
        logger.warning(
            f"[WEBHOOK] Webhook body is a JSON {type(payload).__name__}, not an object; "
            "processing as an empty payload"
        )
        payload = {}

    logger.info(
        "[WEBHOOK] Received webhook from Retell",
        extra={"call_id": extract_call_id(payload), "event": payload.get("event")},
    )

    event = await normalizer.process(payload)
    set_tenant_context(event.clinic_id)
    logger.info(
        f"[WEBHOOK] Forwarded {event.name} event",
        extra={"clinic_id": event.clinic_id},
    )
    return JSONResponse(status_code=200, content={"success": True})
