"""Demo call endpoint: the website's "call me" button."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from receptionist.api.deps import get_retell_client
from receptionist.api.schemas.leads import DemoCallRequest, DemoCallResponse
from receptionist.core.errors import ConfigurationError, ValidationError
from receptionist.core.phone import to_dial_string
from receptionist.infrastructure.rate_limiter import rate_limit
from receptionist.infrastructure.retell_client import RetellClient
from receptionist.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/demo-call", response_model=DemoCallResponse)
async def start_demo_call(
    body: DemoCallRequest,
    retell: Annotated[RetellClient, Depends(get_retell_client)],
    _: Annotated[None, Depends(rate_limit("demo_call"))],
) -> DemoCallResponse:
    """Have the demo agent call the visitor.

    Raises:
        ValidationError: Phone number shorter than 10 characters
        ConfigurationError: Retell API key missing
        ProviderError: Retell refused the call (Retell's status is passed through)
    """
    phone = (body.phone or "").strip()
    if len(phone) < 10:
        raise ValidationError("Invalid phone number")

    if not retell.configured:
        logger.error("[DEMO-CALL] RETELL_API_KEY is not configured")
        raise ConfigurationError("Server configuration error")

    to_number = to_dial_string(phone)
    logger.info(f"[DEMO-CALL] Initiating Retell call to: {to_number}")

    data = await retell.create_phone_call(
        from_number=settings.demo_call_from_number,
        to_number=to_number,
        agent_id=settings.demo_call_agent_id,
    )
    return DemoCallResponse(success=True, callId=data.get("call_id"))
