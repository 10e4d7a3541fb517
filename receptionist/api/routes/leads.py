"""Public lead capture endpoints (homepage popup and demo page)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from receptionist.api.schemas.leads import LeadRequest, LeadResponse
from receptionist.core.errors import ReceptionistError, ValidationError
from receptionist.domain.services.lead_service import LeadService
from receptionist.infrastructure.rate_limiter import rate_limit

logger = logging.getLogger(__name__)

router = APIRouter()

GENERIC_FAILURE = "Something went wrong. Please try again."


def get_lead_service() -> LeadService:
    return LeadService()


@router.post("", response_model=LeadResponse, response_model_exclude_none=True)
async def submit_lead(
    body: LeadRequest,
    lead_service: Annotated[LeadService, Depends(get_lead_service)],
    _: Annotated[None, Depends(rate_limit("leads"))],
) -> LeadResponse:
    """Homepage popup lead. Fails with 500 if the lead cannot be stored."""
    try:
        result = await lead_service.submit_homepage_lead(body.model_dump())
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"[SUBMIT_LEAD] Error: {e}", exc_info=True)
        raise ReceptionistError(GENERIC_FAILURE)
    return LeadResponse(**result)


@router.post("/demo", response_model=LeadResponse)
async def submit_demo_lead(
    body: LeadRequest,
    lead_service: Annotated[LeadService, Depends(get_lead_service)],
    _: Annotated[None, Depends(rate_limit("leads"))],
) -> LeadResponse:
    """Demo page lead. Storing is best effort, reported as ``stored``."""
    try:
        result = await lead_service.submit_demo_lead(body.model_dump())
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"[SUBMIT_DEMO_LEAD] Error: {e}", exc_info=True)
        raise ReceptionistError(GENERIC_FAILURE)
    return LeadResponse(**result)
