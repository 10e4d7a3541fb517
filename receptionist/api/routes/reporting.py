"""Dashboard reporting endpoints: call stats and recent calls.

Both are scoped to the caller's clinic. A caller without a clinic gets an
empty, well-formed response so the dashboard can render its "not
configured" state.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends

from receptionist.api.deps import get_airtable_client, get_current_profile
from receptionist.api.schemas.reporting import (
    CallRecordResponse,
    CallStatsResponse,
    RecentCallsRequest,
    RecentCallsResponse,
)
from receptionist.core.errors import ConfigurationError
from receptionist.domain.models.call_record import (
    CALL_STATUS_FIELD,
    CALL_SUMMARY_FIELD,
    CALLER_NAME_FIELD,
    CREATED_TIME_FIELD,
    DURATION_FIELD,
    EMAIL_FIELD,
    NEEDS_CALLBACK_FIELD,
    PATIENT_TYPE_FIELD,
    PHONE_FIELD,
)
from receptionist.domain.services.call_stats import compute_stats
from receptionist.infrastructure.airtable_client import AirtableClient, SortSpec
from receptionist.persistence.models.clinic import Clinic, Profile
from receptionist.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_DISPLAY_FIELDS = [
    CALLER_NAME_FIELD,
    PHONE_FIELD,
    EMAIL_FIELD,
    PATIENT_TYPE_FIELD,
    CALL_STATUS_FIELD,
    CALL_SUMMARY_FIELD,
    DURATION_FIELD,
    NEEDS_CALLBACK_FIELD,
]

NEWEST_FIRST = [SortSpec(field=CREATED_TIME_FIELD, direction="desc")]


def _store_coordinates(clinic: Clinic | None) -> tuple[str, str]:
    """Airtable base and table for a clinic.

    Raises:
        ConfigurationError: If the clinic has no Airtable base configured
    """
    if clinic is None or not clinic.airtable_base_id:
        raise ConfigurationError("Clinic Airtable configuration missing")
    return clinic.airtable_base_id, clinic.airtable_table_name or settings.airtable_default_table_name


@router.post("/get-call-stats", response_model=CallStatsResponse)
async def get_call_stats(
    profile: Annotated[Profile, Depends(get_current_profile)],
    airtable: Annotated[AirtableClient, Depends(get_airtable_client)],
) -> CallStatsResponse:
    """Today's call counts and the trailing seven-day volume for the caller's clinic."""
    if not profile.clinic_id:
        logger.info("[GET-CALL-STATS] No clinic assigned to user")
        return CallStatsResponse.from_stats(compute_stats([]))

    base_id, table_name = _store_coordinates(profile.clinic)
    logger.info(f"[GET-CALL-STATS] Calculating stats for clinic: {profile.clinic_id}")

    # Newest first so a pagination cutoff only drops calls outside the week
    records = await airtable.fetch_records(
        base_id, table_name, profile.clinic_id, sort=NEWEST_FIRST
    )
    return CallStatsResponse.from_stats(compute_stats(records))


@router.post(
    "/get-recent-calls",
    response_model=RecentCallsResponse,
    response_model_exclude_none=True,
)
async def get_recent_calls(
    profile: Annotated[Profile, Depends(get_current_profile)],
    airtable: Annotated[AirtableClient, Depends(get_airtable_client)],
    body: Annotated[RecentCallsRequest | None, Body()] = None,
) -> RecentCallsResponse:
    """Most recent calls for the caller's clinic, newest first."""
    limit = body.limit if body else RecentCallsRequest().limit

    if not profile.clinic_id:
        logger.info("[GET-RECENT-CALLS] No clinic assigned to user")
        return RecentCallsResponse(calls=[], display_fields=[], message="No clinic assigned")

    base_id, table_name = _store_coordinates(profile.clinic)
    display_fields = profile.clinic.airtable_display_fields or DEFAULT_DISPLAY_FIELDS

    logger.info(f"[GET-RECENT-CALLS] Fetching recent calls for clinic: {profile.clinic_id}")
    records = await airtable.fetch_records(
        base_id,
        table_name,
        profile.clinic_id,
        max_records=limit,
        sort=NEWEST_FIRST,
    )
    return RecentCallsResponse(
        calls=[CallRecordResponse.from_record(record) for record in records],
        display_fields=display_fields,
    )
