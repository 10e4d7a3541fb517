"""Admin diagnostics: verify a clinic's Airtable call table layout."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from receptionist.api.deps import get_airtable_client, require_admin
from receptionist.api.schemas.admin import (
    StoreFieldResponse,
    StoreSchemaResponse,
    StoreSchemaVerification,
)
from receptionist.core.errors import NotFoundError, ValidationError
from receptionist.domain.models.call_record import EXPECTED_CALL_FIELDS
from receptionist.infrastructure.airtable_client import AirtableClient
from receptionist.persistence.database import get_db
from receptionist.persistence.models.clinic import Profile
from receptionist.persistence.repositories.clinic_repository import ClinicRepository
from receptionist.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


def build_schema_report(table: dict) -> StoreSchemaResponse:
    """Compare a table's fields against the columns the dashboard reads."""
    fields = [
        StoreFieldResponse(
            name=field["name"],
            type=field.get("type"),
            options=field.get("options") or None,
        )
        for field in table.get("fields", [])
    ]
    names = {field.name for field in fields}
    missing = [name for name in EXPECTED_CALL_FIELDS if name not in names]
    unexpected = [field for field in fields if field.name not in EXPECTED_CALL_FIELDS]

    return StoreSchemaResponse(
        table_name=table.get("name", ""),
        table_id=table.get("id"),
        total_fields=len(fields),
        fields=fields,
        verification=StoreSchemaVerification(
            all_expected_fields_found=not missing,
            missing_fields=missing,
            unexpected_fields=unexpected,
        ),
    )


@router.get("/store-schema", response_model=StoreSchemaResponse)
async def get_store_schema(
    admin: Annotated[Profile, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    airtable: Annotated[AirtableClient, Depends(get_airtable_client)],
    clinic_id: str | None = Query(None, description="Inspect this clinic's configured table"),
    base_id: str | None = Query(None, description="Airtable base, when no clinic_id is given"),
    table_name: str | None = Query(None, description="Table name, defaults to 'Calls'"),
) -> StoreSchemaResponse:
    """Fetch a call table's schema and verify the expected columns exist."""
    if clinic_id:
        clinic = await ClinicRepository(db).get_by_id(clinic_id)
        if clinic is None:
            raise NotFoundError("Clinic not found")
        base_id = clinic.airtable_base_id
        table_name = table_name or clinic.airtable_table_name

    if not base_id:
        raise ValidationError("base_id or clinic_id is required")
    table_name = table_name or settings.airtable_default_table_name

    table = await airtable.fetch_table_schema(base_id, table_name)
    if table is None:
        raise NotFoundError(f'Table "{table_name}" not found in base')

    report = build_schema_report(table)
    logger.info(
        "[SCHEMA FETCHER] Verification complete",
        extra={
            "all_fields_found": report.verification.all_expected_fields_found,
            "missing_count": len(report.verification.missing_fields),
            "unexpected_count": len(report.verification.unexpected_fields),
        },
    )
    return report
