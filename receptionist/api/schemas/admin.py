"""Pydantic schemas for admin diagnostics."""

from typing import Any

from pydantic import BaseModel

from receptionist.api.schemas.reporting import CamelModel


class StoreFieldResponse(BaseModel):
    name: str
    type: str | None = None
    options: dict[str, Any] | None = None


class StoreSchemaVerification(CamelModel):
    all_expected_fields_found: bool
    missing_fields: list[str] = []
    unexpected_fields: list[StoreFieldResponse] = []


class StoreSchemaResponse(CamelModel):
    table_name: str
    table_id: str | None = None
    total_fields: int = 0
    fields: list[StoreFieldResponse] = []
    verification: StoreSchemaVerification
