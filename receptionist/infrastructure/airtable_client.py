"""Airtable records API client with mandatory clinic scoping.

Every listing query is filtered by ``clinic_id`` on the Airtable side. The
clinic filter is always ANDed with whatever filter the caller passes, so no
combination of options can widen a query to another clinic's rows.

API docs: https://airtable.com/developers/web/api/list-records
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import quote

import httpx

from receptionist.core.errors import ConfigurationError, StoreQueryError
from receptionist.domain.models.call_record import TENANT_FIELD, CallRecord
from receptionist.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortSpec:
    """One entry of Airtable's ``sort[i]`` query parameters."""

    field: str
    direction: Literal["asc", "desc"] = "asc"


def _escape_formula_string(value: str) -> str:
    """Escape a value for use inside a single-quoted formula string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_filter_formula(tenant_id: str, filter_formula: str | None = None) -> str:
    """Build the filterByFormula value, always scoped to ``tenant_id``."""
    tenant_filter = f"{{{TENANT_FIELD}}} = '{_escape_formula_string(tenant_id)}'"
    if filter_formula:
        return f"AND({tenant_filter}, {filter_formula})"
    return tenant_filter


def build_list_params(
    tenant_id: str,
    *,
    max_records: int | None = None,
    sort: list[SortSpec] | None = None,
    filter_formula: str | None = None,
) -> list[tuple[str, str]]:
    """Build query params for the list-records endpoint."""
    params: list[tuple[str, str]] = [
        ("filterByFormula", build_filter_formula(tenant_id, filter_formula)),
    ]
    if max_records:
        params.append(("maxRecords", str(max_records)))
    for index, spec in enumerate(sort or []):
        params.append((f"sort[{index}][field]", spec.field))
        params.append((f"sort[{index}][direction]", spec.direction))
    return params


class AirtableClient:
    """Thin async client over the Airtable REST API."""

    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        max_pages: int | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Personal access token; defaults to settings
            http_client: Optional shared client (tests inject a mock transport)
            base_url: API root; defaults to settings
            max_pages: Upper bound on pagination round trips per query
        """
        self.api_key = api_key or settings.airtable_api_key
        self.base_url = (base_url or settings.airtable_api_url).rstrip("/")
        self.max_pages = max_pages or settings.airtable_max_pages
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("AIRTABLE_API_KEY not configured")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _table_url(self, base_id: str, table_name: str) -> str:
        return f"{self.base_url}/{base_id}/{quote(table_name, safe='')}"

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = self._headers()
        if self._http_client is not None:
            return await self._http_client.request(method, url, headers=headers, **kwargs)
        async with httpx.AsyncClient(timeout=settings.airtable_timeout_seconds) as client:
            return await client.request(method, url, headers=headers, **kwargs)

    async def fetch_records(
        self,
        base_id: str,
        table_name: str,
        tenant_id: str,
        *,
        max_records: int | None = None,
        sort: list[SortSpec] | None = None,
        filter_formula: str | None = None,
    ) -> list[CallRecord]:
        """Fetch call records belonging to one clinic.

        Args:
            base_id: Airtable base ID
            table_name: Table name (usually 'Calls')
            tenant_id: Clinic ID every returned row must carry
            max_records: Optional cap on returned records
            sort: Optional sort specification
            filter_formula: Optional extra formula, ANDed with the clinic filter

        Returns:
            Records as returned by Airtable, in Airtable's order

        Raises:
            StoreQueryError: Airtable answered with a non-2xx status
            ConfigurationError: No API key configured
        """
        if not tenant_id:
            raise ValueError("tenant_id is required for call record queries")

        params = build_list_params(
            tenant_id,
            max_records=max_records,
            sort=sort,
            filter_formula=filter_formula,
        )
        url = self._table_url(base_id, table_name)

        logger.info(f"[AIRTABLE] Fetching calls for clinic: {tenant_id}")

        raw_records: list[dict[str, Any]] = []
        offset: str | None = None
        for _ in range(self.max_pages):
            page_params = params + ([("offset", offset)] if offset else [])
            response = await self._send("GET", url, params=page_params)

            if not response.is_success:
                logger.error(f"[AIRTABLE] API Error: {response.status_code} {response.text}")
                raise StoreQueryError(response.status_code, response.text)

            data = response.json()
            raw_records.extend(data.get("records", []))
            offset = data.get("offset")

            if not offset or (max_records and len(raw_records) >= max_records):
                break
        else:
            if offset:
                logger.warning(
                    f"[AIRTABLE] Stopped after {self.max_pages} pages for clinic {tenant_id}; "
                    "older records were not fetched"
                )

        if max_records:
            raw_records = raw_records[:max_records]

        logger.info(
            f"[AIRTABLE] Retrieved {len(raw_records)} calls",
            extra={"clinic_id": tenant_id, "record_count": len(raw_records)},
        )
        return [CallRecord.from_store(raw) for raw in raw_records]

    async def create_record(
        self, base_id: str, table_name: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a single record.

        Raises:
            StoreQueryError: Airtable rejected the record
        """
        response = await self._send(
            "POST",
            self._table_url(base_id, table_name),
            json={"records": [{"fields": fields}]},
        )
        if not response.is_success:
            raise StoreQueryError(response.status_code, response.text)
        return response.json()

    async def fetch_table_schema(self, base_id: str, table_name: str) -> dict[str, Any] | None:
        """Fetch one table's metadata from the Meta API.

        Returns:
            The table's metadata dict, or None if the base has no such table
        """
        url = f"{self.base_url}/meta/bases/{base_id}/tables"
        logger.info(f"[AIRTABLE] Fetching schema for base: {base_id}")

        response = await self._send("GET", url)
        if not response.is_success:
            logger.error(f"[AIRTABLE] Meta API Error: {response.status_code} {response.text}")
            raise StoreQueryError(response.status_code, response.text)

        tables = response.json().get("tables", [])
        return next((table for table in tables if table.get("name") == table_name), None)
