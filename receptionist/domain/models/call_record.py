"""Typed call record converted from an Airtable row.

Airtable rows are untyped field bags. ``CallRecord.from_store`` is the only
place that reads them; everything past the query client works with the
typed attributes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Airtable column names in the clinic call log
TENANT_FIELD = "clinic_id"
CREATED_TIME_FIELD = "Created time"
CALLER_NAME_FIELD = "Caller Name"
PHONE_FIELD = "Phone Number"
EMAIL_FIELD = "Email Address"
PATIENT_TYPE_FIELD = "Patient Type"
CALL_SUMMARY_FIELD = "Call Summary"
INTAKE_URL_SENT_FIELD = "Intake URL Sent"
CALL_STATUS_FIELD = "Call Status"
DURATION_FIELD = "Duration Seconds"
NEEDS_CALLBACK_FIELD = "Needs Callback"

EXPECTED_CALL_FIELDS = [
    TENANT_FIELD,
    CREATED_TIME_FIELD,
    CALLER_NAME_FIELD,
    PHONE_FIELD,
    EMAIL_FIELD,
    PATIENT_TYPE_FIELD,
    CALL_SUMMARY_FIELD,
    INTAKE_URL_SENT_FIELD,
    CALL_STATUS_FIELD,
    DURATION_FIELD,
    NEEDS_CALLBACK_FIELD,
]

PATIENT_TYPES = ("new", "existing")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when missing or invalid.

    Naive values are kept naive and later read as server-local time.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _patient_type(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    return normalized if normalized in PATIENT_TYPES else None


@dataclass
class CallRecord:
    """A completed call as logged by the voice agent."""

    id: str
    created_at: datetime | None = None
    created_time: str | None = None  # row metadata, as returned by the store
    caller_name: str | None = None
    phone: str | None = None
    email: str | None = None
    patient_type: str | None = None
    intake_url_sent: bool = False
    call_status: str | None = None
    call_summary: str | None = None
    duration_seconds: float | None = None
    needs_callback: bool = False
    tenant_id: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_store(cls, raw: dict[str, Any]) -> "CallRecord":
        """Build a record from an Airtable ``{id, createdTime, fields}`` row."""
        fields = raw.get("fields") or {}
        # The explicit column wins; the row's own createdTime only fills in
        # when the column is absent.
        if CREATED_TIME_FIELD in fields:
            timestamp = fields.get(CREATED_TIME_FIELD)
        else:
            timestamp = raw.get("createdTime")

        return cls(
            id=str(raw.get("id", "")),
            created_at=parse_timestamp(timestamp),
            created_time=_optional_str(raw.get("createdTime")),
            caller_name=_optional_str(fields.get(CALLER_NAME_FIELD)),
            phone=_optional_str(fields.get(PHONE_FIELD)),
            email=_optional_str(fields.get(EMAIL_FIELD)),
            patient_type=_patient_type(fields.get(PATIENT_TYPE_FIELD)),
            intake_url_sent=bool(fields.get(INTAKE_URL_SENT_FIELD)),
            call_status=_optional_str(fields.get(CALL_STATUS_FIELD)),
            call_summary=_optional_str(fields.get(CALL_SUMMARY_FIELD)),
            duration_seconds=_optional_float(fields.get(DURATION_FIELD)),
            needs_callback=fields.get(NEEDS_CALLBACK_FIELD) is True,
            tenant_id=_optional_str(fields.get(TENANT_FIELD)),
            fields=dict(fields),
        )

    def to_dashboard(self) -> dict[str, Any]:
        """Shape used by the recent-calls table: ``{id, createdTime, fields}``."""
        return {
            "id": self.id,
            "createdTime": self.created_time,
            "fields": self.fields,
        }
