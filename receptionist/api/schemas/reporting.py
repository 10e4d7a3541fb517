"""Pydantic schemas for the dashboard reporting endpoints.

Responses use the dashboard's camelCase keys.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from receptionist.domain.models.call_record import CallRecord
from receptionist.domain.services.call_stats import CallStats


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Call stats ---

class DailyCountResponse(CamelModel):
    date: str  # YYYY-MM-DD
    count: int = 0


class CallStatsResponse(CamelModel):
    total_calls_today: int = 0
    new_patients_today: int = 0
    existing_patients_today: int = 0
    intake_links_sent: int = 0
    callbacks_needed: int = 0
    weekly_data: list[DailyCountResponse] = []

    @classmethod
    def from_stats(cls, stats: CallStats) -> "CallStatsResponse":
        return cls(
            total_calls_today=stats.total_calls_today,
            new_patients_today=stats.new_patients_today,
            existing_patients_today=stats.existing_patients_today,
            intake_links_sent=stats.intake_links_sent,
            callbacks_needed=stats.callbacks_needed,
            weekly_data=[
                DailyCountResponse(date=day.date, count=day.count) for day in stats.weekly_data
            ],
        )


# --- Recent calls ---

class RecentCallsRequest(BaseModel):
    limit: int = Field(20, ge=1, le=100)


class CallRecordResponse(CamelModel):
    id: str
    created_time: str | None = None
    fields: dict[str, Any] = {}

    @classmethod
    def from_record(cls, record: CallRecord) -> "CallRecordResponse":
        return cls(**record.to_dashboard())


class RecentCallsResponse(CamelModel):
    calls: list[CallRecordResponse] = []
    display_fields: list[str] = []
    message: str | None = None
