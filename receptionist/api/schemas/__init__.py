"""API schemas."""

from receptionist.api.schemas.admin import StoreSchemaResponse
from receptionist.api.schemas.leads import DemoCallRequest, DemoCallResponse, LeadRequest, LeadResponse
from receptionist.api.schemas.reporting import CallStatsResponse, RecentCallsRequest, RecentCallsResponse

__all__ = [
    "CallStatsResponse",
    "DemoCallRequest",
    "DemoCallResponse",
    "LeadRequest",
    "LeadResponse",
    "RecentCallsRequest",
    "RecentCallsResponse",
    "StoreSchemaResponse",
]
