"""Pydantic schemas for the public lead and demo endpoints."""

from pydantic import BaseModel


class LeadRequest(BaseModel):
    """Lead form body; presence and format are checked by the lead service."""

    name: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None


class LeadResponse(BaseModel):
    success: bool
    stored: bool | None = None


class DemoCallRequest(BaseModel):
    phone: str | None = None


class DemoCallResponse(BaseModel):
    success: bool
    callId: str | None = None
