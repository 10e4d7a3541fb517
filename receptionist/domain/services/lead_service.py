"""Marketing lead capture: validation, Airtable write, notifications."""

import asyncio
import json
import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from receptionist.core.errors import ConfigurationError, StoreQueryError, ValidationError
from receptionist.core.phone import digits_only, display_us_phone, to_us_e164
from receptionist.infrastructure.airtable_client import AirtableClient
from receptionist.infrastructure.webhooks import post_json
from receptionist.settings import settings

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

HOMEPAGE_SOURCE = "Homepage Popup"
DEMO_SOURCE = "Demo Page"


@dataclass
class LeadPayload:
    name: str
    company: str
    email: str
    phone: str
    source: str
    createdAt: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class FieldNameMap:
    """Airtable column names for each lead attribute."""

    name: str = "Name"
    company: str = "Company"
    email: str = "Email"
    phone: str = "Phone"
    source: str = "Source"
    created_at: str = "Created At"

    def build_fields(self, payload: LeadPayload) -> dict[str, str]:
        return {
            self.name: payload.name,
            self.company: payload.company,
            self.email: payload.email,
            self.phone: payload.phone,
            self.source: payload.source,
            self.created_at: payload.createdAt,
        }


# Column layouts seen across lead tables, tried in order
KNOWN_FIELD_MAPS = [
    FieldNameMap(),
    FieldNameMap(email="Email Address", phone="Phone Number"),
    FieldNameMap(name="Full Name", email="Email Address", phone="Phone Number"),
    FieldNameMap(company="Company Name", email="Email Address", phone="Phone Number"),
]


def field_map_candidates() -> list[FieldNameMap]:
    """Field layouts to try; an env override layout goes first when set."""
    overrides = {
        "name": settings.leads_field_name,
        "company": settings.leads_field_company,
        "email": settings.leads_field_email,
        "phone": settings.leads_field_phone,
        "source": settings.leads_field_source,
        "created_at": settings.leads_field_created_at,
    }
    overrides = {key: value for key, value in overrides.items() if value}
    if overrides:
        return [FieldNameMap(**overrides), *KNOWN_FIELD_MAPS]
    return list(KNOWN_FIELD_MAPS)


def _is_unknown_field_error(error: StoreQueryError) -> bool:
    if error.upstream_status != 422:
        return False
    try:
        parsed = json.loads(error.body)
    except ValueError:
        return False
    if not isinstance(parsed, dict) or not isinstance(parsed.get("error"), dict):
        return False
    return parsed["error"].get("type") == "UNKNOWN_FIELD_NAME"


def validate_lead(
    body: dict[str, Any], source: str, exact_phone_digits: bool = False
) -> LeadPayload:
    """Validate a lead form and build the normalized payload.

    Args:
        body: Form fields name, company, email, phone
        source: Lead source label
        exact_phone_digits: Require exactly 10 digits (demo form) instead of at least 10

    Raises:
        ValidationError: With a message suitable for the form
    """
    name = body.get("name")
    company = body.get("company")
    email = body.get("email")
    phone = body.get("phone")

    if not name or not company or not email or not phone:
        raise ValidationError("All fields are required.")

    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address.")

    digit_count = len(digits_only(phone))
    if exact_phone_digits:
        if digit_count != 10:
            raise ValidationError("Please enter a valid 10-digit US phone number.")
        phone = to_us_e164(phone.strip())
    else:
        if digit_count < 10:
            raise ValidationError("Please enter a valid phone number (at least 10 digits).")
        phone = phone.strip()

    return LeadPayload(
        name=name.strip(),
        company=company.strip(),
        email=email.strip().lower(),
        phone=phone,
        source=source,
        createdAt=datetime.now(timezone.utc).isoformat(),
    )


def homepage_slack_message(payload: LeadPayload) -> dict[str, Any]:
    return {
        "blocks": [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": "New Rocky Demo Request", "emoji": True},
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Name:*\n{payload.name}"},
                    {"type": "mrkdwn", "text": f"*Company:*\n{payload.company}"},
                    {"type": "mrkdwn", "text": f"*Email:*\n{payload.email}"},
                    {"type": "mrkdwn", "text": f"*Phone:*\n{payload.phone}"},
                ],
            },
            {
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"Source: {payload.source} | Time: {payload.createdAt}"}
                ],
            },
        ]
    }


def demo_slack_message(payload: LeadPayload) -> dict[str, Any]:
    return {
        "text": (
            "New Rocky Demo Requested\n"
            f"Name: {payload.name}\n"
            f"Company: {payload.company}\n"
            f"Email: {payload.email}\n"
            f"Phone: {display_us_phone(payload.phone)}"
        )
    }


class LeadService:
    """Persist marketing leads and notify the sales channels."""

    def __init__(self, airtable_client: AirtableClient | None = None) -> None:
        self.airtable = airtable_client or AirtableClient()

    async def store_lead(self, payload: LeadPayload) -> None:
        """Write the lead to Airtable, falling back across column layouts.

        Only an ``UNKNOWN_FIELD_NAME`` rejection moves on to the next layout.

        Raises:
            ConfigurationError: Leads base not configured
            StoreQueryError: Airtable rejected every attempt
        """
        if not settings.leads_base_id or not self.airtable.api_key:
            raise ConfigurationError("Airtable configuration missing")

        candidates = field_map_candidates()
        for attempt, mapping in enumerate(candidates):
            try:
                await self.airtable.create_record(
                    settings.leads_base_id,
                    settings.leads_table_name,
                    mapping.build_fields(payload),
                )
                logger.info("[AIRTABLE] Lead created successfully")
                return
            except StoreQueryError as e:
                logger.error(f"[AIRTABLE] Error: {e.body}")
                if _is_unknown_field_error(e) and attempt < len(candidates) - 1:
                    logger.warning("[AIRTABLE] Field mismatch; retrying with alternate field names.")
                    continue
                raise

    async def notify(self, payload: LeadPayload, slack_url: str | None, slack_message: dict) -> list:
        """Fire Slack and automation notifications concurrently.

        Returns:
            One result per notification: a status code, None, or the exception
        """
        tasks = []
        if slack_url:
            tasks.append(post_json(slack_url, slack_message, "SLACK"))
        else:
            logger.warning("[SLACK] Webhook URL not configured, skipping")
        if settings.lead_webhook_url:
            tasks.append(post_json(settings.lead_webhook_url, payload.to_dict(), "N8N"))
        else:
            logger.warning("[N8N] Webhook URL not configured, skipping")

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"[LEADS] Notification failed: {result}")
        return list(results)

    async def submit_homepage_lead(self, body: dict[str, Any]) -> dict[str, Any]:
        """Homepage popup lead; the Airtable write must succeed."""
        payload = validate_lead(body, HOMEPAGE_SOURCE)
        logger.info(
            "[SUBMIT_LEAD] Processing lead",
            extra={"lead_name": payload.name, "company": payload.company, "email": payload.email},
        )
        await self.store_lead(payload)
        await self.notify(payload, settings.slack_webhook_url, homepage_slack_message(payload))
        return {"success": True}

    async def submit_demo_lead(self, body: dict[str, Any]) -> dict[str, Any]:
        """Demo page lead; the Airtable write is best effort."""
        payload = validate_lead(body, DEMO_SOURCE, exact_phone_digits=True)
        logger.info(
            "[SUBMIT_DEMO_LEAD] Processing lead",
            extra={"lead_name": payload.name, "company": payload.company, "email": payload.email},
        )
        try:
            await self.store_lead(payload)
            stored = True
        except (ConfigurationError, StoreQueryError, httpx.HTTPError) as e:
            logger.warning(f"[AIRTABLE] Demo lead not stored: {e}")
            stored = False

        await self.notify(payload, settings.demo_slack_webhook_url, demo_slack_message(payload))
        return {"success": True, "stored": stored}
