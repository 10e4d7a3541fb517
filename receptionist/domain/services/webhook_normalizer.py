"""Normalize Retell call-completion webhooks for the n8n automation.

The owning clinic is resolved through an ordered fallback chain, first hit
wins:

1. ``metadata`` of the call as reported by Retell's get-call API
2. ``metadata`` carried by the webhook itself (top level or under ``call``)
3. configured default clinic for the webhook's agent id (demo wiring)
4. no clinic - the event is still forwarded with ``clinic_id: null``

Resolution failures are logged, never raised: Retell retries webhooks that
do not get a 200, and an unknown clinic will not resolve on retry either.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from receptionist.infrastructure.retell_client import RetellClient
from receptionist.infrastructure.webhooks import post_json
from receptionist.settings import settings

logger = logging.getLogger(__name__)

# Metadata keys that may carry the clinic id, in priority order
TENANT_METADATA_KEYS = ("clinic_id", "tenant_id")

# Keys that may carry the caller's contact address, in priority order
ADDRESS_KEYS = ("phone_number", "phone", "email")

PATIENT_TYPES = ("new", "existing")

# Unrecognized or missing caller classifications are treated as new patients.
# This inflates the new-patient count; change here to introduce an "unknown" bucket.
DEFAULT_PATIENT_TYPE = "new"

EVENT_CHANNEL = "sms"
EVENT_NAMES = {
    "new": "new_patient",
    "existing": "existing_patient",
}


@dataclass
class NormalizedCallEvent:
    """Provider-agnostic event forwarded to the automation endpoint."""

    channel: str
    name: str
    address: str
    url: str
    patient_type: str
    clinic_id: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def extract_call_id(payload: dict[str, Any]) -> str | None:
    """Call id from ``call.call_id`` or the top-level ``call_id``."""
    call = _as_dict(payload.get("call"))
    return call.get("call_id") or payload.get("call_id") or None


def extract_agent_id(payload: dict[str, Any]) -> str | None:
    call = _as_dict(payload.get("call"))
    return payload.get("agent_id") or call.get("agent_id") or None


def tenant_from_metadata(metadata: Any) -> str | None:
    """First non-empty clinic id found in a metadata object."""
    metadata = _as_dict(metadata)
    for key in TENANT_METADATA_KEYS:
        value = metadata.get(key)
        if value:
            return str(value)
    return None


def payload_metadata(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Webhook metadata objects, top level first, then nested under ``call``."""
    call = _as_dict(payload.get("call"))
    return [_as_dict(payload.get("metadata")), _as_dict(call.get("metadata"))]


def payload_call_analysis(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Call analysis objects, top level first, then nested under ``call``."""
    call = _as_dict(payload.get("call"))
    return [_as_dict(payload.get("call_analysis")), _as_dict(call.get("call_analysis"))]


def _analysis_sources(
    call_analyses: list[dict[str, Any]], metadatas: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Lookup order: each analysis' custom data, then the analysis, then metadata."""
    sources = []
    for call_analysis in call_analyses:
        sources.append(_as_dict(call_analysis.get("custom_analysis_data")))
        sources.append(call_analysis)
    return sources + metadatas


def resolve_patient_type(
    call_analyses: list[dict[str, Any]], metadatas: list[dict[str, Any]]
) -> str:
    """Caller classification, defaulting to ``DEFAULT_PATIENT_TYPE``."""
    for source in _analysis_sources(call_analyses, metadatas):
        value = source.get("patient_type")
        if isinstance(value, str) and value.strip().lower() in PATIENT_TYPES:
            return value.strip().lower()
    return DEFAULT_PATIENT_TYPE


def resolve_address(
    call_analyses: list[dict[str, Any]], metadatas: list[dict[str, Any]]
) -> str:
    """Contact address from call analysis, then metadata; empty if absent."""
    for source in _analysis_sources(call_analyses, metadatas):
        for key in ADDRESS_KEYS:
            value = source.get(key)
            if value:
                return str(value).strip()
    return ""


def build_intake_url(tenant_id: str | None) -> str:
    """Patient intake link keyed by the first 8 characters of the clinic id."""
    code = tenant_id[:8] if tenant_id else settings.intake_fallback_code
    return f"{settings.intake_portal_base_url}?{settings.intake_query_param}={code}"


class WebhookNormalizer:
    """Resolve the clinic for a Retell webhook and forward a normalized event."""

    def __init__(
        self,
        retell_client: RetellClient | None = None,
        default_tenant_by_agent: dict[str, str] | None = None,
        automation_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.retell_client = retell_client or RetellClient()
        self.default_tenant_by_agent = (
            settings.default_tenant_by_agent
            if default_tenant_by_agent is None
            else default_tenant_by_agent
        )
        self.automation_url = automation_url or settings.automation_webhook_url
        self._http_client = http_client

    async def _fetch_call_details(self, call_id: str | None) -> dict[str, Any]:
        """Call details from Retell, or an empty dict on any failure."""
        if not call_id:
            return {}
        if not self.retell_client.configured:
            logger.warning("[RETELL] API key not configured, skipping call lookup")
            return {}
        try:
            details = await self.retell_client.get_call(call_id)
            logger.info(f"[RETELL] Fetched call details for {call_id}")
            return _as_dict(details)
        except Exception as e:
            logger.error(f"[RETELL] Error fetching call details for {call_id}: {e}")
            return {}

    async def resolve_tenant(
        self, payload: dict[str, Any], call_details: dict[str, Any] | None = None
    ) -> str | None:
        """Walk the fallback chain and return the clinic id, or None.

        Args:
            payload: Raw webhook body
            call_details: Retell call details if already fetched
        """
        if call_details is None:
            call_details = await self._fetch_call_details(extract_call_id(payload))

        tenant_id = tenant_from_metadata(call_details.get("metadata"))
        if tenant_id:
            logger.info(f"[WEBHOOK] Found clinic_id in call metadata: {tenant_id}")
            return tenant_id

        for metadata in payload_metadata(payload):
            tenant_id = tenant_from_metadata(metadata)
            if tenant_id:
                logger.info(f"[WEBHOOK] Found clinic_id in webhook metadata: {tenant_id}")
                return tenant_id

        agent_id = extract_agent_id(payload)
        if agent_id and agent_id in self.default_tenant_by_agent:
            tenant_id = self.default_tenant_by_agent[agent_id]
            logger.warning(
                f"[WEBHOOK] Using default clinic {tenant_id} for agent {agent_id}; "
                "temporary mapping, not for multi-clinic production"
            )
            return tenant_id

        logger.warning(
            f"[WEBHOOK] Could not resolve clinic for call {extract_call_id(payload)}"
        )
        return None

    async def normalize(self, payload: dict[str, Any]) -> NormalizedCallEvent:
        """Build the normalized event for a webhook payload."""
        call_details = await self._fetch_call_details(extract_call_id(payload))
        tenant_id = await self.resolve_tenant(payload, call_details)

        # Webhook values first, provider call details fill whatever is missing
        call_analyses = payload_call_analysis(payload) + [
            _as_dict(call_details.get("call_analysis"))
        ]
        metadatas = payload_metadata(payload) + [_as_dict(call_details.get("metadata"))]

        patient_type = resolve_patient_type(call_analyses, metadatas)
        return NormalizedCallEvent(
            channel=EVENT_CHANNEL,
            name=EVENT_NAMES[patient_type],
            address=resolve_address(call_analyses, metadatas),
            url=build_intake_url(tenant_id),
            patient_type=patient_type,
            clinic_id=tenant_id,
        )

    async def forward(self, event: NormalizedCallEvent) -> int | None:
        """POST the event to the automation endpoint once; never raises."""
        status_code = await post_json(
            self.automation_url, event.to_dict(), "N8N", http_client=self._http_client
        )
        logger.info(f"[N8N] Automation response status: {status_code}")
        return status_code

    async def process(self, payload: dict[str, Any]) -> NormalizedCallEvent:
        """Normalize and forward a webhook payload."""
        event = await self.normalize(payload)
        await self.forward(event)
        return event
