"""Domain services."""

from receptionist.domain.services.call_stats import CallStats, compute_stats
from receptionist.domain.services.lead_service import LeadService
from receptionist.domain.services.webhook_normalizer import NormalizedCallEvent, WebhookNormalizer

__all__ = ["CallStats", "compute_stats", "LeadService", "NormalizedCallEvent", "WebhookNormalizer"]
