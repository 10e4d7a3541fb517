"""Application settings using Pydantic BaseSettings."""

import re

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_v1_prefix: str = "/api/v1"

    # Tenant directory database
    database_url: str = "sqlite+aiosqlite:///./receptionist.db"

    # JWT (shared secret of the auth provider)
    jwt_secret_key: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = "authenticated"
    jwt_access_token_expire_minutes: int = 60

    # Airtable (call records + leads)
    airtable_api_key: str | None = None
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_default_table_name: str = "Calls"
    airtable_max_pages: int = 10
    airtable_timeout_seconds: float = 15.0

    # Leads table and optional field name overrides
    leads_base_id: str | None = None
    leads_table_name: str = "Leads"
    leads_field_name: str | None = None
    leads_field_company: str | None = None
    leads_field_email: str | None = None
    leads_field_phone: str | None = None
    leads_field_source: str | None = None
    leads_field_created_at: str | None = None

    # Retell (voice provider)
    retell_api_key: str | None = None
    retell_api_url: str = "https://api.retellai.com"
    retell_timeout_seconds: float = 10.0
    demo_call_from_number: str = "+15076687433"
    demo_call_agent_id: str = "agent_63426c2713064c5f302799ae36"

    # Downstream automation (n8n)
    automation_webhook_url: str = "https://rockyai.app.n8n.cloud/webhook/8b7d8918-f3c8-4edb-a9f6-8711604385ba"
    lead_webhook_url: str | None = None

    # Slack notifications for lead capture
    slack_webhook_url: str | None = None
    demo_slack_webhook_url: str | None = None

    # Patient intake portal
    intake_portal_base_url: str = "https://intake.rockyai.app/start"
    intake_query_param: str = "clinic"
    intake_fallback_code: str = "general"

    # Agent id -> tenant id used when a webhook carries no tenant at all.
    # Temporary demo wiring, remove before onboarding more clinics.
    default_tenant_by_agent: dict[str, str] = {}

    # Lead form throttle
    lead_rate_limit_requests: int = 5
    lead_rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_async_database_url() -> str:
    """Get database URL converted for the asyncpg driver."""
    url = settings.database_url
    # Convert postgres:// to postgresql+asyncpg:// for SQLAlchemy async
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    # asyncpg doesn't support sslmode, it uses ssl parameter
    if "sslmode=" in url:
        url = re.sub(r'[?&]sslmode=[^&]*', '', url)
        url = url.rstrip('?&')
    return url


settings = Settings()
