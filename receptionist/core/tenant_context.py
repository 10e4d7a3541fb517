"""Request-scoped context for tenant isolation and log correlation."""

from contextvars import ContextVar
from typing import Optional

# Context variable for the resolved clinic (tenant) id
tenant_id_var: ContextVar[Optional[str]] = ContextVar("tenant_id", default=None)

# Context variable for the current request id
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_tenant_context(tenant_id: str | None) -> None:
    """Set the current tenant context.

    Args:
        tenant_id: Clinic ID to set in context
    """
    tenant_id_var.set(tenant_id)


def get_tenant_context() -> str | None:
    """Get the current tenant context.

    Returns:
        Current clinic ID or None
    """
    return tenant_id_var.get()


def clear_tenant_context() -> None:
    """Clear the current tenant context."""
    tenant_id_var.set(None)


def set_request_id(request_id: str | None) -> None:
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    return request_id_var.get()
