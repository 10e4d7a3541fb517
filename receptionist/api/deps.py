"""FastAPI dependencies for auth and tenant resolution."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from receptionist.core.auth import decode_access_token
from receptionist.core.errors import AuthError, ForbiddenError, ReceptionistError
from receptionist.core.tenant_context import set_tenant_context
from receptionist.infrastructure.airtable_client import AirtableClient
from receptionist.infrastructure.retell_client import RetellClient
from receptionist.persistence.database import get_db
from receptionist.persistence.models.clinic import Profile
from receptionist.persistence.repositories.profile_repository import ProfileRepository

# auto_error=False so a missing header surfaces as our 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_tenant_directory(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProfileRepository:
    """Tenant directory backed by the profiles table."""
    return ProfileRepository(db)


def get_airtable_client() -> AirtableClient:
    return AirtableClient()


def get_retell_client() -> RetellClient:
    return RetellClient()


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Get the authenticated user id from the bearer JWT.

    Args:
        credentials: HTTP bearer credentials, if any

    Returns:
        User id (the token's ``sub`` claim)

    Raises:
        AuthError: If the header is missing or the token is invalid
    """
    if credentials is None:
        raise AuthError("Missing Authorization header")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthError("Unauthorized")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Unauthorized")

    return str(user_id)


async def get_current_profile(
    user_id: Annotated[str, Depends(get_current_user_id)],
    directory: Annotated[ProfileRepository, Depends(get_tenant_directory)],
) -> Profile:
    """Get the caller's profile and set the tenant context from it.

    Raises:
        ReceptionistError: If the user has no profile row (500)
    """
    profile = await directory.get_profile(user_id)
    if profile is None:
        raise ReceptionistError("Profile not found")

    set_tenant_context(profile.clinic_id)
    return profile


async def require_admin(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    """Require the admin role.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if profile.role != "admin":
        raise ForbiddenError("Admin access required")
    return profile
