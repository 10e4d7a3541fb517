"""Profile repository - the tenant directory lookup."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from receptionist.persistence.models.clinic import Profile
from receptionist.persistence.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile entities."""

    def __init__(self, session: AsyncSession):
        """Initialize profile repository."""
        super().__init__(Profile, session)

    async def get_profile(self, user_id: str) -> Profile | None:
        """Get a user's profile with its clinic loaded.

        Args:
            user_id: Auth provider user id (JWT ``sub``)

        Returns:
            Profile or None if the user has no profile row
        """
        stmt = (
            select(Profile)
            .where(Profile.id == user_id)
            .options(selectinload(Profile.clinic))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
