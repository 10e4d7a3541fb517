"""Clinic repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from receptionist.persistence.models.clinic import Clinic
from receptionist.persistence.repositories.base import BaseRepository


class ClinicRepository(BaseRepository[Clinic]):
    """Repository for Clinic entities."""

    def __init__(self, session: AsyncSession):
        """Initialize clinic repository."""
        super().__init__(Clinic, session)
