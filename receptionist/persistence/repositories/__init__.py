"""Repository implementations."""

from receptionist.persistence.repositories.base import BaseRepository
from receptionist.persistence.repositories.clinic_repository import ClinicRepository
from receptionist.persistence.repositories.profile_repository import ProfileRepository

__all__ = [
    "BaseRepository",
    "ClinicRepository",
    "ProfileRepository",
]
