"""Database models."""

from receptionist.persistence.models.clinic import Clinic, Profile

__all__ = [
    "Clinic",
    "Profile",
]
