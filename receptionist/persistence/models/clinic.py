"""Clinic (tenant) and Profile models."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from receptionist.persistence.database import Base


def _new_clinic_id() -> str:
    return str(uuid.uuid4())


class Clinic(Base):
    """Clinic model: one tenant and the Airtable coordinates of its call log."""

    __tablename__ = "clinics"

    id = Column(String(36), primary_key=True, default=_new_clinic_id)
    name = Column(String(255), nullable=False)
    airtable_base_id = Column(String(64), nullable=True)
    airtable_table_name = Column(String(255), nullable=True, default="Calls")
    airtable_display_fields = Column(JSON, nullable=True)  # ordered list of field names
    retell_agent_id = Column(String(128), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    profiles = relationship("Profile", back_populates="clinic")

    def __repr__(self) -> str:
        return f"<Clinic(id={self.id}, name={self.name}, base={self.airtable_base_id})>"


class Profile(Base):
    """Dashboard user profile, keyed by the auth provider's user id."""

    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id"), nullable=True, index=True)
    role = Column(String(50), nullable=False, default="user")  # admin, user
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    clinic = relationship("Clinic", back_populates="profiles")

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, clinic_id={self.clinic_id}, role={self.role})>"
