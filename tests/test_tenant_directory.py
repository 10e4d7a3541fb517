"""Tests for the profile-backed tenant directory."""

import pytest

from receptionist.persistence.repositories import ClinicRepository, ProfileRepository


@pytest.mark.asyncio
async def test_get_profile_loads_clinic(db_session):
    clinic = await ClinicRepository(db_session).create(
        name="Lakeside Physio",
        airtable_base_id="appClinic",
        airtable_display_fields=["Caller Name", "Call Summary"],
    )
    await ProfileRepository(db_session).create(
        id="user-1", email="desk@example.com", clinic_id=clinic.id
    )
    db_session.expunge_all()

    profile = await ProfileRepository(db_session).get_profile("user-1")

    assert profile is not None
    assert profile.clinic_id == clinic.id
    assert profile.role == "user"
    assert profile.clinic.airtable_base_id == "appClinic"
    assert profile.clinic.airtable_table_name == "Calls"
    assert profile.clinic.airtable_display_fields == ["Caller Name", "Call Summary"]


@pytest.mark.asyncio
async def test_profile_without_clinic(db_session):
    await ProfileRepository(db_session).create(id="user-2", email="new@example.com")
    db_session.expunge_all()

    profile = await ProfileRepository(db_session).get_profile("user-2")

    assert profile.clinic_id is None
    assert profile.clinic is None


@pytest.mark.asyncio
async def test_unknown_user_has_no_profile(db_session):
    assert await ProfileRepository(db_session).get_profile("missing") is None


@pytest.mark.asyncio
async def test_clinic_lookup_by_id(db_session):
    clinic = await ClinicRepository(db_session).create(name="Harbor Dental")

    found = await ClinicRepository(db_session).get_by_id(clinic.id)

    assert found.name == "Harbor Dental"
    assert await ClinicRepository(db_session).get_by_id("nope") is None
