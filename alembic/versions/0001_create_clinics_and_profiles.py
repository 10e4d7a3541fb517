"""create clinics and profiles

Revision ID: 0001_create_clinics_and_profiles
Revises:
Create Date: 2026-10-19

Adds:
- clinics: tenants and the Airtable coordinates of their call logs
- profiles: dashboard users keyed by the auth provider's user id
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_clinics_and_profiles'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'clinics',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('airtable_base_id', sa.String(length=64), nullable=True),
        sa.Column('airtable_table_name', sa.String(length=255), nullable=True),
        sa.Column('airtable_display_fields', sa.JSON(), nullable=True),
        sa.Column('retell_agent_id', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('clinic_id', sa.String(length=36), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['clinic_id'], ['clinics.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=False)
    op.create_index(op.f('ix_profiles_clinic_id'), 'profiles', ['clinic_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_profiles_clinic_id'), table_name='profiles')
    op.drop_index(op.f('ix_profiles_email'), table_name='profiles')
    op.drop_table('profiles')
    op.drop_table('clinics')
