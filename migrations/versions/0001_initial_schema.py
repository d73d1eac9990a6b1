"""initial schema: usr.users, shared.pending_asset_deletions, corp company profile

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    for schema_name in ('shared', 'usr', 'corp'):
        op.execute(f"CREATE SCHEMA IF NOT EXISTS {schema_name}")

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True, unique=True),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        schema='usr',
    )

    op.create_table(
        'pending_asset_deletions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('public_id', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=1024), nullable=True),
        sa.Column('last_error', sa.String(), nullable=True),
        sa.Column('attempts', sa.Integer(), nullable=False),
        *_timestamps(),
        schema='shared',
    )
    op.create_index(
        'ix_shared_pending_asset_deletions_public_id', 'pending_asset_deletions', ['public_id'], schema='shared'
    )

    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('logo', sa.String(length=1024), nullable=True),
        sa.Column('about', postgresql.JSONB(), nullable=False),
        sa.Column('contacts', postgresql.JSONB(), nullable=False),
        sa.Column('social_media', postgresql.JSONB(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('updated_by_id', sa.Integer(), sa.ForeignKey('usr.users.id'), nullable=True),
        *_timestamps(),
        schema='corp',
    )
    op.create_index(
        'uq_companies_single_active', 'companies', ['is_active'],
        unique=True, schema='corp', postgresql_where=sa.text('is_active'),
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('corp.companies.id'), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('position', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('social_links', postgresql.JSONB(), nullable=False),
        *_timestamps(),
        schema='corp',
    )
    op.create_index('ix_corp_team_members_company_id', 'team_members', ['company_id'], schema='corp')

    op.create_table(
        'partners',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('corp.companies.id'), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('website', sa.String(length=1024), nullable=True),
        sa.Column('logo', sa.String(length=1024), nullable=True),
        *_timestamps(),
        schema='corp',
    )
    op.create_index('ix_corp_partners_company_id', 'partners', ['company_id'], schema='corp')


def downgrade() -> None:
    op.drop_index('ix_corp_partners_company_id', table_name='partners', schema='corp')
    op.drop_table('partners', schema='corp')
    op.drop_index('ix_corp_team_members_company_id', table_name='team_members', schema='corp')
    op.drop_table('team_members', schema='corp')
    op.drop_index('uq_companies_single_active', table_name='companies', schema='corp')
    op.drop_table('companies', schema='corp')
    op.drop_index('ix_shared_pending_asset_deletions_public_id', table_name='pending_asset_deletions', schema='shared')
    op.drop_table('pending_asset_deletions', schema='shared')
    op.drop_table('users', schema='usr')
