"""listing domains: agt.agents, prop.properties, blog.posts, quote.requests/notes; corp seq uniqueness

Revision ID: 0002_listing_domains
Revises: 0001_initial
Create Date: 2026-10-19 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0002_listing_domains'
down_revision: Union[str, None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    for schema_name in ('agt', 'prop', 'blog', 'quote'):
        op.execute(f"CREATE SCHEMA IF NOT EXISTS {schema_name}")

    # 팀원/파트너 표시 순서는 회사 안에서 유일합니다.
    op.create_unique_constraint(
        'uq_team_members_company_seq', 'team_members', ['company_id', 'seq'], schema='corp'
    )
    op.create_unique_constraint(
        'uq_partners_company_seq', 'partners', ['company_id', 'seq'], schema='corp'
    )

    op.create_table(
        'agents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('whatsapp_number', sa.String(length=50), nullable=True),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('bio', sa.String(length=1000), nullable=True),
        sa.Column('specialization', sa.String(length=30), nullable=False),
        sa.Column('experience', sa.Integer(), nullable=False),
        sa.Column('languages', postgresql.JSONB(), nullable=False),
        sa.Column('certifications', postgresql.JSONB(), nullable=False),
        sa.Column('social_media', postgresql.JSONB(), nullable=False),
        sa.Column('working_hours', postgresql.JSONB(), nullable=False),
        sa.Column('rating', postgresql.JSONB(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('usr.users.id'), nullable=True),
        *_timestamps(),
        schema='agt',
    )
    op.create_index('ix_agt_agents_name', 'agents', ['name'], schema='agt')
    op.create_index('ix_agt_agents_specialization', 'agents', ['specialization'], schema='agt')
    op.create_index('ix_agt_agents_is_active', 'agents', ['is_active'], schema='agt')

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.String(length=2000), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Float(), nullable=False),
        sa.Column('parking', sa.Boolean(), nullable=False),
        sa.Column('area', sa.String(length=100), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=False),
        sa.Column('images', postgresql.JSONB(), nullable=False),
        sa.Column('floor_plans', postgresql.JSONB(), nullable=False),
        sa.Column('amenities', postgresql.JSONB(), nullable=False),
        sa.Column('property_certifications', postgresql.JSONB(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('virtual_tour', sa.String(length=1024), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('coordinates', postgresql.JSONB(), nullable=True),
        sa.Column(
            'agent_id', sa.Integer(), sa.ForeignKey('agt.agents.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('usr.users.id'), nullable=True),
        *_timestamps(),
        schema='prop',
    )
    op.create_index('ix_prop_properties_location', 'properties', ['location'], schema='prop')
    op.create_index('ix_prop_properties_price', 'properties', ['price'], schema='prop')
    op.create_index('ix_prop_properties_agent_id', 'properties', ['agent_id'], schema='prop')
    op.create_index('ix_prop_properties_category_status', 'properties', ['category', 'status'], schema='prop')

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('excerpt', sa.String(length=300), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=False),
        sa.Column('author', sa.String(length=100), nullable=False),
        sa.Column('tags', postgresql.JSONB(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('publish_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('read_time', sa.Integer(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=300), nullable=False, unique=True),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('usr.users.id'), nullable=True),
        *_timestamps(),
        schema='blog',
    )
    op.create_index('ix_blog_posts_publish_date', 'posts', ['publish_date'], schema='blog')
    op.create_index('ix_blog_posts_category_status', 'posts', ['category', 'status'], schema='blog')

    op.create_table(
        'requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=50), nullable=False),
        sa.Column('project_type', sa.String(length=30), nullable=False),
        sa.Column('budget_range', sa.String(length=20), nullable=False),
        sa.Column('timeline', sa.String(length=20), nullable=False),
        sa.Column('project_description', sa.String(length=2000), nullable=False),
        sa.Column('property_type', sa.String(length=20), nullable=True),
        sa.Column('property_size', sa.String(length=100), nullable=True),
        sa.Column('preferred_contact_method', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column(
            'assigned_to_id', sa.Integer(), sa.ForeignKey('agt.agents.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('follow_up_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('estimated_quote_amount', sa.Float(), nullable=True),
        *_timestamps(),
        schema='quote',
    )
    op.create_index('ix_quote_requests_email', 'requests', ['email'], schema='quote')
    op.create_index('ix_quote_requests_status', 'requests', ['status'], schema='quote')
    op.create_index('ix_quote_requests_assigned_to_id', 'requests', ['assigned_to_id'], schema='quote')
    op.create_index('ix_quote_requests_status_priority', 'requests', ['status', 'priority'], schema='quote')

    op.create_table(
        'notes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'quote_id', sa.Integer(), sa.ForeignKey('quote.requests.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('content', sa.String(length=2000), nullable=False),
        sa.Column('added_by_id', sa.Integer(), sa.ForeignKey('usr.users.id'), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        schema='quote',
    )
    op.create_index('ix_quote_notes_quote_id', 'notes', ['quote_id'], schema='quote')


def downgrade() -> None:
    op.drop_index('ix_quote_notes_quote_id', table_name='notes', schema='quote')
    op.drop_table('notes', schema='quote')
    for index_name in (
        'ix_quote_requests_status_priority', 'ix_quote_requests_assigned_to_id',
        'ix_quote_requests_status', 'ix_quote_requests_email',
    ):
        op.drop_index(index_name, table_name='requests', schema='quote')
    op.drop_table('requests', schema='quote')

    op.drop_index('ix_blog_posts_category_status', table_name='posts', schema='blog')
    op.drop_index('ix_blog_posts_publish_date', table_name='posts', schema='blog')
    op.drop_table('posts', schema='blog')

    for index_name in (
        'ix_prop_properties_category_status', 'ix_prop_properties_agent_id',
        'ix_prop_properties_price', 'ix_prop_properties_location',
    ):
        op.drop_index(index_name, table_name='properties', schema='prop')
    op.drop_table('properties', schema='prop')

    for index_name in ('ix_agt_agents_is_active', 'ix_agt_agents_specialization', 'ix_agt_agents_name'):
        op.drop_index(index_name, table_name='agents', schema='agt')
    op.drop_table('agents', schema='agt')

    op.drop_constraint('uq_partners_company_seq', 'partners', schema='corp', type_='unique')
    op.drop_constraint('uq_team_members_company_seq', 'team_members', schema='corp', type_='unique')

    for schema_name in ('quote', 'blog', 'prop', 'agt'):
        op.execute(f"DROP SCHEMA IF EXISTS {schema_name}")
