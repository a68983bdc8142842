"""create expertgate tables

Revision ID: 0001_expertgate
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '0001_expertgate'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('user_type', sa.String(20), nullable=False, server_default='researcher'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('institution', sa.String(255), nullable=True),
        sa.Column('field_of_expertise', sa.JSON(), nullable=True),
        sa.Column('years_of_experience', sa.Integer(), nullable=True),
        sa.Column('specific_experience', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'password_reset_codes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('code', sa.String(6), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_password_reset_codes_id', 'password_reset_codes', ['id'])
    op.create_index('ix_password_reset_codes_email', 'password_reset_codes', ['email'])

    op.create_table(
        'support_tickets',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        *_timestamps(),
    )
    op.create_index('ix_support_tickets_id', 'support_tickets', ['id'])
    op.create_index('ix_support_tickets_user_id', 'support_tickets', ['user_id'])

    op.create_table(
        'site_content',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('content_key', sa.String(255), nullable=False),
        sa.Column('content_value', sa.Text(), nullable=False, server_default=''),
        *_timestamps(),
    )
    op.create_index('ix_site_content_id', 'site_content', ['id'])
    op.create_index('ix_site_content_content_key', 'site_content', ['content_key'], unique=True)


def downgrade() -> None:
    op.drop_table('site_content')
    op.drop_table('support_tickets')
    op.drop_table('password_reset_codes')
    op.drop_table('users')
