"""interview requests and expert connections

Revision ID: 0002_interviews
Revises: 0001_expertgate
Create Date: 2026-10-17 15:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '0002_interviews'
down_revision: Union[str, None] = '0001_expertgate'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _user_fk(name):
    return sa.Column(name, sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'interview_requests',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _user_fk('researcher_id'),
        _user_fk('expert_id'),
        sa.Column('research_topic', sa.String(255), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('preferred_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('day_reminder_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('soon_reminder_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_interview_requests_id', 'interview_requests', ['id'])
    op.create_index('ix_interview_requests_researcher_id', 'interview_requests', ['researcher_id'])
    op.create_index('ix_interview_requests_expert_id', 'interview_requests', ['expert_id'])
    op.create_index('ix_interview_requests_scheduled_date', 'interview_requests', ['scheduled_date'])

    op.create_table(
        'expert_connections',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _user_fk('requester_id'),
        _user_fk('recipient_id'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        *_timestamps(),
    )
    op.create_index('ix_expert_connections_id', 'expert_connections', ['id'])
    op.create_index('ix_expert_connections_requester_id', 'expert_connections', ['requester_id'])
    op.create_index('ix_expert_connections_recipient_id', 'expert_connections', ['recipient_id'])


def downgrade() -> None:
    op.drop_table('expert_connections')
    op.drop_table('interview_requests')
