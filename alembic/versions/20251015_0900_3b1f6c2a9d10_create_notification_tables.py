"""create notification tables

Revision ID: 3b1f6c2a9d10
Revises:
Create Date: 2025-10-15 09:00:00.000000+00:00

"""
from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

from notification_dispatcher.core.database import UTCDateTime

# revision identifiers, used by Alembic.
revision: str = '3b1f6c2a9d10'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('display_name', sa.String(length=200), nullable=True),
        sa.Column(
            'fcm_token',
            sa.String(length=512),
            nullable=True,
            comment='Firebase Cloud Messaging device token; cleared when revoked',
        ),
        sa.Column('created_at', UTCDateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', UTCDateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )

    op.create_table(
        'scheduled_notifications',
        sa.Column('id', sa.Uuid(), nullable=False, comment='UUID v7 primary key (time-sortable)'),
        sa.Column('recipient_id', sa.String(length=128), nullable=False),
        sa.Column('channel', sa.String(length=20), nullable=False),
        sa.Column('payload', JSON_TYPE, nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('scheduled_for', UTCDateTime(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('last_attempt_at', UTCDateTime(), nullable=True),
        sa.Column('sent_at', UTCDateTime(), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', UTCDateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', UTCDateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            'attempts >= 0', name=op.f('ck_scheduled_notifications_attempts_non_negative'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_scheduled_notifications')),
    )
    op.create_index(
        op.f('ix_scheduled_notifications_recipient_id'),
        'scheduled_notifications',
        ['recipient_id'],
    )
    op.create_index(
        'ix_scheduled_notifications_status_scheduled_for',
        'scheduled_notifications',
        ['status', 'scheduled_for'],
    )
    op.create_index(
        'ix_scheduled_notifications_status_updated_at',
        'scheduled_notifications',
        ['status', 'updated_at'],
    )

    op.create_table(
        'notification_logs',
        sa.Column('id', sa.Uuid(), nullable=False, comment='UUID v7 primary key (time-sortable)'),
        sa.Column('notification_id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.String(length=128), nullable=True),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('channel', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('sent_at', UTCDateTime(), nullable=True),
        sa.Column('created_at', UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_notification_logs')),
    )
    op.create_index(
        op.f('ix_notification_logs_notification_id'), 'notification_logs', ['notification_id'],
    )
    op.create_index(op.f('ix_notification_logs_user_id'), 'notification_logs', ['user_id'])

    op.create_table(
        'email_queue',
        sa.Column('id', sa.Uuid(), nullable=False, comment='UUID v7 primary key (time-sortable)'),
        sa.Column('to', sa.String(length=320), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('event_id', sa.String(length=128), nullable=True),
        sa.Column('template_id', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_email_queue')),
    )
    op.create_index(op.f('ix_email_queue_status'), 'email_queue', ['status'])

    op.create_table(
        'in_app_notifications',
        sa.Column('id', sa.Uuid(), nullable=False, comment='UUID v7 primary key (time-sortable)'),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('event_id', sa.String(length=128), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_in_app_notifications')),
    )
    op.create_index(
        op.f('ix_in_app_notifications_user_id'), 'in_app_notifications', ['user_id'],
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index(op.f('ix_in_app_notifications_user_id'), table_name='in_app_notifications')
    op.drop_table('in_app_notifications')
    op.drop_index(op.f('ix_email_queue_status'), table_name='email_queue')
    op.drop_table('email_queue')
    op.drop_index(op.f('ix_notification_logs_user_id'), table_name='notification_logs')
    op.drop_index(op.f('ix_notification_logs_notification_id'), table_name='notification_logs')
    op.drop_table('notification_logs')
    op.drop_index(
        'ix_scheduled_notifications_status_updated_at', table_name='scheduled_notifications',
    )
    op.drop_index(
        'ix_scheduled_notifications_status_scheduled_for', table_name='scheduled_notifications',
    )
    op.drop_index(
        op.f('ix_scheduled_notifications_recipient_id'), table_name='scheduled_notifications',
    )
    op.drop_table('scheduled_notifications')
    op.drop_table('users')
