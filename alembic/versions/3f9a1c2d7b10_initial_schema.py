"""initial_schema

Revision ID: 3f9a1c2d7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    'user_role_enum': ('ADMIN', 'COACH', 'PARENT'),
    'user_status_enum': ('ACTIVE', 'INACTIVE', 'DELETED'),
    'session_type_enum': ('INDIVIDUAL', 'GROUP'),
    'session_status_enum': ('SCHEDULED', 'CONFIRMED', 'CANCELLED', 'COMPLETED'),
    'invoice_type_enum': ('PARENT_INVOICE', 'COACH_PAYOUT'),
    'invoice_status_enum': ('PENDING', 'PAID', 'OVERDUE'),
    'target_audience_enum': ('PARENT', 'COACH', 'ALL'),
    'report_type_enum': (
        'ATTENDANCE', 'FINANCIAL', 'SESSION_SUMMARY', 'PERFORMANCE', 'CUSTOM'
    ),
    'report_status_enum': ('PENDING', 'GENERATED', 'FAILED'),
    'request_status_enum': (
        'PENDING', 'APPROVED', 'DENIED', 'SELECTED', 'NOT_SELECTED', 'COMPLETED'
    ),
}


def _enum(name: str) -> postgresql.ENUM:
    # Types are created once up front and shared between tables
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema - Create the Grow Fitness tables."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', _enum('user_role_enum'), nullable=False),
        sa.Column('status', _enum('user_status_enum'), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        sa.Column('parent_profile', sa.JSON(), nullable=True),
        sa.Column('coach_profile', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'locations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('place_url', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'kids',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('gender', sa.String(), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('goal', sa.Text(), nullable=True),
        sa.Column('currently_in_sports', sa.Boolean(), nullable=False),
        sa.Column('medical_conditions', sa.JSON(), nullable=False),
        sa.Column('session_type', _enum('session_type_enum'), nullable=False),
        sa.Column('achievements', sa.JSON(), nullable=False),
        sa.Column('milestones', sa.JSON(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_kids_parent_id', 'kids', ['parent_id'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', _enum('session_type_enum'), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('location_id', sa.Uuid(), nullable=False),
        sa.Column('date_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('kid_id', sa.Uuid(), nullable=True),
        sa.Column('status', _enum('session_status_enum'), nullable=False),
        sa.Column('is_free_session', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id']),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.ForeignKeyConstraint(['kid_id'], ['kids.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sessions_coach_id', 'sessions', ['coach_id'])
    op.create_index('ix_sessions_location_id', 'sessions', ['location_id'])
    op.create_index('ix_sessions_date_time', 'sessions', ['date_time'])

    op.create_table(
        'session_kids',
        sa.Column('session_id', sa.Uuid(), nullable=False),
        sa.Column('kid_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['kid_id'], ['kids.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('session_id', 'kid_id')
    )

    op.create_table(
        'invoices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', _enum('invoice_type_enum'), nullable=False),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('coach_id', sa.Uuid(), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('status', _enum('invoice_status_enum'), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('export_fields', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_invoices_parent_id', 'invoices', ['parent_id'])
    op.create_index('ix_invoices_coach_id', 'invoices', ['coach_id'])

    op.create_table(
        'banners',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('target_audience', _enum('target_audience_enum'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'quizzes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('questions', sa.JSON(), nullable=False),
        sa.Column('target_audience', _enum('target_audience_enum'), nullable=False),
        sa.Column('passing_score', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'reports',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', _enum('report_type_enum'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', _enum('report_status_enum'), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('filters', sa.JSON(), nullable=False),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('generated_by', sa.Uuid(), nullable=True),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['generated_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'free_session_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('parent_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('kid_name', sa.String(), nullable=False),
        sa.Column('session_type', _enum('session_type_enum'), nullable=False),
        sa.Column('location_id', sa.Uuid(), nullable=True),
        sa.Column('selected_session_id', sa.Uuid(), nullable=True),
        sa.Column('preferred_date_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', _enum('request_status_enum'), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(
            ['selected_session_id'], ['sessions.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_free_session_requests_status', 'free_session_requests', ['status']
    )

    op.create_table(
        'reschedule_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('session_id', sa.Uuid(), nullable=False),
        sa.Column('requested_by', sa.Uuid(), nullable=False),
        sa.Column('new_date_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', _enum('request_status_enum'), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['requested_by'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_reschedule_requests_status', 'reschedule_requests', ['status'])

    op.create_table(
        'extra_session_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('parent_id', sa.Uuid(), nullable=False),
        sa.Column('kid_id', sa.Uuid(), nullable=False),
        sa.Column('coach_id', sa.Uuid(), nullable=False),
        sa.Column('session_type', _enum('session_type_enum'), nullable=False),
        sa.Column('location_id', sa.Uuid(), nullable=False),
        sa.Column('preferred_date_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', _enum('request_status_enum'), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['kid_id'], ['kids.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_extra_session_requests_status', 'extra_session_requests', ['status']
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('actor_id', sa.Uuid(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('entity_type', sa.String(), nullable=False),
        sa.Column('entity_id', sa.String(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['actor_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_timestamp', 'audit_logs', ['timestamp'])


def downgrade() -> None:
    """Downgrade schema - Drop the Grow Fitness tables."""
    for table in (
        'audit_logs',
        'extra_session_requests',
        'reschedule_requests',
        'free_session_requests',
        'reports',
        'quizzes',
        'banners',
        'invoices',
        'session_kids',
        'sessions',
        'kids',
        'locations',
        'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in ENUMS:
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
