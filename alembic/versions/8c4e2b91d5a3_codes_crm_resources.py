"""codes_crm_resources

Revision ID: 8c4e2b91d5a3
Revises: 3f9a1c2d7b10
Create Date: 2026-10-19 14:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '8c4e2b91d5a3'
down_revision: Union[str, Sequence[str], None] = '3f9a1c2d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    'code_type_enum': ('DISCOUNT', 'PROMOTION'),
    'code_status_enum': ('ACTIVE', 'INACTIVE'),
    'crm_contact_status_enum': (
        'LEAD', 'CONTACTED', 'QUALIFIED', 'CONVERTED', 'LOST'
    ),
    'resource_type_enum': ('ARTICLE', 'VIDEO', 'DOCUMENT', 'LINK'),
    'resource_audience_enum': ('PARENTS', 'COACHES', 'KIDS', 'ALL'),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema - Add discount codes, CRM contacts and resources."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'codes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('type', _enum('code_type_enum'), nullable=False),
        sa.Column('discount_percentage', sa.Float(), nullable=True),
        sa.Column('discount_amount', sa.Float(), nullable=True),
        sa.Column('expiry_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('usage_limit', sa.Integer(), nullable=False),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('status', _enum('code_status_enum'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_codes_code', 'codes', ['code'], unique=True)

    op.create_table(
        'crm_contacts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('status', _enum('crm_contact_status_enum'), nullable=False),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('notes', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_crm_contacts_parent_id', 'crm_contacts', ['parent_id'])
    op.create_index('ix_crm_contacts_status', 'crm_contacts', ['status'])

    op.create_table(
        'resources',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', _enum('resource_type_enum'), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('file_url', sa.String(), nullable=True),
        sa.Column('external_url', sa.String(), nullable=True),
        sa.Column('target_audience', _enum('resource_audience_enum'), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    """Downgrade schema - Drop discount codes, CRM contacts and resources."""
    for table in ('resources', 'crm_contacts', 'codes'):
        op.drop_table(table)

    bind = op.get_bind()
    for name in ENUMS:
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
