"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2024-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('plan_type', sa.Enum('free', 'premium', name='plantype'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True, default=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Forms table; fields, settings and theme are JSON documents
    op.create_table(
        'forms',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(512), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('draft', 'published', name='formstatus'), nullable=False),
        sa.Column('fields', sa.JSON(), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.Column('theme', sa.JSON(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_forms_owner_id', 'forms', ['owner_id'])
    op.create_index('ix_forms_status', 'forms', ['status'])

    # Submissions table
    op.create_table(
        'submissions',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('form_id', sa.String(32), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('geo_location', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_submissions_form_id', 'submissions', ['form_id'])
    op.create_index('ix_submissions_created_at', 'submissions', ['created_at'])

    # View records table (append-only)
    op.create_table(
        'view_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('form_id', sa.String(32), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('geo_location', sa.JSON(), nullable=True),
        sa.Column('referrer', sa.String(1024), nullable=True),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_view_records_id', 'view_records', ['id'])
    op.create_index('ix_view_records_form_id', 'view_records', ['form_id'])
    op.create_index('ix_view_records_timestamp', 'view_records', ['timestamp'])


def downgrade() -> None:
    op.drop_table('view_records')
    op.drop_table('submissions')
    op.drop_table('forms')
    op.drop_table('users')

    # Drop enums
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('DROP TYPE IF EXISTS formstatus')
        op.execute('DROP TYPE IF EXISTS plantype')
